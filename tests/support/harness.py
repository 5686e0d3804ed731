from __future__ import annotations

import io
import math
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from lox_ref.ast import Expr
from lox_ref.errors import ErrorReporter, EvalNotImplemented, LoxRuntimeError
from lox_ref.evaluator import evaluate
from lox_ref.lexer import tokenize
from lox_ref.parser import parse
from lox_ref.printer import print_ast
from lox_ref.token_types import TT, Token
from lox_ref.values import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue

RuntimeExpectation = Optional[Tuple[str, object]]

__all__ = [
    "TT",
    "Token",
    "ErrorReporter",
    "EvalNotImplemented",
    "LoxRuntimeError",
    "quiet_reporter",
    "lex",
    "lex_types",
    "parse_text",
    "parse_ok",
    "print_text",
    "eval_text",
    "verify_value",
    "run_runtime_case",
    "RuntimeExpectation",
]


def quiet_reporter() -> ErrorReporter:
    """Reporter that records messages without writing to stderr."""
    return ErrorReporter(stream=io.StringIO())


def lex(code: str, reporter: Optional[ErrorReporter] = None) -> List[Token]:
    return tokenize(code, reporter if reporter is not None else quiet_reporter())


def lex_types(code: str) -> Tuple[TT, ...]:
    """Token types of *code* without the trailing EOF."""
    return tuple(tok.type for tok in lex(code)[:-1])


def parse_text(code: str) -> Tuple[Optional[Expr], ErrorReporter]:
    """Lex and parse with one quiet reporter; return the tree and the reporter."""
    reporter = quiet_reporter()
    tree = parse(tokenize(code, reporter), reporter)
    return tree, reporter


def parse_ok(code: str) -> Expr:
    tree, reporter = parse_text(code)
    assert not reporter.had_error, f"unexpected syntax errors: {reporter.errors}"
    assert tree is not None
    return tree


def print_text(code: str) -> str:
    return print_ast(parse_ok(code))


def eval_text(code: str) -> LoxValue:
    """Parse cleanly, then evaluate; runtime errors propagate."""
    return evaluate(parse_ok(code))


def verify_value(value: LoxValue, kind: str, expected: object) -> None:
    """Assert runtime result shape and value."""
    match kind:
        case "string":
            assert isinstance(
                value, LoxString
            ), f"expected LoxString, got {type(value).__name__}"
            assert (
                value.value == expected
            ), f"expected {expected!r}, got {value.value!r}"
            return
        case "number":
            assert isinstance(
                value, LoxNumber
            ), f"expected number, got {type(value).__name__}"
            if isinstance(expected, float) and math.isnan(expected):
                assert math.isnan(value.value), f"expected NaN, got {value.value}"
                return
            assert (
                value.value == float(expected)
                or abs(value.value - float(expected)) <= 1e-9
            ), f"expected {expected}, got {value.value}"
            return
        case "bool":
            assert isinstance(
                value, LoxBool
            ), f"expected bool, got {type(value).__name__}"
            assert value.value is bool(
                expected
            ), f"expected {expected}, got {value.value}"
            return
        case "nil":
            assert isinstance(
                value, LoxNil
            ), f"expected nil, got {type(value).__name__}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind!r}")


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            eval_text(source)
        return

    result = eval_text(source)
    if expectation is not None:
        verify_value(result, expectation[0], expectation[1])
