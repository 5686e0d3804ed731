from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .ast import Expr
from .errors import ErrorReporter, EvalNotImplemented
from .evaluator import interpret
from .lexer import tokenize
from .parser import parse
from .printer import print_ast
from .utils import debug_py_trace_enabled
from .values import LoxValue

# sysexits.h
EX_OK = 0
EX_FATAL = 1
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

USAGE = "Usage: lox [--ast|--tokens] [script | - | source]"

@dataclass
class RunResult:
    tree: Optional[Expr]
    value: Optional[LoxValue]
    reporter: ErrorReporter

def run(
    src: str,
    reporter: Optional[ErrorReporter]=None,
    emit: Callable[[str], None]=print,
    on_tree: Optional[Callable[[Expr], None]]=None,
) -> RunResult:
    """Lex, parse and (when both were clean) evaluate one expression.

    *on_tree* sees the parsed tree after a clean parse, before evaluation.
    """
    if reporter is None:
        reporter = ErrorReporter()

    tokens = tokenize(src, reporter)
    tree = parse(tokens, reporter)

    # A recovered parse still returns a tree; don't evaluate it.
    if tree is None or reporter.had_error:
        return RunResult(tree, None, reporter)

    if on_tree is not None:
        on_tree(tree)

    value = interpret(tree, reporter, emit)
    return RunResult(tree, value, reporter)

def exit_code(reporter: ErrorReporter) -> int:
    if reporter.had_error:
        return EX_DATAERR
    if reporter.had_runtime_error:
        return EX_SOFTWARE
    return EX_OK

def dump_tokens(src: str, reporter: ErrorReporter, emit: Callable[[str], None]=print) -> None:
    for tok in tokenize(src, reporter):
        emit(str(tok))

def dump_ast(src: str, reporter: ErrorReporter, emit: Callable[[str], None]=print) -> Optional[Expr]:
    tree = parse(tokenize(src, reporter), reporter)

    if tree is not None and not reporter.had_error:
        emit(print_ast(tree))
    return tree

def report_fatal(exc: BaseException) -> None:
    print(f"Fatal: {exc}", file=sys.stderr)
    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg == "-":
        return sys.stdin.read()

    candidate = Path(arg)
    try:
        exists = candidate.exists()
    except OSError:
        # e.g. source text longer than a file name may be
        exists = False

    if exists:
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[List[str]]=None) -> int:
    mode = "eval"
    arg = None
    args = sys.argv[1:] if argv is None else argv

    for token in args:
        if token == "--ast":
            mode = "ast"
            continue

        if token == "--tokens":
            mode = "tokens"
            continue

        if token in ("-h", "--help"):
            print(USAGE)
            return EX_OK

        if token.startswith("--"):
            print(f"Unknown flag: {token}\n{USAGE}", file=sys.stderr)
            return EX_USAGE

        if arg is None:
            arg = token
        else:
            print(USAGE, file=sys.stderr)
            return EX_USAGE

    if arg is None:
        if sys.stdin.isatty():
            from .repl import repl
            repl()
            return EX_OK
        arg = "-"

    try:
        source = _load_source(arg)
    except OSError:
        print(f"Error reading file: {arg}", file=sys.stderr)
        return EX_NOINPUT

    reporter = ErrorReporter()

    if mode == "tokens":
        dump_tokens(source, reporter)
        return exit_code(reporter)

    if mode == "ast":
        dump_ast(source, reporter)
        return exit_code(reporter)

    try:
        run(source, reporter)
    except (EvalNotImplemented, RecursionError) as exc:
        report_fatal(exc)
        return EX_FATAL

    return exit_code(reporter)

if __name__ == "__main__":
    sys.exit(main())
