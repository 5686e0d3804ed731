from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import pytest

from tests.support.harness import TT, lex, lex_types, quiet_reporter
from lox_ref.lexer import Lexer, tokenize


@dataclass(frozen=True)
class Case:
    """Unified lexer case payload."""

    name: str
    source: str
    expected: Optional[Tuple[Tuple[TT, str, object], ...]] = None
    expected_types: Optional[Tuple[TT, ...]] = None
    expected_lines: Optional[Tuple[Tuple[str, int], ...]] = None
    msg: Optional[str] = None


BASIC_TOKEN_CASES: List[Case] = [
    Case("number-int", "123", expected=((TT.NUMBER, "123", 123.0),)),
    Case("number-float", "3.14", expected=((TT.NUMBER, "3.14", 3.14),)),
    Case("number-leading-zero", "007", expected=((TT.NUMBER, "007", 7.0),)),
    Case("ident-single", "x", expected=((TT.IDENTIFIER, "x", None),)),
    Case("ident-snake", "foo_bar1", expected=((TT.IDENTIFIER, "foo_bar1", None),)),
    Case("ident-underscore", "_x", expected=((TT.IDENTIFIER, "_x", None),)),
    Case("string", '"hello"', expected=((TT.STRING, '"hello"', "hello"),)),
    Case("string-empty", '""', expected=((TT.STRING, '""', ""),)),
    Case("string-no-escapes", r'"a\n"', expected=((TT.STRING, r'"a\n"', r"a\n"),)),
    Case("bool-true", "true", expected=((TT.TRUE, "true", None),)),
    Case("bool-false", "false", expected=((TT.FALSE, "false", None),)),
    Case("nil", "nil", expected=((TT.NIL, "nil", None),)),
]

OPERATOR_CASES: List[Case] = [
    Case("bang-equal", "!=", expected_types=(TT.BANG_EQUAL,)),
    Case("equal-equal", "==", expected_types=(TT.EQUAL_EQUAL,)),
    Case("less-equal", "<=", expected_types=(TT.LESS_EQUAL,)),
    Case("greater-equal", ">=", expected_types=(TT.GREATER_EQUAL,)),
    Case("bang-bang", "!!", expected_types=(TT.BANG, TT.BANG)),
    Case("equal-triple", "===", expected_types=(TT.EQUAL_EQUAL, TT.EQUAL)),
    Case("less-greater", "<>", expected_types=(TT.LESS, TT.GREATER)),
    Case(
        "punctuation",
        "(){},.;",
        expected_types=(
            TT.LEFT_PAREN,
            TT.RIGHT_PAREN,
            TT.LEFT_BRACE,
            TT.RIGHT_BRACE,
            TT.COMMA,
            TT.DOT,
            TT.SEMICOLON,
        ),
    ),
    Case(
        "arith",
        "-+/*",
        expected_types=(TT.MINUS, TT.PLUS, TT.SLASH, TT.STAR),
    ),
    Case("ternary-marks", "?:", expected_types=(TT.QUESTION, TT.COLON)),
    Case("trailing-dot", "1.", expected_types=(TT.NUMBER, TT.DOT)),
    Case("leading-dot", ".5", expected_types=(TT.DOT, TT.NUMBER)),
    Case("method-like", "1.foo", expected_types=(TT.NUMBER, TT.DOT, TT.IDENTIFIER)),
]

KEYWORD_CASES: List[Case] = [
    Case(word, word, expected_types=(kind,))
    for word, kind in Lexer.KEYWORDS.items()
] + [
    Case("keyword-prefix-ident", "classy", expected_types=(TT.IDENTIFIER,)),
    Case("keyword-case-sensitive", "Nil", expected_types=(TT.IDENTIFIER,)),
    Case("keyword-suffix-ident", "or_else", expected_types=(TT.IDENTIFIER,)),
]

POSITION_CASES: List[Case] = [
    Case("simple-lines", "x\ny\n  z", expected_lines=(("x", 1), ("y", 2), ("z", 3))),
    Case("crlf-lines", "a\r\nb", expected_lines=(("a", 1), ("b", 2))),
    Case(
        "comment-lines",
        "a // note\nb",
        expected_lines=(("a", 1), ("b", 2)),
    ),
    Case(
        "multiline-string",
        '"one\ntwo" x',
        expected_lines=(('"one\ntwo"', 2), ("x", 2)),
    ),
]

LEX_ERROR_CASES: List[Case] = [
    Case(
        "unexpected-char",
        "1 @ 2",
        expected_types=(TT.NUMBER, TT.NUMBER),
        msg="[line 1] Error: Unexpected character.",
    ),
    Case(
        "unterminated-string",
        '"abc',
        expected_types=(),
        msg="[line 1] Error: Unterminated string.",
    ),
    Case(
        "unterminated-string-line2",
        'x\n"abc\ndef',
        expected_types=(TT.IDENTIFIER,),
        msg="[line 2] Error: Unterminated string.",
    ),
    Case(
        "non-ascii-digit",
        "٣",
        expected_types=(),
        msg="[line 1] Error: Unexpected character.",
    ),
    Case(
        "non-ascii-letter",
        "é",
        expected_types=(),
        msg="[line 1] Error: Unexpected character.",
    ),
    Case(
        "non-ascii-ident-tail",
        "x²",
        expected_types=(TT.IDENTIFIER,),
        msg="[line 1] Error: Unexpected character.",
    ),
]


@pytest.mark.parametrize("case", BASIC_TOKEN_CASES, ids=lambda case: case.name)
def test_basic_tokens(case: Case) -> None:
    tokens = lex(case.source)[:-1]

    assert case.expected is not None
    assert len(tokens) == len(case.expected)
    for token, (kind, lexeme, literal) in zip(tokens, case.expected):
        assert token.type == kind
        assert token.lexeme == lexeme
        assert token.literal == literal


@pytest.mark.parametrize("case", OPERATOR_CASES, ids=lambda case: case.name)
def test_operators(case: Case) -> None:
    assert lex_types(case.source) == case.expected_types


@pytest.mark.parametrize("case", KEYWORD_CASES, ids=lambda case: case.name)
def test_keywords(case: Case) -> None:
    assert lex_types(case.source) == case.expected_types


def test_comments_run_to_end_of_line() -> None:
    assert lex_types("1 // 2 + 3\n+ 4") == (TT.NUMBER, TT.PLUS, TT.NUMBER)


def test_comment_at_end_of_input() -> None:
    assert lex_types("1 //") == (TT.NUMBER,)


def test_number_literal_is_float() -> None:
    tok = lex("42")[0]
    assert isinstance(tok.literal, float)


@pytest.mark.parametrize("case", POSITION_CASES, ids=lambda case: case.name)
def test_position_tracking(case: Case) -> None:
    assert case.expected_lines is not None
    lines = {tok.lexeme: tok.line for tok in lex(case.source)}

    for lexeme, expected_line in case.expected_lines:
        assert lexeme in lines
        assert lines[lexeme] == expected_line


@pytest.mark.parametrize("case", LEX_ERROR_CASES, ids=lambda case: case.name)
def test_lex_errors_report_and_continue(case: Case) -> None:
    reporter = quiet_reporter()
    tokens = lex(case.source, reporter)

    assert reporter.had_error
    assert not reporter.had_runtime_error
    assert case.msg in reporter.errors
    assert tuple(tok.type for tok in tokens[:-1]) == case.expected_types
    assert tokens[-1].type == TT.EOF


def test_errors_are_all_collected() -> None:
    reporter = quiet_reporter()
    lex("@ # $", reporter)
    assert len(reporter.errors) == 3


@pytest.mark.parametrize(
    "source, line",
    [
        pytest.param("", 1, id="empty"),
        pytest.param("1 + 2", 1, id="one-line"),
        pytest.param("1\n\n", 3, id="trailing-newlines"),
    ],
)
def test_single_eof_on_last_line(source: str, line: int) -> None:
    tokens = tokenize(source, quiet_reporter())
    eofs = [tok for tok in tokens if tok.type == TT.EOF]

    assert len(eofs) == 1
    assert tokens[-1] is eofs[0]
    assert eofs[0].line == line
    assert eofs[0].lexeme == ""


def test_token_str_matches_dump_format() -> None:
    num, string, plus = lex('1 "a" +')[:3]

    assert str(num) == "NUMBER 1 1.0"
    assert str(string) == 'STRING "a" a'
    assert str(plus) == "PLUS + nil"


def test_default_reporter_writes_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    tokenize("@")
    assert "Unexpected character." in capsys.readouterr().err
