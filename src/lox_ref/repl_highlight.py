"""prompt_toolkit lexer for live Lox syntax highlighting in the REPL."""

from __future__ import annotations

import io
from typing import Callable, List

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .errors import ErrorReporter
from .lexer import Lexer as LoxLexer
from .token_types import TT, Token

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "error": "bold ansired",
}

_KEYWORDS = {
    TT.AND, TT.CLASS, TT.ELSE, TT.FUN, TT.FOR, TT.IF, TT.OR,
    TT.PRINT, TT.RETURN, TT.SUPER, TT.THIS, TT.VAR, TT.WHILE,
}

_PUNCTUATION = {
    TT.LEFT_PAREN, TT.RIGHT_PAREN, TT.LEFT_BRACE, TT.RIGHT_BRACE,
    TT.COMMA, TT.DOT, TT.SEMICOLON,
}


def token_group(tok: Token) -> str:
    """Highlight group for one token."""
    if tok.type in _KEYWORDS:
        return "keyword"
    if tok.type in (TT.TRUE, TT.FALSE):
        return "boolean"
    if tok.type == TT.NIL:
        return "constant"
    if tok.type == TT.NUMBER:
        return "number"
    if tok.type == TT.STRING:
        return "string"
    if tok.type == TT.IDENTIFIER:
        return "identifier"
    if tok.type in _PUNCTUATION:
        return "punctuation"
    return "operator"


def highlight_line(text: str) -> StyleAndTextTuples:
    """Split one line into styled fragments.

    Gaps between tokens keep their text: whitespace stays unstyled, a ``//``
    comment gets the comment style, anything the lexer rejected is an error.
    """
    # errors surface on submit, not while typing
    reporter = ErrorReporter(stream=io.StringIO())
    tokens: List[Token] = LoxLexer(text, reporter).tokenize()

    result: StyleAndTextTuples = []
    pos = 0

    for tok in tokens:
        if tok.type == TT.EOF:
            break
        idx = text.find(tok.lexeme, pos)
        if idx < 0:
            continue
        if idx > pos:
            result.append(_gap_style(text[pos:idx]))
        result.append((GROUP_STYLE.get(token_group(tok), ""), tok.lexeme))
        pos = idx + len(tok.lexeme)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(_gap_style(text[pos:]))

    return result if result else [("", text)]


def _gap_style(gap: str) -> tuple[str, str]:
    stripped = gap.lstrip()
    if stripped.startswith("//"):
        return (GROUP_STYLE["comment"], gap)
    if stripped:
        return (GROUP_STYLE["error"], gap)
    return ("", gap)


class LoxHighlighter(Lexer):
    """prompt_toolkit Lexer that highlights Lox source using the scanner."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines

        # Pre-compute highlights for all lines.
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
