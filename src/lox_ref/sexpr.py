"""Read the AST printer's output back into an expression tree.

``read_sexpr(print_ast(e))`` rebuilds *e* up to operator token lines, so
printing it again gives the same text. Only the evaluable variants are
readable; the reserved ones have no grammar here.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from lark import Lark, Transformer, UnexpectedInput
from lark.exceptions import VisitError
from lark.visitors import v_args

from .ast import Binary, Comma, Expr, Grouping, Literal, Ternary, Unary
from .token_types import TT, Token
from .values import FALSE, NIL, TRUE, LoxNumber, LoxString

GRAMMAR_PATH = Path(__file__).with_name("sexpr.lark")

UNARY_OPS = {
    '-': TT.MINUS,
    '!': TT.BANG,
}

BINARY_OPS = {
    '+': TT.PLUS,
    '-': TT.MINUS,
    '*': TT.STAR,
    '/': TT.SLASH,
    '>': TT.GREATER,
    '>=': TT.GREATER_EQUAL,
    '<': TT.LESS,
    '<=': TT.LESS_EQUAL,
    '==': TT.EQUAL_EQUAL,
    '!=': TT.BANG_EQUAL,
}

_ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)


class SexprError(Exception):
    """Malformed S-expression text"""
    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line else message
        )


@v_args(inline=True)
class _ToExpr(Transformer):
    def start(self, expr: Expr) -> Expr:
        return expr

    def number(self, tok) -> Literal:
        return Literal(LoxNumber(float(tok)))

    def string(self, tok) -> Literal:
        return Literal(LoxString(_ESCAPE_RE.sub(r'\1', str(tok)[1:-1])))

    def true(self) -> Literal:
        return Literal(TRUE)

    def false(self) -> Literal:
        return Literal(FALSE)

    def nil(self) -> Literal:
        return Literal(NIL)

    def group(self, inner: Expr) -> Grouping:
        return Grouping(inner)

    def ternary(self, cond: Expr, then_branch: Expr, else_branch: Expr) -> Ternary:
        return Ternary(cond, then_branch, else_branch)

    def comma(self, *exprs: Expr) -> Comma:
        return Comma(tuple(exprs))

    def operation(self, op, *operands: Expr) -> Expr:
        lexeme = str(op)
        if len(operands) == 1:
            if lexeme not in UNARY_OPS:
                raise SexprError(f"'{lexeme}' is not a unary operator", op.line, op.column)
            return Unary(Token(UNARY_OPS[lexeme], lexeme), operands[0])

        if lexeme not in BINARY_OPS:
            raise SexprError(f"'{lexeme}' is not a binary operator", op.line, op.column)
        left, right = operands
        return Binary(left, Token(BINARY_OPS[lexeme], lexeme), right)


@lru_cache(maxsize=None)
def make_reader() -> Lark:
    return Lark(
        GRAMMAR_PATH.read_text(encoding="utf-8"),
        parser="lalr",
        start="start",
        propagate_positions=False,
        maybe_placeholders=False,
    )


def read_sexpr(text: str) -> Expr:
    try:
        tree = make_reader().parse(text)
    except UnexpectedInput as exc:
        # UnexpectedEOF reports line/column -1
        line = max(getattr(exc, "line", 0) or 0, 0)
        column = max(getattr(exc, "column", 0) or 0, 0)
        raise SexprError("Unexpected input", line, column) from exc

    try:
        return _ToExpr().transform(tree)
    except VisitError as exc:
        if isinstance(exc.orig_exc, SexprError):
            raise exc.orig_exc from None
        raise
