"""
Recursive Descent Parser for Lox expressions

Structure:
- Lexer: token stream from source (see lexer.py)
- Parser: one method per precedence level, lowest first
- AST: frozen dataclass variants from ast.py

Syntax errors go to the ErrorReporter. A failed expect() raises the internal
ParseError, which unwinds to parse() and turns into a None result. A binary
operator with no left operand is reported but not fatal: the right-hand side
stands in for the missing expression so parsing can carry on.
"""

from contextlib import contextmanager
from typing import Callable, Iterator, Optional, List, Sequence

from .ast import Binary, Comma, Expr, Grouping, Literal, Ternary, Unary
from .errors import ErrorReporter, ParseError
from .token_types import STATEMENT_STARTS, TT, Token
from .values import FALSE, NIL, TRUE, from_literal

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Recursive descent parser for Lox expressions.

    Expression precedence (lowest to highest):
    1. comma (,)
    2. ternary (? :)
    3. equality (==, !=)
    4. comparison (<, <=, >, >=)
    5. term (+, -)
    6. factor (*, /)
    7. unary (!, -)
    8. primary (literals, parens)
    """

    EQUALITY_OPS = (TT.BANG_EQUAL, TT.EQUAL_EQUAL)
    COMPARISON_OPS = (TT.GREATER, TT.GREATER_EQUAL, TT.LESS, TT.LESS_EQUAL)
    TERM_OPS = (TT.MINUS, TT.PLUS)
    FACTOR_OPS = (TT.SLASH, TT.STAR)
    UNARY_OPS = (TT.BANG, TT.MINUS)

    # Each nested group costs about a dozen Python frames
    MAX_NESTING = 50

    def __init__(self, tokens: Sequence[Token], reporter: Optional[ErrorReporter] = None):
        if not tokens or tokens[-1].type != TT.EOF:
            raise ValueError("token sequence must end with an EOF token")
        self.tokens = tokens
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.pos = 0
        self.depth = 0

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self) -> Token:
        """Current token"""
        return self.tokens[self.pos]

    def previous(self) -> Token:
        """Most recently consumed token"""
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TT.EOF

    def advance(self) -> Token:
        """Consume current token; never moves past EOF"""
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        if self.is_at_end():
            return False
        return self.peek().type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: str) -> Token:
        """Consume token of expected type or report and raise"""
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def error(self, token: Token, message: str) -> ParseError:
        """Report at *token* and build (not raise) the unwinding signal"""
        self.reporter.token_error(token, message)
        return ParseError(message, token)

    def synchronize(self) -> None:
        """Discard tokens up to the next statement boundary."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type == TT.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Optional[Expr]:
        """Parse one expression; None after an unrecoverable syntax error"""
        try:
            return self.parse_expr()
        except ParseError:
            return None

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expr(self) -> Expr:
        """expression -> comma"""
        return self.parse_comma_expr()

    def parse_comma_expr(self) -> Expr:
        """comma -> ternary ( "," ternary )*"""
        exprs: List[Expr] = [self.parse_ternary_expr()]

        while self.match(TT.COMMA):
            exprs.append(self.parse_ternary_expr())

        if len(exprs) == 1:
            return exprs[0]
        return Comma(tuple(exprs))

    def parse_ternary_expr(self) -> Expr:
        """ternary -> equality ( "?" equality ":" ternary )?"""
        expr = self.parse_equality_expr()

        if self.match(TT.QUESTION):
            then_branch = self.parse_equality_expr()
            self.expect(TT.COLON, "Expect ':' after then branch of ternary operator.")
            with self.nested():
                else_branch = self.parse_ternary_expr()  # Right associative
            return Ternary(expr, then_branch, else_branch)

        return expr

    def parse_equality_expr(self) -> Expr:
        """equality -> comparison ( ("!=" | "==") comparison )*"""
        missing = self.missing_left_operand(self.EQUALITY_OPS)
        if missing is not None:
            return missing

        return self._parse_left_assoc(self.parse_compare_expr, self.EQUALITY_OPS)

    def parse_compare_expr(self) -> Expr:
        """comparison -> term ( (">" | ">=" | "<" | "<=") term )*"""
        missing = self.missing_left_operand(self.COMPARISON_OPS)
        if missing is not None:
            return missing

        return self._parse_left_assoc(self.parse_add_expr, self.COMPARISON_OPS)

    def parse_add_expr(self) -> Expr:
        """term -> factor ( ("-" | "+") factor )*"""
        # A leading '-' is negation, so only '+' can be a missing-operand case
        missing = self.missing_left_operand((TT.PLUS,))
        if missing is not None:
            return missing

        return self._parse_left_assoc(self.parse_mul_expr, self.TERM_OPS)

    def parse_mul_expr(self) -> Expr:
        """factor -> unary ( ("/" | "*") unary )*"""
        missing = self.missing_left_operand(self.FACTOR_OPS)
        if missing is not None:
            return missing

        return self._parse_left_assoc(self.parse_unary_expr, self.FACTOR_OPS)

    def parse_unary_expr(self) -> Expr:
        """unary -> ("!" | "-") unary | primary"""
        if self.match(*self.UNARY_OPS):
            op = self.previous()
            with self.nested():
                right = self.parse_unary_expr()
            return Unary(op, right)

        return self.parse_primary_expr()

    def parse_primary_expr(self) -> Expr:
        """
        primary -> NUMBER | STRING | "true" | "false" | "nil" | "(" expression ")"

        Every branch consumes a token or raises.
        """
        if self.match(TT.FALSE):
            return Literal(FALSE)
        if self.match(TT.TRUE):
            return Literal(TRUE)
        if self.match(TT.NIL):
            return Literal(NIL)

        if self.match(TT.NUMBER, TT.STRING):
            return Literal(from_literal(self.previous().literal))

        if self.match(TT.LEFT_PAREN):
            with self.nested():
                expr = self.parse_expr()
            self.expect(TT.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        raise self.error(self.peek(), "Expect expression.")

    # ========================================================================
    # Helpers
    # ========================================================================

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Guard one level of recursive descent against runaway nesting"""
        if self.depth >= self.MAX_NESTING:
            raise self.error(self.peek(), "Expression nesting too deep.")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def _parse_left_assoc(self, operand: Callable[[], Expr], ops: Sequence[TT]) -> Expr:
        left = operand()

        while self.match(*ops):
            op = self.previous()
            right = operand()
            left = Binary(left, op, right)

        return left

    def missing_left_operand(self, ops: Sequence[TT]) -> Optional[Expr]:
        """
        Recover from a binary operator where an operand was expected.

        Consumes the operator, parses the right-hand side at equality level,
        reports the error and returns the right-hand side as a placeholder.
        """
        if not self.check(*ops):
            return None

        op = self.advance()
        with self.nested():
            right = self.parse_equality_expr()
        self.error(op, f"Binary operator '{op.lexeme}' requires left operand.")
        return right


def parse(tokens: Sequence[Token], reporter: Optional[ErrorReporter] = None) -> Optional[Expr]:
    """Parse a finished token sequence into one expression (or None)."""
    return Parser(tokens, reporter).parse()


def parse_source(source: str, reporter: Optional[ErrorReporter] = None) -> Optional[Expr]:
    """
    Tokenize and parse Lox source.

    Lex and syntax errors share one reporter; check ``reporter.had_error``
    before trusting the returned tree.
    """
    from .lexer import tokenize

    if reporter is None:
        reporter = ErrorReporter()
    return parse(tokenize(source, reporter), reporter)
