"""
Token Types for the Lox expression core

Shared between lexer, parser and printer to avoid circular dependencies.
"""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors grammar terminals"""

    # Single-character punctuation
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SEMICOLON = auto()
    SLASH = auto()
    STAR = auto()
    QUESTION = auto()
    COLON = auto()

    # One or two character operators
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literals
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Keywords
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # Special
    EOF = auto()


# Keywords that open a statement or declaration; the parser resynchronizes here.
STATEMENT_STARTS = frozenset({
    TT.CLASS,
    TT.FUN,
    TT.VAR,
    TT.FOR,
    TT.IF,
    TT.WHILE,
    TT.PRINT,
    TT.RETURN,
})

Literal = Union[str, float]


@dataclass(frozen=True)
class Token:
    """Token with source line"""

    type: TT
    lexeme: str
    literal: Optional[Literal] = None
    line: int = 0

    def __str__(self) -> str:
        return f"{self.type.name} {self.lexeme} {'nil' if self.literal is None else self.literal}"

    def __repr__(self):
        return f"Token({self.type.name}, {self.lexeme!r}, {self.line})"
