"""Expression AST for the Lox core.

A closed set of immutable node variants. Consumers (evaluator, printer)
dispatch with ``match`` and close every match with ``assert_never`` so a new
variant cannot slip past them unhandled.

Child sequences are tuples; nodes are built bottom-up from finished children,
so a tree is acyclic by construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union
from typing_extensions import TypeAlias, TypeGuard

from .token_types import Token
from .values import LoxValue


@dataclass(frozen=True)
class Literal:
    value: LoxValue


@dataclass(frozen=True)
class Grouping:
    expression: Expr


@dataclass(frozen=True)
class Unary:
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary:
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Comma:
    expressions: Tuple[Expr, ...]

    def __post_init__(self) -> None:
        if not self.expressions:
            raise ValueError("Comma needs at least one operand")


@dataclass(frozen=True)
class Ternary:
    condition: Expr
    then_branch: Expr
    else_branch: Expr


# Reserved for statement/binding support; printed, never evaluated.

@dataclass(frozen=True)
class Assign:
    name: Token
    value: Expr


@dataclass(frozen=True)
class Call:
    callee: Expr
    paren: Token
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True)
class Get:
    object: Expr
    name: Token


@dataclass(frozen=True)
class Set:
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class This:
    keyword: Token


@dataclass(frozen=True)
class Super:
    keyword: Token
    method: Token


@dataclass(frozen=True)
class Logical:
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable:
    name: Token


Expr: TypeAlias = Union[
    Literal,
    Grouping,
    Unary,
    Binary,
    Comma,
    Ternary,
    Assign,
    Call,
    Get,
    Set,
    This,
    Super,
    Logical,
    Variable,
]

RESERVED_VARIANTS = (Assign, Call, Get, Set, This, Super, Logical, Variable)


def is_expr(node: object) -> TypeGuard[Expr]:
    return isinstance(node, (Literal, Grouping, Unary, Binary, Comma, Ternary) + RESERVED_VARIANTS)


def children(node: Expr) -> Tuple[Expr, ...]:
    """Direct sub-expressions of *node*, left to right."""
    match node:
        case Literal() | This() | Super() | Variable():
            return ()
        case Grouping(expression=inner):
            return (inner,)
        case Unary(right=right):
            return (right,)
        case Binary(left=left, right=right) | Logical(left=left, right=right):
            return (left, right)
        case Comma(expressions=exprs):
            return exprs
        case Ternary(condition=c, then_branch=t, else_branch=e):
            return (c, t, e)
        case Assign(value=value):
            return (value,)
        case Call(callee=callee, arguments=args):
            return (callee, *args)
        case Get(object=obj):
            return (obj,)
        case Set(object=obj, value=value):
            return (obj, value)
    raise TypeError(f"not an expression node: {type(node).__name__}")
