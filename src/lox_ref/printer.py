"""Canonical parenthesized rendering of an expression tree, for diagnostics."""

from __future__ import annotations

from typing import List, Union

from typing_extensions import assert_never

from .ast import (
    Assign,
    Binary,
    Call,
    Comma,
    Expr,
    Get,
    Grouping,
    Literal,
    Logical,
    Set,
    Super,
    Ternary,
    This,
    Unary,
    Variable,
)
from .values import LoxString, LoxValue, stringify


def print_ast(expr: Expr) -> str:
    match expr:
        case Literal(value=value):
            return _literal(value)
        case Grouping(expression=inner):
            return _parenthesize("group", inner)
        case Unary(operator=op, right=right):
            return _parenthesize(op.lexeme, right)
        case Binary() | Logical():
            return _binary_chain(expr)
        case Comma(expressions=exprs):
            return _parenthesize(",", *exprs)
        case Ternary(condition=cond, then_branch=then_branch, else_branch=else_branch):
            return _parenthesize("?:", cond, then_branch, else_branch)
        case Assign(name=name, value=value):
            return _parenthesize(f"= {name.lexeme}", value)
        case Call(callee=callee, arguments=args):
            return _parenthesize("call", callee, *args)
        case Get(object=obj, name=name):
            return _parenthesize(f"get {name.lexeme}", obj)
        case Set(object=obj, name=name, value=value):
            return _parenthesize(f"set {name.lexeme}", obj, value)
        case This():
            return "this"
        case Super(method=method):
            return f"super.{method.lexeme}"
        case Variable(name=name):
            return name.lexeme
        case _:
            assert_never(expr)


def _binary_chain(expr: Union[Binary, Logical]) -> str:
    # left operand chains can be thousands deep; walk the spine iteratively
    spine: List[Union[Binary, Logical]] = []
    node: Expr = expr
    while isinstance(node, (Binary, Logical)):
        spine.append(node)
        node = node.left

    text = print_ast(node)
    for op_node in reversed(spine):
        text = f"({op_node.operator.lexeme} {text} {print_ast(op_node.right)})"
    return text


def _literal(value: LoxValue) -> str:
    if isinstance(value, LoxString):
        escaped = value.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return stringify(value)


def _parenthesize(name: str, *exprs: Expr) -> str:
    parts = [name]
    parts.extend(print_ast(e) for e in exprs)
    return "(" + " ".join(parts) + ")"
