from __future__ import annotations

import math
from typing import Callable, List, Optional

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
from .errors import ErrorReporter, EvalNotImplemented, LoxRuntimeError
from .token_types import TT, Token
from .values import LoxBool, LoxNil, LoxNumber, LoxString, LoxValue, stringify

Emit = Callable[[str], None]

# ---------------- Public API ----------------

def interpret(expr: Expr, reporter: ErrorReporter, emit: Emit = print) -> Optional[LoxValue]:
    """Evaluate *expr* and emit its rendering as one line.

    A LoxRuntimeError is reported and yields None with nothing emitted. Any
    other exception (EvalNotImplemented included) is not ours to handle.
    """
    try:
        value = evaluate(expr)
    except LoxRuntimeError as e:
        reporter.runtime_error(e)
        return None

    emit(stringify(value))
    return value

# ---------------- Core evaluator ----------------

def evaluate(expr: Expr) -> LoxValue:
    match expr:
        case Literal(value=value):
            return value
        case Grouping(expression=inner):
            return evaluate(inner)
        case Unary(operator=op, right=right_node):
            return eval_unary(op, evaluate(right_node))
        case Binary():
            return eval_binary_chain(expr)
        case Ternary(condition=cond, then_branch=then_branch, else_branch=else_branch):
            if is_truthy(evaluate(cond)):
                return evaluate(then_branch)
            return evaluate(else_branch)
        case Comma() | Assign() | Call() | Get() | Set() | This() | Super() | Logical() | Variable():
            raise EvalNotImplemented(type(expr).__name__)
        case _:
            assert_never(expr)

def eval_binary_chain(expr: Binary) -> LoxValue:
    """Fold a left-nested run of Binary nodes without recursing down the spine.

    Evaluation order matches the recursive rule: leftmost operand first, then
    each right operand just before its operator is applied.
    """
    spine: List[Binary] = []
    node: Expr = expr
    while isinstance(node, Binary):
        spine.append(node)
        node = node.left

    value = evaluate(node)
    for binary in reversed(spine):
        value = eval_binary(binary.operator, value, evaluate(binary.right))
    return value

def eval_unary(op: Token, right: LoxValue) -> LoxValue:
    match op.type:
        case TT.MINUS:
            return LoxNumber(-require_number(op, right))
        case TT.BANG:
            return LoxBool(not is_truthy(right))
        case _:
            raise EvalNotImplemented(f"unary '{op.lexeme}'")

def eval_binary(op: Token, left: LoxValue, right: LoxValue) -> LoxValue:
    match op.type:
        case TT.PLUS:
            return _add(op, left, right)
        case TT.MINUS:
            lhs, rhs = require_numbers(op, left, right)
            return LoxNumber(lhs - rhs)
        case TT.STAR:
            lhs, rhs = require_numbers(op, left, right)
            return LoxNumber(lhs * rhs)
        case TT.SLASH:
            lhs, rhs = require_numbers(op, left, right)
            return LoxNumber(_divide(lhs, rhs))
        case TT.GREATER:
            lhs, rhs = require_numbers(op, left, right)
            return LoxBool(lhs > rhs)
        case TT.GREATER_EQUAL:
            lhs, rhs = require_numbers(op, left, right)
            return LoxBool(lhs >= rhs)
        case TT.LESS:
            lhs, rhs = require_numbers(op, left, right)
            return LoxBool(lhs < rhs)
        case TT.LESS_EQUAL:
            lhs, rhs = require_numbers(op, left, right)
            return LoxBool(lhs <= rhs)
        case TT.EQUAL_EQUAL:
            return LoxBool(is_equal(left, right))
        case TT.BANG_EQUAL:
            return LoxBool(not is_equal(left, right))
        case _:
            raise EvalNotImplemented(f"binary '{op.lexeme}'")

def _add(op: Token, left: LoxValue, right: LoxValue) -> LoxValue:
    # no coercion between strings and numbers
    match (left, right):
        case (LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case _:
            raise LoxRuntimeError(op, "Operands must be both numbers or both strings.")

def _divide(lhs: float, rhs: float) -> float:
    if rhs == 0.0:
        if lhs == 0.0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs

# ---------------- Helpers ----------------

def is_truthy(value: LoxValue) -> bool:
    match value:
        case LoxNil():
            return False
        case LoxBool(value=b):
            return b
        case LoxNumber(value=num):
            return num != 0
        case LoxString():
            return True
        case _:
            assert_never(value)

def is_equal(left: LoxValue, right: LoxValue) -> bool:
    match (left, right):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case _:
            return False

def require_number(op: Token, value: LoxValue) -> float:
    if isinstance(value, LoxNumber):
        return value.value
    raise LoxRuntimeError(op, "Operand must be a number.")

def require_numbers(op: Token, left: LoxValue, right: LoxValue) -> tuple[float, float]:
    if isinstance(left, LoxNumber) and isinstance(right, LoxNumber):
        return left.value, right.value
    raise LoxRuntimeError(op, "Operands must be numbers.")
