from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union
from typing_extensions import TypeAlias, assert_never

# ---------- Value Model ----------

@dataclass(frozen=True)
class LoxNil:
    def __repr__(self) -> str:
        return "nil"

@dataclass(frozen=True)
class LoxBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

@dataclass(frozen=True)
class LoxNumber:
    value: float
    def __repr__(self) -> str:
        return format_number(self.value)

@dataclass(frozen=True)
class LoxString:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

LoxValue: TypeAlias = Union[LoxNil, LoxBool, LoxNumber, LoxString]

NIL = LoxNil()
TRUE = LoxBool(True)
FALSE = LoxBool(False)

def from_literal(raw: object) -> LoxValue:
    """Wrap a token literal (or a plain Python constant) as a runtime value."""
    match raw:
        case None:
            return NIL
        case bool(b):
            return LoxBool(b)
        case int() | float():
            return LoxNumber(float(raw))
        case str(s):
            return LoxString(s)
        case _:
            raise TypeError(f"cannot wrap {type(raw).__name__} as a Lox value")

def format_number(num: float) -> str:
    if math.isnan(num):
        return "NaN"
    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"
    # integral floats drop the trailing ".0"; huge ones keep the exponent form
    if num.is_integer() and abs(num) < 1e21:
        return str(int(num))
    return repr(num)

def stringify(value: LoxValue) -> str:
    """Render a value the way the driver prints results."""
    match value:
        case LoxNil():
            return "nil"
        case LoxBool(value=b):
            return "true" if b else "false"
        case LoxNumber(value=num):
            return format_number(num)
        case LoxString(value=s):
            return s
        case _:
            assert_never(value)
