from __future__ import annotations

import math
import os
from typing import Optional

from .types import (
    LoxValue,
    LoxNil,
    LoxNumber,
    LoxString,
    LoxBool,
    LoxFn,
    NativeFunction,
)

DEBUG_PY_TRACE_ENV = "MLOX_DEBUG_PY_TRACE"


def debug_py_trace_enabled() -> bool:
    """Python tracebacks for runtime errors are shown only when this env var is set."""
    return os.environ.get(DEBUG_PY_TRACE_ENV, "") not in ("", "0")


def lox_equals(lhs: LoxValue, rhs: LoxValue) -> bool:
    match (lhs, rhs):
        case (LoxNil(), LoxNil()):
            return True
        case (LoxNumber(value=a), LoxNumber(value=b)):
            return a == b
        case (LoxString(value=a), LoxString(value=b)):
            return a == b
        case (LoxBool(value=a), LoxBool(value=b)):
            return a == b
        case (
            (LoxFn() | NativeFunction(), LoxFn() | NativeFunction())
        ):
            return lhs is rhs
        case _:
            return False


def format_number(num: float) -> str:
    if math.isnan(num):
        return "NaN"

    if math.isinf(num):
        return "Infinity" if num > 0 else "-Infinity"

    if num == 0.0 and math.copysign(1.0, num) < 0:
        return "-0"

    if num.is_integer():
        return str(int(num))

    return repr(num)


def stringify(value: Optional[LoxValue]) -> str:
    if isinstance(value, LoxString):
        return value.value

    if isinstance(value, LoxNumber):
        return format_number(value.value)

    if isinstance(value, LoxBool):
        return "true" if value.value else "false"

    if isinstance(value, LoxNil) or value is None:
        return "nil"

    return repr(value)
