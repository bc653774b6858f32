"""Built-in native functions (clock, date) registered via mlox.runtime."""

from __future__ import annotations

from datetime import datetime
from typing import List

from .runtime import register_native, LoxString, LoxValue

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

def format_clock(now: datetime) -> str:
    return f"{now.hour:02d}:{now.minute:02d}:{now.second:02d}"

def format_date(now: datetime) -> str:
    # month name is locale independent
    return f"{now.year:4d}-{_MONTHS[now.month - 1]}-{now.day:02d}"

@register_native("clock", arity=0)
def native_clock(_interpreter, args: List[LoxValue]) -> LoxString:
    return LoxString(format_clock(datetime.now()))

@register_native("date", arity=0)
def native_date(_interpreter, args: List[LoxValue]) -> LoxString:
    return LoxString(format_date(datetime.now()))
