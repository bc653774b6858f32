"""mlox: a tree-walking interpreter for a small Lox-family scripting language."""

from .evaluator import Interpreter
from .lexer_rd import LexError
from .parser_rd import ParseError
from .runner import run
from .types import (
    LoxArityError,
    LoxRuntimeError,
    LoxTypeError,
    NotCallableError,
    UndefinedVariableError,
)

__all__ = [
    "Interpreter",
    "LexError",
    "LoxArityError",
    "LoxRuntimeError",
    "LoxTypeError",
    "NotCallableError",
    "ParseError",
    "UndefinedVariableError",
    "run",
]
