from __future__ import annotations

import importlib
from typing import TYPE_CHECKING, List

from .types import (
    LoxNil, LoxNumber, LoxString, LoxBool, LoxFn, NativeFunction, NativeFn,
    LoxValue, Environment, Returning, ExecResult,
    LoxRuntimeError, LoxTypeError, LoxArityError, NotCallableError,
    UndefinedVariableError, Builtins, is_callable,
)

if TYPE_CHECKING:
    from .evaluator import Interpreter

_STDLIB_INITIALIZED = False

def init_stdlib() -> None:
    """Load stdlib modules (idempotent) so register_native hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("mlox.stdlib")
    _STDLIB_INITIALIZED = True

def register_native(name: str, *, arity: int = 0):
    """Register a native callable; every new global environment is seeded with it."""
    def dec(fn: NativeFn):
        Builtins.natives[name] = NativeFunction(name=name, arity_count=arity, fn=fn)
        return fn

    return dec

def call_value(callee: LoxValue, args: List[LoxValue], interpreter: 'Interpreter') -> LoxValue:
    if not is_callable(callee):
        raise NotCallableError(callee)

    expected = callee.arity()
    if len(args) != expected:
        raise LoxArityError(expected, len(args))

    return callee.call(interpreter, args)

def call_loxfn(fn: LoxFn, args: List[LoxValue], interpreter: 'Interpreter') -> LoxValue:
    """
    Call boundary for user functions:
    - the callee environment's parent is the closure, not the caller's scope
    - a `Returning` produced anywhere in the body stops here and becomes the result
    - falling off the end of the body yields nil
    """
    callee_env = Environment(parent=fn.closure)

    for name, val in zip(fn.params, args):
        callee_env.define(name, val)

    result = interpreter.execute_block(fn.body, callee_env)

    if isinstance(result, Returning):
        return result.value

    return LoxNil()
