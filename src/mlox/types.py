from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple
from typing_extensions import Protocol, TypeAlias, TypeGuard

from .tree import Tree

if TYPE_CHECKING:
    from .evaluator import Interpreter

# ---------- Value Model ----------

@dataclass(frozen=True)
class LoxNil:
    pass

@dataclass(frozen=True)
class LoxNumber:
    value: float

@dataclass(frozen=True)
class LoxString:
    value: str

@dataclass(frozen=True)
class LoxBool:
    value: bool

@dataclass(eq=False)
class LoxFn:
    """User-defined function closed over the environment it was declared in."""
    name: str
    params: List[str]
    body: List[Tree]
    closure: 'Environment'

    def arity(self) -> int:
        return len(self.params)

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        from . import runtime
        return runtime.call_loxfn(self, arguments, interpreter)

    def __repr__(self) -> str:
        return f"<fn {self.name}>"

NativeFn = Callable[['Interpreter', List['LoxValue']], 'LoxValue']

@dataclass(frozen=True, eq=False)
class NativeFunction:
    name: str
    arity_count: int
    fn: NativeFn

    def arity(self) -> int:
        return self.arity_count

    def call(self, interpreter: 'Interpreter', arguments: List['LoxValue']) -> 'LoxValue':
        return _ensure_lox_value(self.fn(interpreter, arguments))

    def __repr__(self) -> str:
        return f"<native fn {self.name}>"

LoxValue: TypeAlias = (
    LoxNil
    | LoxNumber
    | LoxString
    | LoxBool
    | LoxFn
    | NativeFunction
)

class LoxCallable(Protocol):
    def arity(self) -> int: ...
    def call(self, interpreter: 'Interpreter', arguments: List[LoxValue]) -> LoxValue: ...

# ---------- Control signal ----------

@dataclass(frozen=True)
class Returning:
    """A `return` in flight: carried up through blocks and loops to the call boundary."""
    value: LoxValue

# None means the statement completed normally.
ExecResult: TypeAlias = Optional[Returning]

# ---------- Environment ----------

class Environment:
    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.vars: Dict[str, LoxValue] = {}

        if parent is None and Builtins.natives:
            for name, native in Builtins.natives.items():
                self.vars[name] = native

    def define(self, name: str, val: LoxValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> LoxValue:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.vars:
                return env.vars[name]
            env = env.parent

        raise UndefinedVariableError(name)

    def assign(self, name: str, val: LoxValue) -> None:
        env: Optional[Environment] = self

        while env is not None:
            if name in env.vars:
                env.vars[name] = val
                return
            env = env.parent

        raise UndefinedVariableError(name)

# ---------- Exceptions ----------

class LoxRuntimeError(Exception):
    lox_meta: Optional[object]
    lox_py_trace: Optional[TracebackType]

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.lox_meta = None
        self.lox_py_trace = None

    def __str__(self) -> str:
        msg = super().__str__()

        meta = getattr(self, "lox_meta", None)
        if meta is None:
            return msg

        line = getattr(meta, "line", None)
        col = getattr(meta, "column", None)

        if line is None:
            return msg

        if col is None:
            return f"{msg} (line {line})"

        return f"{msg} (line {line}, col {col})"

class UndefinedVariableError(LoxRuntimeError):
    def __init__(self, name: str):
        super().__init__(f"Undefined variable '{name}'.")
        self.name = name

class LoxTypeError(LoxRuntimeError):
    def __init__(self, message: str, operator: Optional[str] = None):
        super().__init__(message)
        self.operator = operator

class NotCallableError(LoxRuntimeError):
    def __init__(self, value: LoxValue):
        super().__init__(f"Can only call functions; got {type_name(value)}.")
        self.value = value

class LoxArityError(LoxRuntimeError):
    def __init__(self, expected: int, got: int):
        super().__init__(f"Expected {expected} arguments but got {got}.")
        self.expected = expected
        self.got = got

_LOX_VALUE_TYPES: Tuple[type, ...] = (
    LoxNil,
    LoxNumber,
    LoxString,
    LoxBool,
    LoxFn,
    NativeFunction,
)

_TYPE_NAMES: Dict[type, str] = {
    LoxNil: "nil",
    LoxNumber: "number",
    LoxString: "string",
    LoxBool: "boolean",
    LoxFn: "function",
    NativeFunction: "function",
}

def type_name(value: object) -> str:
    return _TYPE_NAMES.get(type(value), type(value).__name__)

def is_lox_value(value: object) -> TypeGuard[LoxValue]:
    return isinstance(value, _LOX_VALUE_TYPES)

def is_callable(value: object) -> TypeGuard[LoxCallable]:
    return isinstance(value, (LoxFn, NativeFunction))

def _ensure_lox_value(value: object) -> LoxValue:
    if value is None:
        return LoxNil()
    if is_lox_value(value):
        return value
    raise LoxRuntimeError(f"Unexpected value type {type(value).__name__}")

class Builtins:
    natives: Dict[str, NativeFunction] = {}
