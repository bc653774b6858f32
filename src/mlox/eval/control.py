from __future__ import annotations

from typing import TYPE_CHECKING

from ..runtime import Environment, ExecResult, LoxNil, LoxValue, Returning
from ..tree import Tree
from ..utils import stringify

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def exec_return(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    value: LoxValue = interp.evaluate(n.children[0], env) if n.children else LoxNil()

    return Returning(value)

def exec_print(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    value = interp.evaluate(n.children[0], env)
    interp.write(stringify(value))

    return None

def exec_expr_stmt(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    interp.evaluate(n.children[0], env)

    return None
