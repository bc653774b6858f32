from __future__ import annotations

from typing import TYPE_CHECKING

from ..runtime import Environment, ExecResult, LoxRuntimeError
from ..tree import Tree
from .helpers import is_truthy as _is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def exec_if(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    if len(n.children) not in (2, 3):
        raise LoxRuntimeError("Malformed if statement")

    cond_node, then_node, *rest = n.children

    if _is_truthy(interp.evaluate(cond_node, env)):
        return interp.execute(then_node, env)

    if rest:
        return interp.execute(rest[0], env)

    return None

def exec_while(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    if len(n.children) != 2:
        raise LoxRuntimeError("Malformed while statement")

    cond_node, body_node = n.children

    while _is_truthy(interp.evaluate(cond_node, env)):
        result = interp.execute(body_node, env)

        # a return unwinds past the loop; only the call boundary consumes it
        if result is not None:
            return result

    return None
