from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from ..runtime import Environment, ExecResult
from ..tree import Tree, Node

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def execute_statements(statements: Iterable[Node], env: Environment, interp: 'Interpreter') -> ExecResult:
    """Run statements in order against `env`, stopping at the first pending return."""
    for stmt in statements:
        result = interp.execute(stmt, env)

        if result is not None:
            return result

    return None

def exec_block(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    # the enclosing scope stays current for the caller on every exit path:
    # the child scope only exists for the duration of this call
    return execute_statements(n.children, Environment(parent=env), interp)
