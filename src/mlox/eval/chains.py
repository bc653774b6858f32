from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..runtime import Environment, LoxRuntimeError, LoxValue, call_value
from ..tree import Tree, tree_children, tree_label

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_args_node(args_node: Tree, env: Environment, interp: 'Interpreter') -> List[LoxValue]:
    if tree_label(args_node) != 'arguments':
        raise LoxRuntimeError("Malformed call arguments")

    return [interp.evaluate(arg, env) for arg in tree_children(args_node)]

def eval_call(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    callee_node, args_node = n.children
    callee = interp.evaluate(callee_node, env)
    args = eval_args_node(args_node, env, interp)

    return call_value(callee, args, interp)
