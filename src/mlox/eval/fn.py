from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

from ..runtime import Environment, ExecResult, LoxFn, LoxRuntimeError
from ..tree import Tree, is_tree, tree_children, tree_label
from .common import expect_ident_token as _expect_ident_token, ident_token_value as _ident_token_value

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def extract_param_names(params_node: Any) -> List[str]:
    if params_node is None:
        return []

    names: List[str] = []

    for p in tree_children(params_node):
        name = _ident_token_value(p)

        if name is None:
            raise LoxRuntimeError(f"Unsupported parameter node in function declaration: {p}")

        names.append(name)

    return names

def exec_fun_decl(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    if not n.children:
        raise LoxRuntimeError("Malformed function declaration")

    name = _expect_ident_token(n.children[0], "Function name")
    params_node = None
    body_node = None

    for node in n.children[1:]:
        if params_node is None and is_tree(node) and tree_label(node) == 'params':
            params_node = node
        elif body_node is None and is_tree(node) and tree_label(node) == 'block':
            body_node = node

    if body_node is None:
        raise LoxRuntimeError(f"Function '{name}' has no body")

    # capture the live scope, not a snapshot of its bindings
    fn_value = LoxFn(
        name=name,
        params=extract_param_names(params_node),
        body=list(body_node.children),
        closure=env,
    )
    env.define(name, fn_value)

    return None
