from __future__ import annotations

from typing import TYPE_CHECKING

from ..runtime import Environment, ExecResult, LoxNil, LoxValue
from ..tree import Tree
from .common import expect_ident_token

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_variable(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    name = expect_ident_token(n.children[0], "Variable reference")
    return env.get(name)

def eval_assign(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    """Assignment rebinds an existing variable wherever it lives; it never declares."""
    name_tok, value_node = n.children
    name = expect_ident_token(name_tok, "Assignment target")
    value = interp.evaluate(value_node, env)
    env.assign(name, value)
    return value

def exec_var_decl(n: Tree, env: Environment, interp: 'Interpreter') -> ExecResult:
    name = expect_ident_token(n.children[0], "Variable name")
    value: LoxValue = LoxNil()

    if len(n.children) > 1:
        value = interp.evaluate(n.children[1], env)

    env.define(name, value)
    return None
