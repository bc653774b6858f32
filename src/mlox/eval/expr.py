from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..runtime import (
    Environment,
    LoxBool,
    LoxNumber,
    LoxRuntimeError,
    LoxString,
    LoxTypeError,
    LoxValue,
)
from ..tree import Tree
from ..utils import lox_equals
from .common import as_op, token_kind
from .helpers import is_truthy

if TYPE_CHECKING:
    from ..evaluator import Interpreter

def eval_literal(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    return n.children[0]

def eval_grouping(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    return interp.evaluate(n.children[0], env)

def eval_unary(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    op_node, rhs_node = n.children
    op = as_op(op_node)
    rhs = interp.evaluate(rhs_node, env)

    return apply_unary_operator(op, rhs)

def apply_unary_operator(op: str, rhs: LoxValue) -> LoxValue:
    match (op, rhs):
        case ('-', LoxNumber(value=num)):
            return LoxNumber(-num)
        case ('-', _):
            raise LoxTypeError("Operand of unary '-' must be a number.", operator='-')
        case ('!', _):
            return LoxBool(not is_truthy(rhs))
        case _:
            raise LoxRuntimeError(f"Unsupported unary op {op}")

def eval_binary(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    lhs_node, op_node, rhs_node = n.children
    lhs = interp.evaluate(lhs_node, env)
    rhs = interp.evaluate(rhs_node, env)

    return apply_binary_operator(as_op(op_node), lhs, rhs)

def eval_logical(n: Tree, env: Environment, interp: 'Interpreter') -> LoxValue:
    lhs_node, op_node, rhs_node = n.children
    lhs = interp.evaluate(lhs_node, env)

    # the deciding operand is returned as-is, not coerced to a boolean
    if token_kind(op_node) == 'OR':
        if is_truthy(lhs):
            return lhs
    elif not is_truthy(lhs):
        return lhs

    return interp.evaluate(rhs_node, env)

def apply_binary_operator(op: str, lhs: LoxValue, rhs: LoxValue) -> LoxValue:
    match (op, lhs, rhs):
        case ('==', _, _):
            return LoxBool(lox_equals(lhs, rhs))
        case ('!=', _, _):
            return LoxBool(not lox_equals(lhs, rhs))
        case ('+', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a + b)
        case ('+', LoxString(value=a), LoxString(value=b)):
            return LoxString(a + b)
        case ('+', _, _):
            raise LoxTypeError("Operands of '+' must be two numbers or two strings.", operator='+')
        case ('-', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a - b)
        case ('*', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(a * b)
        case ('/', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxNumber(divide(a, b))
        case ('-' | '*' | '/', _, _):
            raise LoxTypeError(f"Operands of '{op}' must be numbers.", operator=op)
        case ('<' | '<=' | '>' | '>=', LoxNumber(value=a), LoxNumber(value=b)):
            return LoxBool(_compare(op, a, b))
        case ('<' | '<=' | '>' | '>=', LoxString(value=a), LoxString(value=b)):
            return LoxBool(_compare(op, a, b))
        case ('<' | '<=' | '>' | '>=', _, _):
            raise LoxTypeError(f"Operands of '{op}' must be two numbers or two strings.", operator=op)

    raise LoxRuntimeError(f"Unknown operator {op}")

def divide(a: float, b: float) -> float:
    """IEEE-754 division: x/0 is a signed infinity, 0/0 and nan/0 are nan."""
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)

    return a / b

def _compare(op: str, a, b) -> bool:
    match op:
        case '<':
            return a < b
        case '<=':
            return a <= b
        case '>':
            return a > b
        case '>=':
            return a >= b
        case _:
            raise LoxRuntimeError(f"Unknown comparator {op}")
