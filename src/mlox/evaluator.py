from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

from .runtime import (
    Environment,
    ExecResult,
    LoxRuntimeError,
    LoxValue,
    NativeFunction,
    NativeFn,
    init_stdlib,
)
from .tree import Node, Tree, is_tree, node_meta, tree_children, tree_label

from .eval.bind import eval_assign, eval_variable, exec_var_decl
from .eval.blocks import exec_block, execute_statements
from .eval.chains import eval_call
from .eval.control import exec_expr_stmt, exec_print, exec_return
from .eval.expr import eval_binary, eval_grouping, eval_literal, eval_logical, eval_unary
from .eval.fn import exec_fun_decl
from .eval.loops import exec_if, exec_while

Output = Callable[[str], None]


def _maybe_attach_location(exc: LoxRuntimeError, node: Node) -> None:
    # innermost positioned node wins; outer frames leave it alone
    if exc.lox_meta is not None:
        return

    if exc.lox_py_trace is None:
        exc.lox_py_trace = exc.__traceback__

    meta = node_meta(node)

    if meta is not None and getattr(meta, "line", None) is not None:
        exc.lox_meta = meta

# ---------------- Public API ----------------

class Interpreter:
    """Tree-walking evaluator over the parser's statement and expression trees.

    Owns the global scope (seeded with registered natives) and the output
    sink that `print` writes to. Current scope is threaded explicitly
    through `evaluate`/`execute`, so leaving a block never needs an undo step.
    """

    def __init__(self, output: Optional[Output] = None):
        init_stdlib()
        self.globals = Environment()
        self.output: Output = output if output is not None else print

    def define_native(self, name: str, arity: int, fn: NativeFn) -> NativeFunction:
        native = NativeFunction(name=name, arity_count=arity, fn=fn)
        self.globals.define(name, native)
        return native

    def write(self, text: str) -> None:
        self.output(text)

    def interpret(self, program: Tree | Iterable[Node]) -> None:
        """Execute top-level statements; a runtime error aborts and propagates to the caller."""
        if is_tree(program):
            statements = tree_children(program) if tree_label(program) == 'program' else [program]
        else:
            statements = list(program)

        for stmt in statements:
            if self.execute(stmt, self.globals) is not None:
                raise LoxRuntimeError("Can't return from top-level code.")

    def evaluate(self, n: Node, env: Environment) -> LoxValue:
        try:
            return _evaluate_inner(n, env, self)
        except LoxRuntimeError as e:
            _maybe_attach_location(e, n)
            raise

    def execute(self, n: Node, env: Environment) -> ExecResult:
        try:
            return _execute_inner(n, env, self)
        except LoxRuntimeError as e:
            _maybe_attach_location(e, n)
            raise

    def execute_block(self, statements: Iterable[Node], env: Environment) -> ExecResult:
        """Run statements against `env`, which the caller has already set up as the new scope."""
        return execute_statements(statements, env, self)

# ---------------- Core evaluator ----------------

def _evaluate_inner(n: Node, env: Environment, interp: Interpreter) -> LoxValue:
    if not is_tree(n):
        raise LoxRuntimeError(f"Expected expression node, got {n!r}")

    match n.data:
        case 'literal':
            return eval_literal(n, env, interp)
        case 'grouping':
            return eval_grouping(n, env, interp)
        case 'unary':
            return eval_unary(n, env, interp)
        case 'binary':
            return eval_binary(n, env, interp)
        case 'logical':
            return eval_logical(n, env, interp)
        case 'variable':
            return eval_variable(n, env, interp)
        case 'assign':
            return eval_assign(n, env, interp)
        case 'call':
            return eval_call(n, env, interp)
        case _:
            raise LoxRuntimeError(f"Unknown expression node: {n.data}")

def _execute_inner(n: Node, env: Environment, interp: Interpreter) -> ExecResult:
    if not is_tree(n):
        raise LoxRuntimeError(f"Expected statement node, got {n!r}")

    handler = _STMT_DISPATCH.get(n.data)
    if handler is None:
        raise LoxRuntimeError(f"Unknown statement node: {n.data}")

    return handler(n, env, interp)

# ---------------- Dispatch ----------------

_STMT_DISPATCH: Dict[str, Callable[[Tree, Environment, Interpreter], ExecResult]] = {
    'expr_stmt': exec_expr_stmt,
    'print_stmt': exec_print,
    'var_decl': exec_var_decl,
    'block': exec_block,
    'if_stmt': exec_if,
    'while_stmt': exec_while,
    'fun_decl': exec_fun_decl,
    'return_stmt': exec_return,
}
