from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional, Tuple

from .evaluator import Interpreter
from .lexer_rd import LexError
from .parser_rd import ParseError, parse_expression, parse_source
from .runtime import LoxRuntimeError, LoxValue
from .utils import debug_py_trace_enabled

EXIT_OK = 0
EXIT_STATIC_ERROR = 65  # lex or parse failure
EXIT_RUNTIME_ERROR = 70

def run(src: str, interpreter: Optional[Interpreter] = None) -> Interpreter:
    """Lex, parse and execute a whole program; returns the interpreter so globals can be reused."""
    interp = interpreter if interpreter is not None else Interpreter()
    program = parse_source(src)
    interp.interpret(program)
    return interp

def repl_eval(text: str, interpreter: Interpreter) -> Tuple[Optional[LoxValue], bool]:
    """
    Evaluate one REPL submission against a long-lived interpreter.
    - Declarations/statements run as a program => (None, True).
    - A bare expression without `;` is evaluated => (value, False).
    If neither reading parses, the statement-level error is raised.
    """
    try:
        program = parse_source(text)
    except ParseError as stmt_error:
        try:
            expr = parse_expression(text)
        except ParseError:
            raise stmt_error from None

        return interpreter.evaluate(expr, interpreter.globals), False

    interpreter.interpret(program)
    return None, True

def report_error(exc: BaseException) -> None:
    """Print an `Error: ...` line to stderr, plus the Python traceback when debugging is on."""
    if isinstance(exc, RecursionError):
        print("Error: Stack overflow.", file=sys.stderr)
        return

    print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled() and isinstance(exc, LoxRuntimeError):
        tb = exc.lox_py_trace or exc.__traceback__
        if tb:
            print("\nPython traceback:", file=sys.stderr)
            print("".join(traceback.format_tb(tb)), file=sys.stderr, end="")

def run_file_source(src: str) -> int:
    """Run a script and map failures to process exit codes."""
    try:
        run(src)
    except (LexError, ParseError) as exc:
        report_error(exc)
        return EXIT_STATIC_ERROR
    except (LoxRuntimeError, RecursionError) as exc:
        report_error(exc)
        return EXIT_RUNTIME_ERROR

    return EXIT_OK

def _load_source(arg: str) -> str:
    """
    Resolve CLI input into source text.
    - "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg

def main() -> None:
    arg = None

    for token in sys.argv[1:]:
        if token in ("-h", "--help"):
            print("usage: mlox [path | - | 'source text']")
            print("With no argument, starts the interactive REPL.")
            return

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None:
        from .repl import repl
        repl()
        return

    sys.exit(run_file_source(_load_source(arg)))

if __name__ == "__main__":
    main()
