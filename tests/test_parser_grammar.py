from __future__ import annotations

from textwrap import dedent

import pytest
from lark import Token, Tree

from mlox.utils import stringify

from tests.support.harness import (
    LoxBool,
    LoxNumber,
    LoxString,
    ParseError,
    parse_expression,
    parse_source,
)


def _shape(node: object) -> object:
    """Compact nested-tuple view of a tree for structural comparison."""
    if isinstance(node, Tree):
        return (node.data, *[_shape(ch) for ch in node.children])
    if isinstance(node, Token):
        return str(node.value)
    return stringify(node)


def _stmt(source: str) -> object:
    program = parse_source(source)
    assert program.data == "program"
    assert len(program.children) == 1
    return _shape(program.children[0])


SHAPE_CASES = [
    pytest.param(
        "1 + 2 * 3;",
        ("expr_stmt", ("binary", ("literal", "1"), "+", ("binary", ("literal", "2"), "*", ("literal", "3")))),
        id="precedence-factor-over-term",
    ),
    pytest.param(
        "a or b and c;",
        ("expr_stmt", ("logical", ("variable", "a"), "or", ("logical", ("variable", "b"), "and", ("variable", "c")))),
        id="and-binds-tighter-than-or",
    ),
    pytest.param(
        "a = b = 1;",
        ("expr_stmt", ("assign", "a", ("assign", "b", ("literal", "1")))),
        id="assignment-right-assoc",
    ),
    pytest.param(
        "!-x;",
        ("expr_stmt", ("unary", "!", ("unary", "-", ("variable", "x")))),
        id="nested-unary",
    ),
    pytest.param(
        "f(1)(2);",
        ("expr_stmt", ("call", ("call", ("variable", "f"), ("arguments", ("literal", "1"))), ("arguments", ("literal", "2")))),
        id="chained-calls",
    ),
    pytest.param(
        "a == b < c;",
        ("expr_stmt", ("binary", ("variable", "a"), "==", ("binary", ("variable", "b"), "<", ("variable", "c")))),
        id="comparison-over-equality",
    ),
    pytest.param(
        "a == b == c;",
        ("expr_stmt", ("binary", ("binary", ("variable", "a"), "==", ("variable", "b")), "==", ("variable", "c"))),
        id="equality-chains-left-assoc",
    ),
    pytest.param(
        "(1);",
        ("expr_stmt", ("grouping", ("literal", "1"))),
        id="grouping",
    ),
    pytest.param(
        "var x;",
        ("var_decl", "x"),
        id="var-without-initializer",
    ),
    pytest.param(
        "fun f(a, b) { return a; }",
        ("fun_decl", "f", ("params", "a", "b"), ("block", ("return_stmt", ("variable", "a")))),
        id="function-declaration",
    ),
    pytest.param(
        "if (a) print 1; else print 2;",
        ("if_stmt", ("variable", "a"), ("print_stmt", ("literal", "1")), ("print_stmt", ("literal", "2"))),
        id="if-else",
    ),
    pytest.param(
        "for (var i = 0; i < 2; i = i + 1) print i;",
        (
            "block",
            ("var_decl", "i", ("literal", "0")),
            (
                "while_stmt",
                ("binary", ("variable", "i"), "<", ("literal", "2")),
                (
                    "block",
                    ("print_stmt", ("variable", "i")),
                    ("expr_stmt", ("assign", "i", ("binary", ("variable", "i"), "+", ("literal", "1")))),
                ),
            ),
        ),
        id="for-desugars-to-while",
    ),
    pytest.param(
        "for (;;) {}",
        ("while_stmt", ("literal", "true"), ("block",)),
        id="for-empty-clauses-loops-forever",
    ),
]


@pytest.mark.parametrize("source, expected", SHAPE_CASES)
def test_tree_shapes(source: str, expected: object) -> None:
    assert _stmt(source) == expected


def test_literals_hold_runtime_values() -> None:
    program = parse_source('1.5; "s"; true;')
    values = [stmt.children[0].children[0] for stmt in program.children]

    assert values == [LoxNumber(1.5), LoxString("s"), LoxBool(True)]


def test_nodes_carry_positions() -> None:
    program = parse_source(dedent(
        """\
        var a = 1;
          print a - 2;
    """
    ))
    print_stmt = program.children[1]
    binary = print_stmt.children[0]

    assert (print_stmt.meta.line, print_stmt.meta.column) == (2, 3)
    assert (binary.meta.line, binary.meta.column) == (2, 11)


def test_comments_are_ignored() -> None:
    program = parse_source("// header\nprint 1; // trailing\n")
    assert [stmt.data for stmt in program.children] == ["print_stmt"]


def test_parse_expression_accepts_bare_expression() -> None:
    tree = parse_expression("1 + 2")
    assert tree.data == "binary"


def test_parse_expression_rejects_trailing_tokens() -> None:
    with pytest.raises(ParseError):
        parse_expression("1 + 2;")


ERROR_CASES = [
    pytest.param("print 1", "Expected ';' after value", id="missing-semicolon"),
    pytest.param("1 + ;", "Expected expression", id="missing-operand"),
    pytest.param("(1 + 2;", "Expected ')' after expression", id="unclosed-paren"),
    pytest.param("{ print 1;", "Expected '}' after block", id="unclosed-block"),
    pytest.param("1 = 2;", "Invalid assignment target", id="assign-to-literal"),
    pytest.param("(a) = 2;", "Invalid assignment target", id="assign-to-grouping"),
    pytest.param("a + b = 2;", "Invalid assignment target", id="assign-to-binary"),
    pytest.param("return 1;", "Can't return from top-level code", id="top-level-return"),
    pytest.param("class A {}", "Class declarations are not supported", id="class"),
    pytest.param("this;", "'this' is only valid inside classes", id="this"),
    pytest.param("super.x;", "'super' is only valid inside classes", id="super"),
    pytest.param("a.b;", "Property access is not supported", id="property-access"),
    pytest.param("fun (a) {}", "Expected function name", id="anonymous-fun"),
    pytest.param("fun f(1) {}", "Expected parameter name", id="bad-parameter"),
    pytest.param("fun f() print 1;", "Expected '{' before function body", id="fun-without-block"),
    pytest.param("var 1 = 2;", "Expected variable name", id="bad-var-name"),
    pytest.param("if true print 1;", "Expected '(' after 'if'", id="if-without-parens"),
]


@pytest.mark.parametrize("source, message", ERROR_CASES)
def test_parse_errors(source: str, message: str) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source(source)

    assert message in str(exc_info.value)


def test_parse_error_reports_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_source("var a = 1;\nvar b = ;")

    err = exc_info.value
    assert (err.line, err.column) == (2, 9)
    assert str(err) == "Expected expression at line 2, col 9"


def test_return_allowed_inside_nested_function_blocks() -> None:
    program = parse_source("fun f() { while (true) { { return 1; } } }")
    assert program.children[0].data == "fun_decl"


def test_return_after_function_body_rejected() -> None:
    with pytest.raises(ParseError):
        parse_source("fun f() { return 1; } return 2;")


@pytest.mark.parametrize(
    "count, fails",
    [
        pytest.param(255, False, id="at-limit"),
        pytest.param(256, True, id="over-limit"),
    ],
)
def test_argument_and_parameter_limits(count: int, fails: bool) -> None:
    params = ", ".join(f"p{i}" for i in range(count))
    args = ", ".join("1" for _ in range(count))
    sources = [f"fun f({params}) {{}}", f"f({args});"]

    for source in sources:
        if fails:
            with pytest.raises(ParseError, match="Can't have more than 255"):
                parse_source(source)
        else:
            parse_source(source)
