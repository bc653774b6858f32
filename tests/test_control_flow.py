from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import run_runtime_case

SCENARIOS = [
    pytest.param('if (true) print "yes"; else print "no";', ["yes"], None, id="if-true"),
    pytest.param('if (nil) print "yes"; else print "no";', ["no"], None, id="if-nil-falsy"),
    pytest.param('if (0) print "zero truthy";', ["zero truthy"], None, id="if-zero-truthy"),
    pytest.param('if (false) print "skipped";', [], None, id="if-without-else"),
    pytest.param(
        'if (true) if (false) print "a"; else print "b";',
        ["b"],
        None,
        id="dangling-else-binds-inner",
    ),
    pytest.param(
        dedent(
            """\
            var i = 0;
            while (i < 3) { print i; i = i + 1; }
        """
        ),
        ["0", "1", "2"],
        None,
        id="while-loop",
    ),
    pytest.param("while (false) print 1;", [], None, id="while-never-runs"),
    pytest.param(
        "for (var i = 0; i < 3; i = i + 1) print i;",
        ["0", "1", "2"],
        None,
        id="for-loop",
    ),
    pytest.param(
        dedent(
            """\
            var i = 10;
            for (i = 0; i < 2; i = i + 1) {}
            print i;
        """
        ),
        ["2"],
        None,
        id="for-expression-initializer-uses-outer",
    ),
    pytest.param(
        dedent(
            """\
            var i = "outer";
            for (var i = 0; i < 1; i = i + 1) {}
            print i;
        """
        ),
        ["outer"],
        None,
        id="for-var-scoped-to-loop",
    ),
    pytest.param(
        dedent(
            """\
            var n = 0;
            for (; n < 2;) n = n + 1;
            print n;
        """
        ),
        ["2"],
        None,
        id="for-optional-clauses",
    ),
    pytest.param(
        dedent(
            """\
            fun first() {
              for (;;) { return "stopped"; }
            }
            print first();
        """
        ),
        ["stopped"],
        None,
        id="for-without-condition-exits-by-return",
    ),
    pytest.param(
        dedent(
            """\
            var a = 0;
            var b = 1;
            for (var i = 0; i < 6; i = i + 1) {
              print a;
              var t = a;
              a = b;
              b = t + b;
            }
        """
        ),
        ["0", "1", "1", "2", "3", "5"],
        None,
        id="fibonacci-loop",
    ),
]


@pytest.mark.parametrize("source, expected_lines, expected_exc", SCENARIOS)
def test_control_flow(source: str, expected_lines, expected_exc) -> None:
    run_runtime_case(source, expected_lines, expected_exc)
