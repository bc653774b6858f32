from __future__ import annotations

import pytest

from mlox.runtime import init_stdlib
from tests.support.harness import (
    Environment,
    LoxNil,
    LoxNumber,
    UndefinedVariableError,
)


def test_root_environment_is_seeded_with_natives() -> None:
    init_stdlib()
    env = Environment()
    assert repr(env.get("clock")) == "<native fn clock>"
    assert repr(env.get("date")) == "<native fn date>"


def test_define_shadows_in_child_only() -> None:
    root = Environment()
    root.define("a", LoxNumber(1))
    child = Environment(parent=root)
    child.define("a", LoxNumber(2))

    assert child.get("a") == LoxNumber(2)
    assert root.get("a") == LoxNumber(1)


def test_get_walks_parent_chain() -> None:
    root = Environment()
    root.define("a", LoxNil())
    leaf = Environment(parent=Environment(parent=root))

    assert leaf.get("a") == LoxNil()


def test_assign_updates_nearest_binding() -> None:
    root = Environment()
    root.define("a", LoxNumber(1))
    mid = Environment(parent=root)
    mid.define("a", LoxNumber(2))
    leaf = Environment(parent=mid)

    leaf.assign("a", LoxNumber(3))

    assert mid.get("a") == LoxNumber(3)
    assert root.get("a") == LoxNumber(1)


def test_assign_never_creates_binding() -> None:
    root = Environment()
    with pytest.raises(UndefinedVariableError):
        root.assign("fresh", LoxNumber(1))

    assert "fresh" not in root.vars


def test_define_replaces_in_same_scope() -> None:
    env = Environment()
    env.define("a", LoxNumber(1))
    env.define("a", LoxNumber(2))
    assert env.get("a") == LoxNumber(2)


def test_get_unknown_raises() -> None:
    with pytest.raises(UndefinedVariableError) as exc_info:
        Environment().get("nope")

    assert exc_info.value.name == "nope"
