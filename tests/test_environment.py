import logging

import pytest

from sable.errors import SableFrozenScope, SableUnboundSymbol
from sable.types.environment import Environment
from sable.types.symbol import Symbol


def test_define_and_lookup():
    env = Environment()
    env.define(Symbol("x"), 1)
    assert env.lookup(Symbol("x")) == 1
    assert env.lookup("x") == 1


def test_inner_scope_shadows_outer():
    outer = Environment()
    outer.define("x", 1)
    inner = outer.child()
    inner.define("x", 2)
    assert inner.lookup("x") == 2
    assert outer.lookup("x") == 1
    assert inner.find("x") is inner
    assert inner.root() is outer


def test_closure_sees_later_outer_bindings():
    outer = Environment()
    inner = outer.child()
    outer.define("late", 42)
    assert inner.lookup("late") == 42


def test_unbound_symbol():
    with pytest.raises(SableUnboundSymbol, match="Cannot lookup unbound symbol nope"):
        Environment().lookup(Symbol("nope"))


def test_frozen_scope_refuses_bindings():
    env = Environment()
    env.freeze()
    with pytest.raises(SableFrozenScope):
        env.define("x", 1)
    with pytest.raises(SableFrozenScope):
        env.acquire("file", lambda: None)


def test_release_runs_in_reverse_order():
    released = []
    env = Environment()
    for name in ("a", "b", "c"):
        env.acquire(name, lambda name=name: released.append(name))
    assert env.release() == []
    assert released == ["c", "b", "a"]
    assert env.frozen


def test_release_failure_is_logged_and_others_still_run(caplog):
    released = []

    def broken():
        raise OSError("disk gone")

    env = Environment()
    env.acquire("a", lambda: released.append("a"))
    env.acquire("b", broken)
    env.acquire("c", lambda: released.append("c"))
    with caplog.at_level(logging.ERROR, logger="sable.types.environment"):
        failures = env.release()
    assert released == ["c", "a"]
    assert [str(f) for f in failures] == ["Failed to release b: disk gone"]
    assert "Failed to release b" in caplog.text
