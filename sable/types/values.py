"""List protocol and structural equality shared by the evaluator, builtins,
dispatcher and memoization cache.

Every helper that may need to force a lazy list takes the evaluator's
`call(fn, args)` function; strict lists never use it.
"""

from __future__ import annotations

from typing import Iterator, Optional

from sable import SableValue
from sable.errors import SableEmptyListError
from sable.types.cons import Cons
from sable.types.generator import CallFn, Generator
from sable.types.nil import Nil, NilType


def is_list(value: SableValue) -> bool:
    return value is Nil or isinstance(value, (Cons, Generator))


def uncons(value: SableValue, call: CallFn) -> Optional[tuple[SableValue, SableValue]]:
    """Split a list into (head, tail), forcing a generator node if needed.

    Returns None for an empty (or exhausted) list.
    """
    if isinstance(value, Cons):
        return value.head, value.tail
    if isinstance(value, Generator):
        return value.force(call)
    return None


def list_head(value: SableValue, call: CallFn) -> SableValue:
    split = uncons(value, call)
    if split is None:
        raise SableEmptyListError("empty list has no head")
    return split[0]


def list_tail(value: SableValue, call: CallFn) -> SableValue:
    split = uncons(value, call)
    if split is None:
        return Nil
    return split[1]


def iter_list(value: SableValue, call: CallFn) -> Iterator[SableValue]:
    node = value
    while True:
        split = uncons(node, call)
        if split is None:
            return
        head, node = split
        yield head


def values_equal(a: SableValue, b: SableValue, call: CallFn) -> bool:
    """Structural equality. Lists compare element-wise after forcing."""
    if a is b:
        return True
    # bool is an int subclass in Python; Sable keeps them apart
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, str)) or isinstance(b, (int, str)):
        return type(a) is type(b) and a == b
    if is_list(a) and is_list(b):
        left, right = a, b
        while True:
            ls = uncons(left, call)
            rs = uncons(right, call)
            if ls is None or rs is None:
                return ls is None and rs is None
            if not values_equal(ls[0], rs[0], call):
                return False
            left, right = ls[1], rs[1]
    return False


def is_empty_list(value: SableValue, call: CallFn) -> bool:
    if isinstance(value, NilType):
        return True
    if isinstance(value, Generator):
        return value.force(call) is None
    return False
