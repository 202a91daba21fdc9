"""Per-function result cache for memoized (`def'`) clauses.

Keys are structural: every value is turned into a hashable, type-tagged
tuple, so `1` and `true` never collide and two lists with equal elements
share one entry. Lists are forced completely to build their key; passing an
infinite generator to a memoized function therefore never returns.
"""

from __future__ import annotations

from typing import Hashable

from sable import SableValue
from sable.types.generator import CallFn
from sable.types.values import is_list, iter_list

MISSING = object()


def memo_key(args: list[SableValue], call: CallFn) -> Hashable:
    return tuple(_value_key(arg, call) for arg in args)


def _value_key(value: SableValue, call: CallFn) -> Hashable:
    if isinstance(value, bool):
        return ("b", value)
    if isinstance(value, int):
        return ("i", value)
    if isinstance(value, str):
        return ("s", value)
    if is_list(value):
        return ("l", tuple(_value_key(item, call) for item in iter_list(value, call)))
    # Functions, lambdas and builtins are keyed by identity and kept
    # alive by their key
    return ("f", value)


class MemoCache:
    """Unbounded cache; lives as long as its function definition."""

    __slots__ = ("_entries", "hits", "misses")

    def __init__(self):
        self._entries: dict[Hashable, SableValue] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> SableValue:
        value = self._entries.get(key, MISSING)
        if value is MISSING:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def store(self, key: Hashable, value: SableValue) -> None:
        self._entries[key] = value

    def __len__(self) -> int:
        return len(self._entries)
