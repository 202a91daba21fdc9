"""Strict cons cells for Sable lists.

A list is either `Nil`, a `Cons` or a lazy `Generator`. Cells are never
mutated after construction; the only writable slot is `_type`, a write-once
cache filled in by the type registry the first time the list's runtime
type is asked for.
"""

from __future__ import annotations

from typing import Iterable

from sable import SableValue
from sable.types.nil import Nil


class Cons:
    __slots__ = ("head", "tail", "_type")

    def __init__(self, head: SableValue, tail: SableValue = Nil):
        self.head = head
        self.tail = tail
        self._type = None

    def __repr__(self) -> str:
        return f"Cons({self.head!r}, {self.tail!r})"


def from_iterable(items: Iterable[SableValue]) -> SableValue:
    """Build a strict list from a finite Python iterable."""
    result: SableValue = Nil
    for item in reversed(list(items)):
        result = Cons(item, result)
    return result
