"""Lazy lists.

A `Generator` pairs an iterator function with a state value. Forcing calls
`iterator(state)` at most once per node and caches the outcome:

- `'()`          -> the list is exhausted
- `(value)`      -> `value` is the head and also the next state
- `(value next)` -> `value` is the head, `next` is the next state

The cache is a write-once slot, so repeated `head`/`tail` on the same node
never re-run the iterator and side effects are observed once per position.
"""

from __future__ import annotations

from typing import Callable, Optional

from sable import SableValue
from sable.errors import SableTypeError
from sable.types.cons import Cons
from sable.types.nil import Nil

# (callee, args) -> value; supplied by the evaluator
CallFn = Callable[[SableValue, list[SableValue]], SableValue]

_UNFORCED = object()


class Generator:
    __slots__ = ("iterator", "state", "_forced")

    def __init__(self, iterator: SableValue, state: SableValue):
        self.iterator = iterator
        self.state = state
        self._forced = _UNFORCED

    @property
    def is_forced(self) -> bool:
        return self._forced is not _UNFORCED

    def force(self, call: CallFn) -> Optional[tuple[SableValue, Generator]]:
        """Return `(head, next_generator)`, or None once exhausted."""
        if self._forced is _UNFORCED:
            result = call(self.iterator, [self.state])
            self._forced = self._interpret(result, call)
        return self._forced

    def cached(self) -> Optional[tuple[SableValue, Generator]]:
        """The forced outcome without forcing; only meaningful once `is_forced`."""
        if self._forced is _UNFORCED:
            raise ValueError("generator node has not been forced")
        return self._forced

    def _interpret(self, result: SableValue, call: CallFn) -> Optional[tuple[SableValue, Generator]]:
        items = _take(result, 3, call)
        if items is None or len(items) > 2:
            from sable.printer import render
            raise SableTypeError(
                f"gen: iterator must return '(), (value) or (value state), found {render(result)}"
            )
        if not items:
            return None
        head = items[0]
        next_state = items[1] if len(items) == 2 else head
        return head, Generator(self.iterator, next_state)

    def __repr__(self) -> str:
        return f"Generator({self.iterator!r}, {self.state!r})"


def _take(value: SableValue, limit: int, call: CallFn) -> Optional[list[SableValue]]:
    """First `limit` elements of a list value, or None if it is not a list."""
    items: list[SableValue] = []
    node = value
    while len(items) < limit:
        if node is Nil:
            break
        if isinstance(node, Cons):
            items.append(node.head)
            node = node.tail
        elif isinstance(node, Generator):
            forced = node.force(call)
            if forced is None:
                break
            items.append(forced[0])
            node = forced[1]
        else:
            return None
    return items
