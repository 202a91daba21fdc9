"""Textual representation of Sable values.

`render` never forces a lazy list: it shows the already-computed prefix of
a generator followed by `...` when the rest is still unforced. `print`
uses `to_text`, which forces lists completely and leaves top-level strings
unquoted.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from sable import SableValue
from sable.types.cons import Cons
from sable.types.generator import CallFn, Generator
from sable.types.nil import NilType

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _quote(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(ch, ch) for ch in text) + '"'


def render(value: SableValue, call: Optional[CallFn] = None) -> str:
    """Render a value the way diagnostics show it (strings quoted)."""
    with StringIO() as buffer:
        _write(buffer, value, call)
        return buffer.getvalue()


def to_text(value: SableValue, call: CallFn) -> str:
    """Render a value for `print`: top-level strings are written raw."""
    if isinstance(value, str):
        return value
    return render(value, call)


def _write(buffer: StringIO, value: SableValue, call: Optional[CallFn]) -> None:
    if isinstance(value, bool):
        buffer.write("true" if value else "false")
    elif isinstance(value, int):
        buffer.write(str(value))
    elif isinstance(value, str):
        buffer.write(_quote(value))
    elif isinstance(value, NilType):
        buffer.write("'()")
    elif isinstance(value, (Cons, Generator)):
        _write_list(buffer, value, call)
    else:
        buffer.write(str(value))


def _write_list(buffer: StringIO, value: SableValue, call: Optional[CallFn]) -> None:
    buffer.write("(")
    first = True
    node = value
    while True:
        if isinstance(node, Cons):
            head, node = node.head, node.tail
        elif isinstance(node, Generator) and (call is not None or node.is_forced):
            forced = node.force(call) if call is not None else node.cached()
            if forced is None:
                break
            head, node = forced
        elif isinstance(node, Generator):
            buffer.write(" ..." if not first else "...")
            break
        else:
            break
        if not first:
            buffer.write(" ")
        _write(buffer, head, call)
        first = False
    buffer.write(")")
