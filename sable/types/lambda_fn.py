"""Lambda closure representation for Sable."""

from __future__ import annotations

from io import StringIO

from sable.types.environment import Environment
from sable.types.function import Clause


class Lambda:
    """A first-class anonymous function: one clause plus its closure env.

    The environment is the one active where the lambda was created. It is
    shared, not copied, so later bindings in outer scopes remain visible.
    """

    __slots__ = ("clause", "env")

    def __init__(self, clause: Clause, env: Environment):
        self.clause = clause
        self.env = env

    @property
    def arity(self) -> int:
        return self.clause.arity

    @property
    def body(self):
        return self.clause.body

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<lambda ")
            buffer.write(self.clause.signature())
            buffer.write(">")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)
