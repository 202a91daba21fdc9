"""Named multi-clause functions.

A `Function` is an ordered list of `Clause`s. The order is the order of the
`def` forms that produced them and never changes; dispatch scans it
linearly and picks the first clause whose parameter patterns all match.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

from sable import SExpression, SableValue
from sable.types.memo import MemoCache

if TYPE_CHECKING:
    from sable.types.environment import Environment
    from sable.typesys.model import Type


class PatternKind(Enum):
    LITERAL = "literal"
    IDENTIFIER = "identifier"
    TYPED = "typed"


class Pattern:
    __slots__ = ("kind", "name", "value", "type")

    def __init__(
        self,
        kind: PatternKind,
        name: Optional[str] = None,
        value: SableValue = None,
        type: Optional[Type] = None,
    ):
        self.kind = kind
        self.name = name
        self.value = value
        self.type = type

    @classmethod
    def literal(cls, value: SableValue) -> Pattern:
        return cls(PatternKind.LITERAL, value=value)

    @classmethod
    def identifier(cls, name: str) -> Pattern:
        return cls(PatternKind.IDENTIFIER, name=name)

    @classmethod
    def typed(cls, name: str, type: Type) -> Pattern:
        return cls(PatternKind.TYPED, name=name, type=type)

    def __str__(self) -> str:
        if self.kind is PatternKind.LITERAL:
            from sable.printer import render
            return render(self.value)
        if self.kind is PatternKind.TYPED:
            return f"{self.name}:{self.type}"
        return str(self.name)

    __repr__ = __str__


class Clause:
    __slots__ = ("patterns", "return_type", "body", "memoize", "pure")

    def __init__(
        self,
        patterns: list[Pattern],
        body: SExpression,
        return_type: Optional[Type] = None,
        memoize: bool = False,
        pure: bool = False,
    ):
        self.patterns = patterns
        self.body = body
        self.return_type = return_type
        self.memoize = memoize
        self.pure = pure

    @property
    def arity(self) -> int:
        return len(self.patterns)

    def signature(self) -> str:
        params = " ".join(str(p) for p in self.patterns)
        ret = f" :{self.return_type}" if self.return_type is not None else ""
        return f"({params}){ret}"


class Function:
    """A named function: ordered clauses, a memo cache and its defining scope."""

    __slots__ = ("name", "clauses", "env", "origin", "memo")

    def __init__(self, name: str, env: Environment, origin: Optional[str] = None):
        self.name = name
        self.clauses: list[Clause] = []
        self.env = env
        self.origin = origin
        self.memo = MemoCache()

    def add_clause(self, clause: Clause) -> None:
        self.clauses.append(clause)

    def __str__(self) -> str:
        return f"<func {self.name}>"

    def __repr__(self) -> str:
        return f"<func {self.name} ({len(self.clauses)} clauses)>"
