from __future__ import annotations

from typing import Callable, Optional

from sable import SableValue
from sable.types.function import Clause

BuiltinImpl = Callable[..., SableValue]


class Builtin:
    """A primitive implemented in Python.

    `signatures` are body-less clauses used both to validate arguments at
    runtime and to type calls in the checker. A builtin without signatures
    is variadic and unchecked.
    """

    __slots__ = ("name", "impl", "signatures", "pure")

    def __init__(
        self,
        name: str,
        impl: BuiltinImpl,
        signatures: Optional[list[Clause]] = None,
        pure: bool = True,
    ):
        self.name = name
        self.impl = impl
        self.signatures = signatures
        self.pure = pure

    def __call__(self, ctx, args: list[SableValue]) -> SableValue:
        return self.impl(ctx, args)

    def __str__(self) -> str:
        return f"<builtin {self.name}>"

    __repr__ = __str__
