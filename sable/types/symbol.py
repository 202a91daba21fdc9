from __future__ import annotations
import sys
from typing import Optional


class Symbol:
    """An identifier in the AST, optionally carrying a `name:Type` annotation.

    Equality and hashing use the name only, so an annotated parameter binds
    and looks up under its bare name.
    """

    __slots__ = ("id", "annotation")

    def __init__(self, name: str, annotation: Optional[str] = None):
        # Intern to ensure fast equality/hash and reduce memory
        self.id = sys.intern(name)
        self.annotation = annotation

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Symbol) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self):
        if self.annotation is not None:
            return f"Symbol({self.id!r}, {self.annotation!r})"
        return f"Symbol({self.id!r})"

    def __str__(self):
        if self.annotation is not None:
            return f"{self.id}:{self.annotation}"
        return self.id


class Annotation:
    """A standalone `:Type` suffix (return type of a clause, or a `do` cast)."""

    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Annotation) and self.text == other.text

    def __hash__(self) -> int:
        return hash((":", self.text))

    def __repr__(self):
        return f"Annotation({self.text!r})"

    def __str__(self):
        return f":{self.text}"
