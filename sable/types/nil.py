from __future__ import annotations


class NilType:
    """The empty list `'()`. There is exactly one instance, `Nil`."""

    __slots__ = ()

    def __repr__(self): return "'()"
    def __bool__(self): return False
    def __iter__(self): return iter(())

    def __eq__(self, other):
        return isinstance(other, NilType)

    def __hash__(self):
        return hash(NilType)


Nil = NilType()
