"""Clause selection for multi-clause functions.

One matcher serves two callers:

- the evaluator, which passes argument *values* and derives each value's
  type through the registry before comparing it with a typed pattern;
- the static checker, which passes argument *types* and compares them
  directly.

Clauses are tried in declaration order and the first one whose every
pattern matches wins. Generic variable bindings live in a fresh map per
clause attempt and never outlive it.
"""

from __future__ import annotations

from typing import Optional, Sequence

from sable import SableValue
from sable.errors import SableDispatchError
from sable.printer import render
from sable.types.function import Clause, PatternKind
from sable.types.generator import CallFn
from sable.types.nil import Nil
from sable.types.values import is_empty_list, values_equal
from sable.typesys.model import ANY, Type, TypeRegistry


class Match:
    __slots__ = ("clause", "bindings", "type_bindings", "registry")

    def __init__(
        self,
        clause: Clause,
        bindings: dict[str, SableValue],
        type_bindings: dict[str, Type],
        registry: TypeRegistry,
    ):
        self.clause = clause
        self.bindings = bindings
        self.type_bindings = type_bindings
        self.registry = registry

    @property
    def return_type(self) -> Type:
        if self.clause.return_type is None:
            return ANY
        return self.registry.substitute(self.clause.return_type, self.type_bindings)


def match_clause(
    clause: Clause,
    args: Sequence,
    registry: TypeRegistry,
    call: Optional[CallFn] = None,
    by_type: bool = False,
) -> Optional[Match]:
    patterns = clause.patterns
    if len(patterns) != len(args):
        return None
    bindings: dict[str, SableValue] = {}
    type_bindings: dict[str, Type] = {}
    for pattern, arg in zip(patterns, args):
        kind = pattern.kind
        if kind is PatternKind.IDENTIFIER:
            bindings[pattern.name] = arg
        elif kind is PatternKind.TYPED:
            if by_type:
                ok = registry.unify(pattern.type, arg, type_bindings)
            else:
                ok = registry.unify(registry.erase(pattern.type), registry.type_of(arg), type_bindings, erased=True)
            if not ok:
                return None
            bindings[pattern.name] = arg
        elif by_type:
            if not registry.literal_compatible(pattern.value, arg):
                return None
        elif not _literal_matches(pattern.value, arg, call):
            return None
    return Match(clause, bindings, type_bindings, registry)


def _literal_matches(literal: SableValue, arg: SableValue, call: CallFn) -> bool:
    # Only '() can match a lazy list, and only after forcing its first node
    if literal is Nil:
        return is_empty_list(arg, call)
    return values_equal(literal, arg, call)


def dispatch_values(
    name: str,
    clauses: Sequence[Clause],
    args: list[SableValue],
    registry: TypeRegistry,
    call: CallFn,
) -> Match:
    """Select the clause for a runtime call, or raise SableDispatchError."""
    for clause in clauses:
        match = match_clause(clause, args, registry, call)
        if match is not None:
            return match
    raise SableDispatchError(name, [render(a) for a in args])


def dispatch_types(
    name: str,
    clauses: Sequence[Clause],
    arg_types: list[Type],
    registry: TypeRegistry,
) -> Match:
    """Select the clause for a statically typed call, or raise SableDispatchError."""
    for clause in clauses:
        match = match_clause(clause, arg_types, registry, by_type=True)
        if match is not None:
            return match
    raise SableDispatchError(name, [str(t) for t in arg_types])
