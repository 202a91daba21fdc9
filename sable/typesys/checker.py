"""Ahead-of-time type checker.

The checker is a second interpretation of the program's top-level forms:
it computes a `Type` for every expression instead of a value, and resolves
each call with the same clause matcher the evaluator uses, comparing
argument types directly. It never stops at the first problem; every
diagnostic is collected and returned.

Function and lambda bodies are checked in a scope where each typed
parameter has its declared type. A type that cannot be known ahead of time
(an untyped parameter, the result of a clause without a declared return
type, or of an untyped builtin) is `nothing`, which every pattern accepts,
so untyped code is never flagged. Bodies of `defpure` clauses are also
scanned for calls to impure builtins.

A function whose clauses do not share one declared signature is typed as
plain `func`, which is interchangeable with every parametrized `func`.
Passing such a function therefore never checks its parameters. This gap is
intentional.
"""

from __future__ import annotations

import logging
from collections import ChainMap
from typing import Optional

from sable import SExpression
from sable.dispatch import dispatch_types
from sable.errors import (
    SableDispatchError,
    SableError,
    SableSyntaxError,
    SableTypeError,
    SableUnboundSymbol,
)
from sable.evaluation.special_forms.patterns import make_body, parse_patterns
from sable.evaluation.special_forms.quote_forms import quote_datum
from sable.types.builtin import Builtin
from sable.types.environment import Environment
from sable.types.function import Clause, Function
from sable.types.symbol import Annotation, Symbol
from sable.typesys.model import ANY, BOOL, EMPTY_LIST, FUNC, INT, NOTHING, STR, Type, TypeRegistry

logger = logging.getLogger(__name__)

Scope = ChainMap


class Checker:
    def __init__(self, registry: TypeRegistry, root: Environment):
        self.registry = registry
        self.root = root
        self.diagnostics: list[SableError] = []

    def check(self, forms: list[SExpression]) -> list[SableError]:
        """Type every top-level form, then enforce purity; return all diagnostics."""
        scope: Scope = ChainMap({})
        for form in forms:
            self.infer(form, scope)
        self._check_functions(scope)
        logger.debug("Checked %d forms: %d diagnostics", len(forms), len(self.diagnostics))
        return self.diagnostics

    def report(self, error: SableError) -> Type:
        self.diagnostics.append(error)
        # An expression that already failed is typed as the bottom type so
        # that one mistake produces one diagnostic.
        return NOTHING

    # --- Inference ---
    def infer(self, expr: SExpression, scope: Scope) -> Type:
        if isinstance(expr, bool):
            return BOOL
        if isinstance(expr, int):
            return INT
        if isinstance(expr, str):
            return STR
        if isinstance(expr, Symbol):
            return self._lookup(expr, scope)
        if isinstance(expr, list) and expr:
            head = expr[0]
            if isinstance(head, Symbol):
                form = getattr(self, f"_form_{_FORM_METHODS.get(head.id, '')}", None)
                if form is not None:
                    return form(expr[1:], scope)
            return self._call(head, expr[1:], scope)
        return ANY

    def _lookup(self, name: Symbol, scope: Scope) -> Type:
        if name.id in scope:
            return scope[name.id]
        try:
            value = self.root.lookup(name)
        except SableUnboundSymbol as err:
            return self.report(err)
        return self.registry.type_of(value)

    def _call(self, head: SExpression, args: list[SExpression], scope: Scope) -> Type:
        callee = None
        if isinstance(head, Symbol) and head.id not in scope:
            callee = self.root.vars.get(head.id)
        head_type = None if callee is not None else self.infer(head, scope)
        arg_types = [self.infer(a, scope) for a in args]

        if isinstance(callee, Function):
            clauses, name = callee.clauses, callee.name
        elif isinstance(callee, Builtin) and callee.signatures is not None:
            clauses, name = callee.signatures, callee.name
        elif isinstance(callee, Builtin):
            return NOTHING
        else:
            # A parametrized func value still tells us its return type
            if head_type is not None and head_type.name == "func" and head_type.args:
                return head_type.args[-1]
            return NOTHING

        try:
            match = dispatch_types(name, clauses, arg_types, self.registry)
            return match.return_type if match.clause.return_type is not None else NOTHING
        except SableDispatchError as err:
            return self.report(err)

    def _cast(self, context: str, actual: Type, annotation: str) -> Optional[Type]:
        try:
            target = self.registry.parse(annotation)
        except SableTypeError as err:
            self.report(err)
            return None
        # Explicit downcasts are accepted; the runtime checks them
        if not (self.registry.unify(target, actual, {}) or self.registry.is_subtype(target, actual)):
            self.report(SableTypeError.expected(context, str(target), str(actual), 0))
        return target

    # --- Special forms ---
    def _form_quote(self, tail: list[SExpression], scope: Scope) -> Type:
        try:
            return self.registry.type_of(quote_datum(tail[0]))
        except (SableSyntaxError, IndexError):
            return self.report(SableSyntaxError("quote requires exactly 1 literal argument"))

    def _form_if(self, tail: list[SExpression], scope: Scope) -> Type:
        types = [self.infer(e, scope) for e in tail]
        if types and not self.registry.is_subtype(types[0], BOOL):
            self.report(SableTypeError.expected("if", "bool", str(types[0]), 0))
        if len(types) < 2:
            return ANY
        result = types[1]
        other = types[2] if len(types) > 2 else EMPTY_LIST
        return self.registry.join(result, other)

    def _form_do(self, tail: list[SExpression], scope: Scope) -> Type:
        cast = None
        if tail and isinstance(tail[-1], Annotation):
            cast = tail[-1].text
            tail = tail[:-1]
        result = EMPTY_LIST
        for e in tail:
            result = self.infer(e, scope)
        if cast is not None:
            target = self._cast("do", result, cast)
            return target if target is not None else NOTHING
        return result

    def _form_let(self, tail: list[SExpression], scope: Scope, context: str = "let") -> Type:
        if len(tail) < 2 or not isinstance(tail[0], list):
            return ANY
        inner = scope.new_child()
        for spec in tail[0]:
            if not (isinstance(spec, list) and len(spec) == 2 and isinstance(spec[0], Symbol)):
                continue
            name, expr = spec
            t = self.infer(expr, inner)
            if name.annotation is not None:
                t = self._cast(context, t, name.annotation) or t
            inner[name.id] = t
        result = ANY
        for e in tail[1:]:
            result = self.infer(e, inner)
        return result

    def _form_scoped_set(self, tail: list[SExpression], scope: Scope) -> Type:
        return self._form_let(tail, scope, "set'")

    def _form_set(self, tail: list[SExpression], scope: Scope) -> Type:
        if len(tail) != 2 or not isinstance(tail[0], Symbol):
            return ANY
        name, expr = tail
        t = self.infer(expr, scope)
        if name.annotation is not None:
            t = self._cast("set", t, name.annotation) or t
        scope[name.id] = t
        return t

    def _form_lambda(self, tail: list[SExpression], scope: Scope) -> Type:
        if len(tail) < 2:
            return FUNC
        params, *body = tail
        try:
            return_type = None
            if isinstance(body[0], Annotation):
                return_type = self.registry.parse(body[0].text)
                body = body[1:]
            clause = Clause(parse_patterns("lambda", params, self.registry), make_body(body) if body else None, return_type)
        except (SableSyntaxError, SableTypeError) as err:
            self.report(err)
            return FUNC
        if clause.body is not None:
            self._check_body(clause, scope)
        return self.registry.clause_type(clause)

    def _form_declaration(self, tail: list[SExpression], scope: Scope) -> Type:
        # Top-level declarations were merged by the loader before checking
        return ANY

    # --- Bodies and purity ---
    def _check_functions(self, scope: Scope) -> None:
        for value in list(self.root.vars.values()):
            if not isinstance(value, Function):
                continue
            for clause in value.clauses:
                self._check_body(clause, scope)
                if clause.pure:
                    params = {p.name for p in clause.patterns if p.name is not None}
                    self._scan_pure(value.name, clause.body, params)

    def _check_body(self, clause: Clause, scope: Scope) -> None:
        params = {
            p.name: p.type if p.type is not None else NOTHING
            for p in clause.patterns
            if p.name is not None
        }
        self.infer(clause.body, scope.new_child(params))

    def _scan_pure(self, fn_name: str, expr: SExpression, params: set[str]) -> None:
        if not isinstance(expr, list) or not expr:
            return
        head = expr[0]
        if isinstance(head, Symbol):
            if head.id == "quote":
                return
            if head.id not in params:
                callee = self.root.vars.get(head.id)
                if isinstance(callee, Builtin) and not callee.pure:
                    self.report(SableError(f"{fn_name}: pure function calls impure {head.id}"))
        for item in expr:
            self._scan_pure(fn_name, item, params)


_FORM_METHODS = {
    "quote": "quote",
    "if": "if",
    "do": "do",
    "let": "let",
    "set'": "scoped_set",
    "set": "set",
    "lambda": "lambda",
    "def": "declaration",
    "def'": "declaration",
    "defpure": "declaration",
    "defpure'": "declaration",
    "deftype": "declaration",
    "contract": "declaration",
    "use": "declaration",
}
