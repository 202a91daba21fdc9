"""Local scopes: `let` and the scoped-resource binding `set'`.

    (let ((x 1) (y:int (f x))) body...)
    (set' ((text (open "notes.txt"))) body...)

Bindings are evaluated in order, each seeing the previous ones. A `set'`
scope additionally owns every resource opened while it is active and
releases them in reverse order when the scope is exited, on every path.
"""

from __future__ import annotations

from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.evaluation.special_forms.do_form import check_cast
from sable.types.environment import Environment
from sable.types.symbol import Symbol


def _split(form_name: str, tail: list[SExpression]) -> tuple[list[tuple[Symbol, SExpression]], list[SExpression]]:
    if len(tail) < 2 or not isinstance(tail[0], list):
        raise SableSyntaxError(f"{form_name} requires a binding list and a body")
    bindings = []
    for spec in tail[0]:
        if not (isinstance(spec, list) and len(spec) == 2 and isinstance(spec[0], Symbol)):
            raise SableSyntaxError(f"{form_name}: each binding must be (name expr), got {spec}")
        bindings.append((spec[0], spec[1]))
    return bindings, tail[1:]


def _bind(form_name: str, bindings, scope: Environment, ctx, evaluate_fn: EvaluatorFn) -> None:
    for name, expr in bindings:
        value = evaluate_fn(expr, scope, ctx)
        if name.annotation is not None:
            check_cast(form_name, value, ctx.registry.parse(name.annotation), ctx)
        scope.define(name, value)


def let_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> SableValue:
    bindings, body = _split("let", tail)
    scope = env.child()
    try:
        _bind("let", bindings, scope, ctx, evaluate_fn)
        for e in body[:-1]:
            evaluate_fn(e, scope, ctx)
        return evaluate_fn(body[-1], scope, ctx, is_tail_call)
    finally:
        scope.freeze()


def scoped_set_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> SableValue:
    # The body never runs as a tail call: the scope must outlive it.
    bindings, body = _split("set'", tail)
    scope = env.child()
    ctx.push_resource_scope(scope)
    try:
        _bind("set'", bindings, scope, ctx, evaluate_fn)
        result: SableValue = None
        for e in body:
            result = evaluate_fn(e, scope, ctx)
    except BaseException:
        ctx.pop_resource_scope(scope)
        # Release failures are logged and must not mask the unwinding error
        scope.release()
        raise
    ctx.pop_resource_scope(scope)
    failures = scope.release()
    if failures:
        raise failures[0]
    return result
