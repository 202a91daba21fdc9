from __future__ import annotations

from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableTypeError
from sable.printer import render
from sable.types.environment import Environment
from sable.types.nil import Nil
from sable.types.symbol import Annotation
from sable.typesys.model import Type


def check_cast(context: str, value: SableValue, target: Type, ctx) -> SableValue:
    """Return `value` unchanged if its runtime type fits `target`, else raise.

    User types are compared in erased form: `(do 5 :meters)` succeeds when
    `meters` descends from `int`.
    """
    registry = ctx.registry
    if not registry.unify(registry.erase(target), registry.type_of(value), {}, erased=True):
        raise SableTypeError.expected(context, str(target), render(value), 0)
    return value


def do_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> SableValue:
    """(do e1 ... en [:Type]) evaluates in order and returns the last value,
    optionally cast to Type. A cast keeps the last expression out of tail
    position so the check runs on its finished value."""
    cast = None
    if tail and isinstance(tail[-1], Annotation):
        cast = ctx.registry.parse(tail[-1].text)
        tail = tail[:-1]

    if not tail:
        result: SableValue = Nil
    else:
        for e in tail[:-1]:
            evaluate_fn(e, env, ctx)
        if cast is None:
            return evaluate_fn(tail[-1], env, ctx, is_tail_call)
        result = evaluate_fn(tail[-1], env, ctx)

    if cast is not None:
        return check_cast("do", result, cast, ctx)
    return result
