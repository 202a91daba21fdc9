from __future__ import annotations

import logging

from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.evaluation.special_forms.patterns import make_body, parse_patterns
from sable.types.environment import Environment
from sable.types.function import Clause, Function
from sable.types.symbol import Annotation, Symbol

logger = logging.getLogger(__name__)


def _define_clause(
    form_name: str,
    tail: list[SExpression],
    env: Environment,
    ctx,
    memoize: bool,
    pure: bool,
) -> Function:
    """
    (def name (params...) [:ReturnType] body...)
    Appends one clause to `name`. Clauses from the module that first defined
    the function accumulate; a definition from a different module shadows it.
    """
    if env is not ctx.root:
        raise SableSyntaxError(f"{form_name}: definitions are only allowed at top level")
    if len(tail) < 3:
        raise SableSyntaxError(f"{form_name} requires a name, a parameter list and a body")

    name, params, *rest = tail
    if not isinstance(name, Symbol) or name.annotation is not None:
        raise SableSyntaxError(f"{form_name}: function name must be a plain identifier, got {name}")

    registry = ctx.registry
    return_type = None
    if rest and isinstance(rest[0], Annotation):
        return_type = registry.parse(rest[0].text)
        rest = rest[1:]
    if not rest:
        raise SableSyntaxError(f"{form_name} {name}: missing body")

    clause = Clause(
        parse_patterns(f"{form_name} {name}", params, registry),
        make_body(rest),
        return_type=return_type,
        memoize=memoize,
        pure=pure,
    )

    existing = env.vars.get(name.id)
    if isinstance(existing, Function) and existing.origin == ctx.current_module:
        fn = existing
    else:
        if existing is not None:
            logger.debug("%s shadows an earlier definition of %s", ctx.current_module or "<main>", name)
        fn = Function(name.id, env, ctx.current_module)
        env.define(name, fn)
    fn.add_clause(clause)
    return fn


def def_form(tail, env, ctx, evaluate_fn: EvaluatorFn, _: bool = False) -> SableValue:
    return _define_clause("def", tail, env, ctx, memoize=False, pure=False)


def def_memo_form(tail, env, ctx, evaluate_fn: EvaluatorFn, _: bool = False) -> SableValue:
    return _define_clause("def'", tail, env, ctx, memoize=True, pure=False)


def defpure_form(tail, env, ctx, evaluate_fn: EvaluatorFn, _: bool = False) -> SableValue:
    return _define_clause("defpure", tail, env, ctx, memoize=False, pure=True)


def defpure_memo_form(tail, env, ctx, evaluate_fn: EvaluatorFn, _: bool = False) -> SableValue:
    return _define_clause("defpure'", tail, env, ctx, memoize=True, pure=True)
