"""Core evaluator and trampoline for the Sable interpreter.

Implements special-form dispatch and tail-call aware application via a
simple trampoline using TailCall objects. `evaluate0` with
`is_tail_call=False` always returns a finished value; only tail positions
may hand a TailCall back to the loop in `evaluate`.
"""

from __future__ import annotations

from sable import SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.evaluation.apply import apply
from sable.evaluation.special_forms import SPECIAL_FORMS
from sable.types.environment import Environment
from sable.types.symbol import Annotation, Symbol
from sable.types.tail_call import TailCall, resolve


def evaluate(expr: SExpression, env: Environment, ctx) -> SableValue:
    """
    Trampoline evaluator: tail-call aware evaluation.
    """
    return resolve(evaluate0(expr, env, ctx, True), evaluate0, ctx)


def evaluate0(
    expr: SExpression,
    env: Environment,
    ctx,
    is_tail_call: bool = False,
) -> SableValue | TailCall:
    """
    Core evaluator: single-step evaluation with tail-call awareness.
    Returns either a value or (in tail position only) a TailCall.
    """
    if isinstance(expr, Symbol):
        return env.lookup(expr)

    if isinstance(expr, list):
        if not expr:
            raise SableSyntaxError("Empty application (); use '() for the empty list")
        head, *tail_args = expr
        # --- Special forms handling ---
        if isinstance(head, Symbol) and head.id in SPECIAL_FORMS:
            return SPECIAL_FORMS[head.id](tail_args, env, ctx, evaluate0, is_tail_call)

        fn = evaluate0(head, env, ctx)
        # Strict, left-to-right argument evaluation
        args = [evaluate0(arg, env, ctx) for arg in tail_args]
        result = apply(fn, args, ctx, evaluate0, is_tail_call)
        return result

    if isinstance(expr, Annotation):
        raise SableSyntaxError(f"Unexpected type annotation {expr}")

    # --- Atoms return as-is ---
    return expr
