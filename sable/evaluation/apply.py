"""Application engine for Sable.

This module centralizes function application semantics for the interpreter:
- Clause selection through the dispatcher for named functions, lambdas and
  typed builtins.
- Tail-call awareness via TailCall objects (consumed by the trampoline).
- The memoization cache of `def'` clauses, consulted before the body runs.
- Call-context frames added to errors unwinding through calls; the
  trampoline names the tail call that was running.

Keeping this logic in one place prevents duplication between the evaluator,
special forms, the generator engine and builtin helpers.
"""

from __future__ import annotations

from sable import EvaluatorFn, SExpression, SableValue
from sable.dispatch import dispatch_values
from sable.errors import SableArityError, SableError, SableTypeError
from sable.printer import render
from sable.types.builtin import Builtin
from sable.types.environment import Environment
from sable.types.function import Function
from sable.types.lambda_fn import Lambda
from sable.types.memo import MISSING, memo_key
from sable.types.tail_call import TailCall, resolve


def _invoke(
    name: str,
    body: SExpression,
    call_env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
) -> SableValue:
    """Evaluate a callee body to completion on a nested trampoline."""
    try:
        return resolve(evaluate_fn(body, call_env, ctx, True), evaluate_fn, ctx)
    except SableError as err:
        err.add_context(name)
        raise
    finally:
        call_env.freeze()


def apply_function(
    fn: Function,
    args: list[SableValue],
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> SableValue | TailCall:
    """Apply a named multi-clause function.

    - The first matching clause is selected by the dispatcher.
    - A memoized clause returns a cached result for a structurally equal
      argument tuple; on a miss its body runs (never as a tail call, since
      the result must be stored) and the result is cached.
    - Otherwise, in tail position, return a TailCall for the trampoline.
    """
    match = dispatch_values(fn.name, fn.clauses, args, ctx.registry, ctx.call)
    clause = match.clause
    call_env = Environment(outer=fn.env)
    call_env.vars.update(match.bindings)

    if clause.memoize:
        key = memo_key(args, ctx.call)
        cached = fn.memo.get(key)
        if cached is not MISSING:
            return cached
        value = _invoke(fn.name, clause.body, call_env, ctx, evaluate_fn)
        fn.memo.store(key, value)
        return value

    if is_tail_call:
        return TailCall(fn.name, fn, args, call_env, clause.body)
    return _invoke(fn.name, clause.body, call_env, ctx, evaluate_fn)


def apply_lambda(
    fn: Lambda,
    args: list[SableValue],
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> SableValue | TailCall:
    """Apply a Lambda value. Wrong argument counts are arity errors."""
    clause = fn.clause
    if len(args) != clause.arity:
        raise SableArityError(
            f"lambda: expected {clause.arity} arguments, got {len(args)}"
        )
    match = dispatch_values("lambda", [clause], args, ctx.registry, ctx.call)
    call_env = Environment(outer=fn.env)
    call_env.vars.update(match.bindings)
    if is_tail_call:
        return TailCall("lambda", fn, args, call_env, clause.body)
    return _invoke("lambda", clause.body, call_env, ctx, evaluate_fn)


def apply_builtin(fn: Builtin, args: list[SableValue], ctx) -> SableValue:
    if fn.signatures is not None:
        dispatch_values(fn.name, fn.signatures, args, ctx.registry, ctx.call)
    return fn(ctx, args)


def apply(
    head: SableValue,
    args: list[SableValue],
    ctx,
    evaluate_fn: EvaluatorFn,
    tail: bool = False,
) -> SableValue | TailCall:
    """Apply a named function, a Lambda or a builtin.

    Anything else is a type error.
    """
    if isinstance(head, Function):
        return apply_function(head, args, ctx, evaluate_fn, tail)
    if isinstance(head, Lambda):
        return apply_lambda(head, args, ctx, evaluate_fn, tail)
    if isinstance(head, Builtin):
        return apply_builtin(head, args, ctx)
    raise SableTypeError(f"Cannot apply non-function {render(head)}")
