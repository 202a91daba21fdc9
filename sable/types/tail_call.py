from __future__ import annotations

from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableError
from sable.types.environment import Environment


class TailCall:
    """A pending call in tail position: the trampoline continues with `body`
    evaluated in `env` instead of growing the host stack."""

    __slots__ = ("name", "fn", "args", "env", "body")

    def __init__(self, name: str, fn: SableValue, args: list[SableValue], env: Environment, body: SExpression):
        self.name = name
        self.fn = fn
        self.args = args
        self.env = env
        self.body = body


def resolve(result: SableValue | TailCall, evaluate_fn: EvaluatorFn, ctx) -> SableValue:
    """Run the trampoline until a value (not a TailCall) is produced.

    Tail calls share one host frame, so an error only names the tail call
    that was running when it was raised.
    """
    while isinstance(result, TailCall):
        try:
            result = evaluate_fn(result.body, result.env, ctx, True)
        except SableError as err:
            err.add_context(result.name)
            raise
    return result
