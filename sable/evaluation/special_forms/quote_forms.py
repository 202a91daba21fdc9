from __future__ import annotations

from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.types.cons import from_iterable
from sable.types.environment import Environment
from sable.types.symbol import Symbol


def quote_datum(datum: SExpression) -> SableValue:
    """Convert quoted syntax into a value. Only literal data can be quoted."""
    if isinstance(datum, (bool, int, str)):
        return datum
    if isinstance(datum, list):
        if len(datum) == 2 and datum[0] == Symbol("quote"):
            return quote_datum(datum[1])
        return from_iterable(quote_datum(item) for item in datum)
    raise SableSyntaxError(f"quote: cannot quote {datum}")


def quote_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> SableValue:
    if len(tail) != 1:
        raise SableSyntaxError("quote requires exactly 1 argument")
    return quote_datum(tail[0])
