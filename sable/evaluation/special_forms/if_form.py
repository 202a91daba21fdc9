from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError, SableTypeError
from sable.printer import render
from sable.types.environment import Environment
from sable.types.nil import Nil


def if_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> SableValue:
    if len(tail) not in (2, 3):
        raise SableSyntaxError("if requires a condition, a then-expression and an optional else")

    cond = evaluate_fn(tail[0], env, ctx)
    if not isinstance(cond, bool):
        raise SableTypeError.expected("if", "bool", render(cond), 0)

    # Only the chosen branch is evaluated; it inherits our tail position
    if cond:
        return evaluate_fn(tail[1], env, ctx, is_tail_call)
    elif len(tail) > 2:
        return evaluate_fn(tail[2], env, ctx, is_tail_call)
    else:
        return Nil
