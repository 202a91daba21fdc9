from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.evaluation.special_forms.do_form import check_cast
from sable.types.environment import Environment
from sable.types.symbol import Symbol


def set_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> SableValue:
    """(set name expr) binds in the current scope; `name:Type` checks the value."""
    if len(tail) != 2:
        raise SableSyntaxError("set requires exactly 2 arguments: (set name value)")
    var_sym, val_expr = tail
    if not isinstance(var_sym, Symbol):
        raise SableSyntaxError(f"set first argument must be an identifier, got {var_sym}")
    value = evaluate_fn(val_expr, env, ctx)
    if var_sym.annotation is not None:
        check_cast("set", value, ctx.registry.parse(var_sym.annotation), ctx)
    env.define(var_sym, value)

    return value
