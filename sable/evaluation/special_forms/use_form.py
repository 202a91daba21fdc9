from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableRuntimeError, SableSyntaxError
from sable.types.environment import Environment
from sable.types.nil import Nil


def use_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    _: bool = False,
) -> SableValue:
    """(use "std.lists") merges another module's declarations into the root scope."""
    if env is not ctx.root:
        raise SableSyntaxError("use is only allowed at top level")
    if len(tail) != 1 or not isinstance(tail[0], str):
        raise SableSyntaxError('use requires exactly one module name string: (use "name")')
    if ctx.loader is None:
        raise SableRuntimeError("use: no module loader is configured")
    ctx.loader.use(tail[0], ctx)
    return Nil
