from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.evaluation.special_forms.patterns import make_body, parse_patterns
from sable.types.environment import Environment
from sable.types.function import Clause
from sable.types.lambda_fn import Lambda
from sable.types.symbol import Annotation


def lambda_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    _: bool = False,
) -> SableValue:
    # (lambda (params) [:ReturnType] body...) closes over the current env.
    # When there are multiple body forms, the body is an implicit do.
    if len(tail) < 2:
        raise SableSyntaxError("lambda requires a parameter list and a body")

    params, *body_forms = tail
    return_type = None
    if isinstance(body_forms[0], Annotation):
        return_type = ctx.registry.parse(body_forms[0].text)
        body_forms = body_forms[1:]
    if not body_forms:
        raise SableSyntaxError("lambda: missing body")

    clause = Clause(parse_patterns("lambda", params, ctx.registry), make_body(body_forms), return_type)
    return Lambda(clause, env)
