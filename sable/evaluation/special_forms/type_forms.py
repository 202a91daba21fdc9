from __future__ import annotations

import logging

from sable import EvaluatorFn, SExpression, SableValue
from sable.errors import SableSyntaxError
from sable.types.environment import Environment
from sable.types.nil import Nil
from sable.types.symbol import Symbol

logger = logging.getLogger(__name__)


def _type_name(form_name: str, name: SExpression) -> str:
    if not isinstance(name, Symbol) or name.annotation is not None:
        raise SableSyntaxError(f"{form_name}: expected a type name, got {name}")
    return name.id


def _type_text(form_name: str, expr: SExpression) -> str:
    # Parents and bounds are written bare (`int`) or parametrized (`list[int]`)
    if not isinstance(expr, Symbol):
        raise SableSyntaxError(f"{form_name}: expected a type, got {expr}")
    return str(expr)


def deftype_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    _: bool = False,
) -> SableValue:
    """(deftype name parent): declare `name` as a subtype of `parent`."""
    if env is not ctx.root:
        raise SableSyntaxError("deftype is only allowed at top level")
    if len(tail) != 2:
        raise SableSyntaxError("deftype requires a name and a parent type")
    name = _type_name("deftype", tail[0])
    parent = ctx.registry.parse(_type_text("deftype", tail[1]))
    ctx.registry.declare_type(name, parent)
    logger.debug("deftype %s <: %s", name, parent)
    return Nil


def contract_form(
    tail: list[SExpression],
    env: Environment,
    ctx,
    evaluate_fn: EvaluatorFn,
    _: bool = False,
) -> SableValue:
    """(contract Name [bound]): declare a generic type variable, optionally bounded."""
    if env is not ctx.root:
        raise SableSyntaxError("contract is only allowed at top level")
    if len(tail) not in (1, 2):
        raise SableSyntaxError("contract requires a name and an optional bound type")
    name = _type_name("contract", tail[0])
    bound = ctx.registry.parse(_type_text("contract", tail[1])) if len(tail) == 2 else None
    ctx.registry.declare_contract(name, bound)
    logger.debug("contract %s bound=%s", name, bound)
    return Nil
