"""Shared helpers for forms that introduce parameters or bodies."""

from __future__ import annotations

from sable import SExpression
from sable.errors import SableSyntaxError
from sable.evaluation.special_forms.quote_forms import quote_datum
from sable.types.function import Pattern
from sable.types.symbol import Symbol
from sable.typesys.model import TypeRegistry

DO = Symbol("do")


def parse_patterns(form_name: str, params: SExpression, registry: TypeRegistry) -> list[Pattern]:
    """Turn a parameter list into clause patterns.

    `n` binds anything, `n:Type` binds when the argument's type fits, and a
    literal (int, bool, string, quoted list) matches by structural equality.
    """
    if not isinstance(params, list):
        raise SableSyntaxError(f"{form_name}: parameter list must be a list, got {params}")
    patterns: list[Pattern] = []
    for param in params:
        if isinstance(param, Symbol):
            if param.annotation is None:
                patterns.append(Pattern.identifier(param.id))
            else:
                patterns.append(Pattern.typed(param.id, registry.parse(param.annotation)))
        elif isinstance(param, (bool, int, str)):
            patterns.append(Pattern.literal(param))
        elif isinstance(param, list) and len(param) == 2 and param[0] == Symbol("quote"):
            patterns.append(Pattern.literal(quote_datum(param[1])))
        else:
            raise SableSyntaxError(f"{form_name}: invalid parameter pattern {param}")
    return patterns


def make_body(forms: list[SExpression]) -> SExpression:
    """Several body forms are an implicit `do`."""
    if len(forms) == 1:
        return forms[0]
    return [DO, *forms]
