"""Built-in functions for the Sable runtime environment.

This module defines core arithmetic, comparison, boolean, list and lazy-list
primitives plus the two I/O primitives (`print`, `open`), and registers them
in the root environment. Each builtin carries signature clauses written in
Sable syntax; the dispatcher validates runtime arguments against them and
the static checker types calls with them.
"""
from __future__ import annotations

import operator
from typing import Callable, Optional

from sable import SableValue
from sable.errors import SableArithmeticError, SableRuntimeError, SableSyntaxError
from sable.evaluation.special_forms.patterns import parse_patterns
from sable.printer import to_text
from sable.reader.parser import parse
from sable.types.builtin import Builtin
from sable.types.cons import Cons, from_iterable
from sable.types.environment import Environment
from sable.types.function import Clause
from sable.types.generator import Generator
from sable.types.nil import Nil
from sable.types.symbol import Annotation
from sable.types.values import is_empty_list, iter_list, list_head, list_tail, values_equal
from sable.typesys.model import TypeRegistry


def signature(text: str, registry: TypeRegistry) -> Clause:
    """Parse `(x:int y:int) :int` into a body-less clause."""
    forms = list(parse(text))
    if not forms or len(forms) > 2 or not isinstance(forms[0], list):
        raise SableSyntaxError(f"Malformed builtin signature {text!r}")
    return_type = None
    if len(forms) == 2:
        if not isinstance(forms[1], Annotation):
            raise SableSyntaxError(f"Malformed builtin signature {text!r}")
        return_type = registry.parse(forms[1].text)
    return Clause(parse_patterns("signature", forms[0], registry), None, return_type)


# -------------------------------
# Arithmetic
# -------------------------------
def add(ctx, args: list[SableValue]) -> SableValue:
    """Integer sum of two arguments."""
    return args[0] + args[1]


def sub(ctx, args: list[SableValue]) -> SableValue:
    return args[0] - args[1]


def mul(ctx, args: list[SableValue]) -> SableValue:
    return args[0] * args[1]


def div(ctx, args: list[SableValue]) -> SableValue:
    """Floor division; dividing by zero is a runtime error."""
    n, d = args
    if d == 0:
        raise SableArithmeticError("/: division by zero")
    return n // d


def mod(ctx, args: list[SableValue]) -> SableValue:
    """(% n d) => n % d, with the sign of d."""
    n, d = args
    if d == 0:
        raise SableArithmeticError("%: modulo by zero")
    return n % d


def _comparison(op: Callable[[SableValue, SableValue], bool]):
    def compare(ctx, args: list[SableValue]) -> bool:
        return op(args[0], args[1])
    return compare


def equals(ctx, args: list[SableValue]) -> bool:
    """Structural equality; lists are compared element-wise after forcing."""
    return values_equal(args[0], args[1], ctx.call)


def not_equals(ctx, args: list[SableValue]) -> bool:
    return not values_equal(args[0], args[1], ctx.call)


# -------------------------------
# Boolean logic
# -------------------------------
def logical_and(ctx, args: list[SableValue]) -> bool:
    return args[0] and args[1]


def logical_or(ctx, args: list[SableValue]) -> bool:
    return args[0] or args[1]


def logical_not(ctx, args: list[SableValue]) -> bool:
    return not args[0]


# -------------------------------
# Lists and lazy lists
# -------------------------------
def cons(ctx, args: list[SableValue]) -> SableValue:
    return Cons(args[0], args[1])


def head(ctx, args: list[SableValue]) -> SableValue:
    return list_head(args[0], ctx.call)


def tail(ctx, args: list[SableValue]) -> SableValue:
    return list_tail(args[0], ctx.call)


def is_empty(ctx, args: list[SableValue]) -> bool:
    return is_empty_list(args[0], ctx.call)


def length(ctx, args: list[SableValue]) -> int:
    """Number of elements; forces a lazy list completely."""
    return sum(1 for _ in iter_list(args[0], ctx.call))


def list_builtin(ctx, args: list[SableValue]) -> SableValue:
    return from_iterable(args)


def gen(ctx, args: list[SableValue]) -> Generator:
    """(gen iterator state): an unforced lazy list."""
    return Generator(args[0], args[1])


# -------------------------------
# Strings
# -------------------------------
def concat(ctx, args: list[SableValue]) -> str:
    return args[0] + args[1]


def to_string(ctx, args: list[SableValue]) -> str:
    return to_text(args[0], ctx.call)


# -------------------------------
# I/O
# -------------------------------
def print_builtin(ctx, args: list[SableValue]) -> SableValue:
    """Write the arguments separated by spaces, then a newline; returns '()."""
    ctx.output.write(" ".join(to_text(a, ctx.call) for a in args))
    ctx.output.write("\n")
    return Nil


def open_file(ctx, args: list[SableValue]) -> Generator:
    """(open path): a lazy list of the file's characters.

    The file handle is owned by the innermost active `set'` scope (or the
    root scope) and closed when that scope is exited.
    """
    path = args[0]
    try:
        handle = open(path, encoding="utf-8")
    except OSError as exc:
        raise SableRuntimeError(f"open: cannot open {path}: {exc.strerror}") from exc
    ctx.resource_scope().acquire(f"file {path}", handle.close)

    def read_char(_ctx, iter_args: list[SableValue]) -> SableValue:
        position = iter_args[0]
        if handle.closed:
            raise SableRuntimeError(f"open: {path} was read after its scope released it")
        try:
            ch = handle.read(1)
        except UnicodeDecodeError as exc:
            raise SableRuntimeError(f"open: {path} is not valid UTF-8") from exc
        if not ch:
            return Nil
        return from_iterable([ch, position + 1])

    return Generator(Builtin(f"read {path}", read_char), 0)


# -------------------------------
# Registration
# -------------------------------
_INT_BINARY = ["(x:int y:int) :int"]
_ORDERED = ["(x:int y:int) :bool", "(x:str y:str) :bool"]
_BOOL_BINARY = ["(x:bool y:bool) :bool"]

BUILTINS: list[tuple[str, Callable, Optional[list[str]], bool]] = [
    ("+", add, _INT_BINARY, True),
    ("-", sub, _INT_BINARY, True),
    ("*", mul, _INT_BINARY, True),
    ("/", div, _INT_BINARY, True),
    ("%", mod, _INT_BINARY, True),
    ("<", _comparison(operator.lt), _ORDERED, True),
    (">", _comparison(operator.gt), _ORDERED, True),
    ("<=", _comparison(operator.le), _ORDERED, True),
    (">=", _comparison(operator.ge), _ORDERED, True),
    ("=", equals, ["(x y) :bool"], True),
    ("!=", not_equals, ["(x y) :bool"], True),
    ("and", logical_and, _BOOL_BINARY, True),
    ("or", logical_or, _BOOL_BINARY, True),
    ("not", logical_not, ["(x:bool) :bool"], True),
    ("cons", cons, ["(x:a l:list[a]) :list[a]", "(x l:list) :list"], True),
    ("head", head, ["(l:list[a]) :a"], True),
    ("tail", tail, ["(l:list[a]) :list[a]"], True),
    ("empty?", is_empty, ["(l:list) :bool"], True),
    ("length", length, ["(l:list) :int"], True),
    ("list", list_builtin, None, True),
    ("gen", gen, ["(f:func s) :list"], True),
    ("concat", concat, ["(x:str y:str) :str"], True),
    ("str", to_string, ["(x) :str"], True),
    ("print", print_builtin, None, False),
    ("open", open_file, ["(path:str) :list[str]"], False),
]


def register(env: Environment, registry: TypeRegistry) -> None:
    env.update({
        name: Builtin(
            name,
            impl,
            [signature(s, registry) for s in sigs] if sigs is not None else None,
            pure,
        )
        for name, impl, sigs, pure in BUILTINS
    })
