"""Sable type model: a subtype lattice rooted at `any`, parametrized `list`
and `func` types, and generic type variables.

Types are small immutable `Type(name, args)` nodes. A `TypeRegistry` owns
the mutable parts of the model (user types from `deftype`, variables from
`contract`) and implements subtyping, unification, joins and the runtime
type of a value. The same registry serves the evaluator and the checker.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from sable import SableValue
from sable.config import get_max_type_depth
from sable.errors import SableTypeError
from sable.types.builtin import Builtin
from sable.types.cons import Cons
from sable.types.function import Clause, Function, PatternKind
from sable.types.generator import Generator
from sable.types.lambda_fn import Lambda
from sable.types.nil import Nil


class Type:
    __slots__ = ("name", "args")

    def __init__(self, name: str, args: tuple[Type, ...] = ()):
        self.name = name
        self.args = args

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Type) and self.name == other.name and self.args == other.args

    def __hash__(self) -> int:
        return hash((self.name, self.args))

    def __str__(self) -> str:
        if self.name == "list" and self.args == (ANY,):
            return "list"
        if not self.args:
            return self.name
        return f"{self.name}[{','.join(str(a) for a in self.args)}]"

    def __repr__(self) -> str:
        return f"Type({str(self)!r})"


ANY = Type("any")
INT = Type("int")
STR = Type("str")
BOOL = Type("bool")
FUNC = Type("func")
LIST = Type("list", (ANY,))
# Element type of the empty list; acceptable wherever any type is required.
NOTHING = Type("nothing")
EMPTY_LIST = Type("list", (NOTHING,))

BUILTIN_TYPES: dict[str, Optional[Type]] = {
    "any": None,
    "int": ANY,
    "str": ANY,
    "bool": ANY,
    "list": ANY,
    "func": ANY,
}
GENERIC_VARIABLES = ("a", "b", "c", "d", "e")

_TYPE_TOKEN_RE = re.compile(r"\s*(?:([A-Za-z_][\w\-?']*)|(\[)|(\])|(,))")


class TypeRegistry:
    def __init__(self, max_depth: Optional[int] = None):
        self.max_depth = max_depth if max_depth is not None else get_max_type_depth()
        self.parents: dict[str, Optional[Type]] = dict(BUILTIN_TYPES)
        # generic variable name -> contract bound (None means unbounded)
        self.variables: dict[str, Optional[Type]] = {v: None for v in GENERIC_VARIABLES}

    # --- Declarations ---
    def declare_type(self, name: str, parent: Type) -> Type:
        if name in self.parents or name in self.variables or name == NOTHING.name:
            raise SableTypeError(f"deftype: type {name} is already defined")
        if self.is_variable(parent):
            raise SableTypeError(f"deftype: parent of {name} cannot be the type variable {parent}")
        self.parents[name] = parent
        return Type(name)

    def declare_contract(self, name: str, bound: Optional[Type] = None) -> Type:
        if name in self.parents:
            raise SableTypeError(f"contract: {name} is already a type")
        if name in self.variables and self.variables[name] != bound:
            raise SableTypeError(f"contract: {name} is already declared")
        self.variables[name] = bound
        return Type(name)

    def is_variable(self, t: Type) -> bool:
        return not t.args and t.name in self.variables

    def is_known(self, name: str) -> bool:
        return name in self.parents or name in self.variables

    # --- Parsing ---
    def parse(self, text: str) -> Type:
        """Parse `int`, `list[a]`, `func[int,str,bool]`, user types and variables."""
        tokens = self._tokenize(text)
        pos, result = self._parse_type(tokens, 0, text)
        if pos != len(tokens):
            raise SableTypeError(f"malformed type {text}")
        return result

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        tokens: list[str] = []
        pos = 0
        text = text.strip()
        while pos < len(text):
            m = _TYPE_TOKEN_RE.match(text, pos)
            if not m or m.end() == pos:
                raise SableTypeError(f"malformed type {text}")
            tokens.append(m.group(m.lastindex))
            pos = m.end()
        return tokens

    def _parse_type(self, tokens: list[str], pos: int, text: str) -> tuple[int, Type]:
        if pos >= len(tokens) or tokens[pos] in "[],":
            raise SableTypeError(f"malformed type {text}")
        name = tokens[pos]
        pos += 1
        if not self.is_known(name):
            raise SableTypeError(f"unknown type {name}")
        args: list[Type] = []
        if pos < len(tokens) and tokens[pos] == "[":
            pos += 1
            while True:
                pos, arg = self._parse_type(tokens, pos, text)
                args.append(arg)
                if pos < len(tokens) and tokens[pos] == ",":
                    pos += 1
                    continue
                if pos < len(tokens) and tokens[pos] == "]":
                    pos += 1
                    break
                raise SableTypeError(f"malformed type {text}")
        if name == "list":
            if len(args) > 1:
                raise SableTypeError(f"list takes one type argument, got {len(args)} in {text}")
            return pos, Type("list", (args[0] if args else ANY,))
        if args and name != "func":
            raise SableTypeError(f"type {name} takes no type arguments in {text}")
        return pos, Type(name, tuple(args))

    # --- Lattice ---
    def parent_of(self, t: Type) -> Optional[Type]:
        if t.name in self.variables and not t.args:
            return self.variables[t.name] or ANY
        if t.name in ("list", "func"):
            return ANY
        return self.parents.get(t.name)

    def is_subtype(self, a: Type, b: Type, depth: int = 0) -> bool:
        """True if a value of type `a` is acceptable where `b` is required."""
        if b is ANY or (b.name == "any" and not b.args):
            return True
        if a is b or a == b:
            return True
        if a.name == "nothing":
            return True
        if a.name == b.name:
            if a.name == "list":
                return self.is_subtype(a.args[0], b.args[0], depth)
            if a.name == "func":
                # parametrized and bare func are interchangeable
                return not a.args or not b.args
            return False
        parent = self.parent_of(a)
        if parent is None or depth >= self.max_depth:
            return False
        return self.is_subtype(parent, b, depth + 1)

    def join(self, a: Type, b: Type) -> Type:
        """Least common supertype of `a` and `b`."""
        if self.is_subtype(a, b):
            return b
        if self.is_subtype(b, a):
            return a
        if a.name == "list" and b.name == "list":
            return Type("list", (self.join(a.args[0], b.args[0]),))
        if a.name == "func" and b.name == "func":
            return FUNC
        parent = self.parent_of(a)
        depth = 0
        while parent is not None and depth < self.max_depth:
            if self.is_subtype(b, parent):
                return parent
            parent = self.parent_of(parent)
            depth += 1
        return ANY

    # --- Generics ---
    def unify(self, declared: Type, actual: Type, bindings: dict[str, Type], erased: bool = False) -> bool:
        """Match `actual` against `declared`, binding generic variables in `bindings`.

        A variable that is already bound accepts an equal or compatible type:
        a subtype keeps the binding, a supertype widens it. With `erased`,
        contract bounds are compared in their runtime (erased) form.
        """
        if self.is_variable(declared):
            bound = self.variables[declared.name]
            if bound is not None and erased:
                bound = self.erase(bound)
            if bound is not None and not self.is_subtype(actual, bound):
                return False
            current = bindings.get(declared.name)
            if current is None:
                bindings[declared.name] = actual
                return True
            if self.is_subtype(actual, current):
                return True
            if self.is_subtype(current, actual):
                bindings[declared.name] = actual
                return True
            return False
        if actual.name == "nothing":
            # Unknown types leave every variable they meet unknown as well
            for name in self._variables_in(declared):
                bindings.setdefault(name, actual)
            return True
        if declared.name == "list":
            element = self._element_type(actual)
            if element is None:
                return False
            return self.unify(declared.args[0], element, bindings, erased)
        if declared.name == "func" and declared.args:
            params = self._func_args(actual)
            if params is None:
                return False
            if not params:
                return True
            if len(params) != len(declared.args):
                return False
            return all(self.unify(d, p, bindings, erased) for d, p in zip(declared.args, params))
        return self.is_subtype(actual, declared)

    def erase(self, t: Type, depth: int = 0) -> Type:
        """The runtime form of `t`. Values never carry user types, so a user
        type is represented by its nearest built-in ancestor."""
        if self.is_variable(t):
            return t
        if t.name in BUILTIN_TYPES or t.name == NOTHING.name:
            return Type(t.name, tuple(self.erase(a, depth) for a in t.args)) if t.args else t
        parent = self.parent_of(t)
        if parent is None or depth >= self.max_depth:
            return ANY
        return self.erase(parent, depth + 1)

    def substitute(self, t: Type, bindings: dict[str, Type]) -> Type:
        if self.is_variable(t):
            return bindings.get(t.name, ANY)
        if not t.args:
            return t
        return Type(t.name, tuple(self.substitute(a, bindings) for a in t.args))

    def _variables_in(self, t: Type) -> Iterator[str]:
        if self.is_variable(t):
            yield t.name
        for arg in t.args:
            yield from self._variables_in(arg)

    def _element_type(self, t: Type) -> Optional[Type]:
        depth = 0
        while t is not None and depth <= self.max_depth:
            if t.name == "list":
                return t.args[0]
            t = self.parent_of(t)
            depth += 1
        return None

    def _func_args(self, t: Type) -> Optional[tuple[Type, ...]]:
        depth = 0
        while t is not None and depth <= self.max_depth:
            if t.name == "func":
                return t.args
            t = self.parent_of(t)
            depth += 1
        return None

    # --- Runtime types ---
    def type_of(self, value: SableValue) -> Type:
        if isinstance(value, bool):
            return BOOL
        if isinstance(value, int):
            return INT
        if isinstance(value, str):
            return STR
        if value is Nil:
            return EMPTY_LIST
        if isinstance(value, Cons):
            return self._cons_type(value)
        if isinstance(value, Generator):
            # Elements of an unforced lazy list are unknown and never checked
            return EMPTY_LIST
        if isinstance(value, Function):
            return self.function_type(value)
        if isinstance(value, Lambda):
            return self.clause_type(value.clause)
        if isinstance(value, Builtin):
            if value.signatures and len(value.signatures) == 1:
                return self.clause_type(value.signatures[0])
            return FUNC
        return ANY

    def _cons_type(self, value: Cons) -> Type:
        # Walk to the first cell with a cached type, then fill caches backwards
        pending: list[Cons] = []
        node: SableValue = value
        while isinstance(node, Cons) and node._type is None:
            pending.append(node)
            node = node.tail
        if isinstance(node, Cons):
            element = node._type.args[0]
        elif node is Nil:
            element = NOTHING
        else:
            element = ANY
        for cell in reversed(pending):
            element = self.join(element, self.type_of(cell.head))
            cell._type = Type("list", (element,))
        return value._type

    def clause_type(self, clause: Clause) -> Type:
        if clause.return_type is None or any(p.kind is not PatternKind.TYPED for p in clause.patterns):
            return FUNC
        return Type("func", tuple(p.type for p in clause.patterns) + (clause.return_type,))

    def function_type(self, fn: Function) -> Type:
        """func[T1..Tn,R] when every clause shares one declared signature, else func."""
        types = {self.clause_type(c) for c in fn.clauses}
        if len(types) == 1:
            return types.pop()
        return FUNC

    def literal_compatible(self, literal: SableValue, t: Type) -> bool:
        lt = self.type_of(literal)
        return self.is_subtype(lt, t) or self.is_subtype(t, lt)
