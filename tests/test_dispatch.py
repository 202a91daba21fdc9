import pytest

from sable.builtin.env_builtin import signature
from sable.dispatch import dispatch_types, dispatch_values
from sable.errors import SableDispatchError
from sable.types.cons import from_iterable
from sable.typesys.model import INT, STR, Type, TypeRegistry


def _no_forcing(fn, args):
    raise AssertionError("strict values never need forcing")


@pytest.fixture
def registry():
    return TypeRegistry()


def test_earliest_matching_clause_wins(interp):
    program = """
    (def fact (0) 1)
    (def fact (n:int) (* n (fact (- n 1))))
    (fact 5)
    """
    assert interp.eval(program) == 120


def test_declaration_order_not_specificity(interp):
    program = """
    (def kind (n:int) "int")
    (def kind (0) "zero")
    (kind 0)
    """
    assert interp.eval(program) == "int"


def test_literal_patterns_by_value(interp):
    program = """
    (def name (true) "yes")
    (def name (false) "no")
    (def name ("x") "ex")
    (def name ('()) "empty")
    (def name (other) "other")
    (str (list (name true) (name false) (name "x") (name '()) (name 1)))
    """
    assert interp.eval(program) == '("yes" "no" "ex" "empty" "other")'


def test_bool_is_not_an_int(interp):
    interp.eval("(def g (x:int) x)")
    with pytest.raises(SableDispatchError) as exc:
        interp.eval("(g true)")
    assert str(exc.value) == "g: no matching function implementation found for [true]"


def test_dispatch_error_message_lists_rendered_arguments(interp):
    interp.eval("(def h (x:int y:str) x)")
    with pytest.raises(SableDispatchError) as exc:
        interp.eval("(h \"a\" '(1 2))")
    assert str(exc.value) == 'h: no matching function implementation found for ["a" (1 2)]'


def test_builtin_arguments_are_checked(interp):
    with pytest.raises(SableDispatchError) as exc:
        interp.eval('(+ 1 "a")')
    assert str(exc.value) == '+: no matching function implementation found for [1 "a"]'


def test_arity_is_part_of_matching(interp):
    interp.eval("(def two (a b) a)")
    with pytest.raises(SableDispatchError, match=r"two: no matching function implementation found for \[1\]"):
        interp.eval("(two 1)")


def test_generic_variable_is_consistent_within_one_call(interp):
    interp.eval("(def same (x:a y:a) true)")
    assert interp.eval("(same 1 2)") is True
    assert interp.eval("(same '(1) '(2 3))") is True
    with pytest.raises(SableDispatchError) as exc:
        interp.eval('(same 1 "s")')
    assert str(exc.value) == 'same: no matching function implementation found for [1 "s"]'


def test_generic_bindings_do_not_leak_between_calls(interp):
    interp.eval("(def same (x:a y:a) true)")
    assert interp.eval('(same "a" "b")') is True
    assert interp.eval("(same 1 2)") is True


def test_typed_list_parameter(interp):
    interp.eval("(def total (l:list[int]) (length l))")
    assert interp.eval("(total '(1 2 3))") == 3
    assert interp.eval("(total '())") == 0
    with pytest.raises(SableDispatchError):
        interp.eval("(total '(1 \"a\"))")


def test_user_types_match_their_builtin_ancestor_at_runtime(interp):
    interp.eval("(deftype meters int) (def double (m:meters) (* m 2))")
    assert interp.eval("(double 4)") == 8
    with pytest.raises(SableDispatchError):
        interp.eval('(double "4")')


def test_dispatch_values_binds_parameters(registry):
    clause = signature("(n:int l:list[a]) :a", registry)
    match = dispatch_values("pick", [clause], [1, from_iterable([2, 3])], registry, _no_forcing)
    assert match.bindings["n"] == 1
    assert match.type_bindings == {"a": INT}
    assert match.return_type == INT


def test_dispatch_types_uses_the_same_matcher(registry):
    clauses = [signature("(n:int l:list[a]) :a", registry)]
    match = dispatch_types("pick", clauses, [INT, Type("list", (STR,))], registry)
    assert match.return_type == STR
    with pytest.raises(SableDispatchError) as exc:
        dispatch_types("pick", clauses, [STR, Type("list", (INT,))], registry)
    assert str(exc.value) == "pick: no matching function implementation found for [str list[int]]"


def test_unresolved_return_variable_is_any(registry):
    clause = signature("(x) :a", registry)
    assert str(dispatch_types("f", [clause], [INT], registry).return_type) == "any"
