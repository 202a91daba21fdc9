import pytest

from sable.errors import SableEmptyListError, SableTypeError
from sable.types.cons import from_iterable
from sable.types.generator import Generator

COUNTER = """
(def step (n) (do (print "step" n) (list n (+ n 1))))
(set g (gen step 0))
"""


def test_generator_is_lazy(interp, output):
    interp.eval(COUNTER)
    assert isinstance(interp.eval("g"), Generator)
    assert output.getvalue() == ""


def test_each_position_is_forced_once(interp, output):
    interp.eval(COUNTER)
    assert interp.eval("(head g)") == 0
    assert interp.eval("(head g)") == 0
    assert output.getvalue() == "step 0\n"
    assert interp.eval("(head (tail g))") == 1
    assert interp.eval("(head (tail g))") == 1
    assert output.getvalue() == "step 0\nstep 1\n"


def test_tail_does_not_force_the_next_position(interp, output):
    interp.eval(COUNTER)
    interp.eval("(set rest (tail g))")
    assert output.getvalue() == "step 0\n"


def test_single_value_result_is_also_the_next_state(interp):
    program = """
    (def dbl (n) (list (* n 2)))
    (set g (gen dbl 1))
    (str (list (head g) (head (tail g)) (head (tail (tail g)))))
    """
    assert interp.eval(program) == "(2 4 8)"


def test_exhausted_generator(interp):
    interp.eval("(def upto3 (3) '()) (def upto3 (n) (list n (+ n 1)))")
    assert interp.eval("(length (gen upto3 0))") == 3
    assert interp.eval("(= (gen upto3 0) '(0 1 2))") is True
    assert interp.eval("(empty? (gen upto3 3))") is True
    assert interp.eval("(str (gen upto3 0))") == "(0 1 2)"
    with pytest.raises(SableEmptyListError, match="empty list has no head"):
        interp.eval("(head (tail (tail (tail (gen upto3 0)))))")


def test_generators_match_list_patterns(interp):
    program = """
    (def upto3 (3) '())
    (def upto3 (n) (list n (+ n 1)))
    (def len ('()) 0)
    (def len (l:list[int]) (+ 1 (len (tail l))))
    (len (gen upto3 0))
    """
    assert interp.eval(program) == 3


def test_generator_from_lambda(interp):
    assert interp.eval("(head (gen (lambda (s) (list s (+ s 1))) 7))") == 7


def test_iterator_must_return_a_short_list(interp):
    interp.eval("(def bad (n) 5)")
    with pytest.raises(SableTypeError) as exc:
        interp.eval("(head (gen bad 0))")
    assert str(exc.value) == "gen: iterator must return '(), (value) or (value state), found 5"


def test_cons_onto_a_generator(interp, output):
    interp.eval(COUNTER)
    assert interp.eval("(head (tail (cons 9 g)))") == 0
    assert output.getvalue() == "step 0\n"


def test_force_is_write_once():
    calls = []

    def call(fn, args):
        calls.append(args[0])
        return from_iterable([args[0], args[0] + 1])

    g = Generator("iterator", 0)
    head, rest = g.force(call)
    assert head == 0
    assert g.force(call)[0] == 0
    assert calls == [0]
    assert rest.force(call)[0] == 1
    assert calls == [0, 1]
