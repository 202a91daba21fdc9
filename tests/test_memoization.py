import gc

from hypothesis import given, strategies as st

from sable.types.cons import from_iterable
from sable.types.memo import MISSING, MemoCache, memo_key
from sable.types.values import values_equal


def _no_forcing(fn, args):
    raise AssertionError("strict values never need forcing")


def test_memoized_body_runs_once_per_argument_tuple(interp, output):
    interp.eval("(def' square (n) (do (print \"computing\" n) (* n n)))")
    assert interp.eval("(square 3)") == 9
    assert interp.eval("(square 3)") == 9
    assert interp.eval("(square 4)") == 16
    assert output.getvalue() == "computing 3\ncomputing 4\n"


def test_memo_keys_are_structural(interp, output):
    interp.eval("(def' total (l) (do (print \"miss\") (length l)))")
    interp.eval("(total '(1 2)) (total (list 1 2))")
    assert output.getvalue() == "miss\n"


def test_memo_keys_keep_ints_and_bools_apart(interp, output):
    interp.eval("(def' ident (x) (do (print \"miss\") x))")
    assert interp.eval("(ident 1)") == 1
    assert interp.eval("(ident true)") is True
    assert output.getvalue() == "miss\nmiss\n"


def test_plain_def_is_not_memoized(interp, output):
    interp.eval("(def noisy (n) (do (print n) n))")
    interp.eval("(noisy 1) (noisy 1)")
    assert output.getvalue() == "1\n1\n"


def test_memoized_fibonacci(interp):
    program = """
    (def' fib (0) 0)
    (def' fib (1) 1)
    (def' fib (n) (+ (fib (- n 1)) (fib (- n 2))))
    (fib 50)
    """
    assert interp.eval(program) == 12586269025
    fib = interp.env.lookup("fib")
    assert len(fib.memo) == 51
    assert fib.memo.hits > 0


def test_memoized_calls_tell_distinct_closures_apart(interp):
    interp.eval("(def' apply-it (f) (f 1))")
    results = []
    for k in range(50):
        results.append(interp.eval(f"(apply-it (lambda (x) (+ x {k})))"))
        gc.collect()
    assert results == [k + 1 for k in range(50)]


def test_cache_lookup_counts():
    cache = MemoCache()
    assert cache.get(("k",)) is MISSING
    cache.store(("k",), 1)
    assert cache.get(("k",)) == 1
    assert (cache.hits, cache.misses) == (1, 1)


leaves = st.one_of(st.integers(min_value=-3, max_value=3), st.booleans(), st.sampled_from(["a", "b"]))
values = st.recursive(leaves, lambda children: st.lists(children, max_size=3), max_leaves=8)


def _to_value(v):
    if isinstance(v, list):
        return from_iterable(_to_value(x) for x in v)
    return v


@given(values, values)
def test_memo_keys_agree_with_structural_equality(a, b):
    a, b = _to_value(a), _to_value(b)
    same_key = memo_key([a], _no_forcing) == memo_key([b], _no_forcing)
    assert same_key == values_equal(a, b, _no_forcing)
