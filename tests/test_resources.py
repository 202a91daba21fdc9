import pytest

from sable.errors import SableArithmeticError, SableResourceError, SableRuntimeError
from sable.types.builtin import Builtin
from sable.types.nil import Nil


@pytest.fixture
def released(interp):
    """Registers `(track name)`, which acquires a resource recorded on release."""
    log = []

    def track(ctx, args):
        name = args[0]
        ctx.resource_scope().acquire(name, lambda: log.append(name))
        return Nil

    def fragile(ctx, args):
        def fail():
            raise OSError("disk gone")
        ctx.resource_scope().acquire(args[0], fail)
        return Nil

    interp.env.define("track", Builtin("track", track, pure=False))
    interp.env.define("fragile", Builtin("fragile", fragile, pure=False))
    return log


def test_scoped_resources_released_in_reverse_order(interp, released):
    assert interp.eval('(set\' ((a (track "a")) (b (track "b"))) 42)') == 42
    assert released == ["b", "a"]


def test_nested_scopes_release_innermost_first(interp, released):
    program = """
    (set' ((a (track "outer")))
      (set' ((b (track "inner"))) 1)
      (track "late")
      2)
    """
    assert interp.eval(program) == 2
    assert released == ["inner", "late", "outer"]


def test_resources_released_when_body_fails(interp, released):
    with pytest.raises(SableArithmeticError):
        interp.eval('(set\' ((a (track "a")) (b (track "b"))) (/ 1 0))')
    assert released == ["b", "a"]


def test_resources_released_when_function_body_fails(interp, released):
    program = """
    (def risky (x) (set' ((r (track "r"))) (/ x 0)))
    (risky 1)
    """
    with pytest.raises(SableArithmeticError):
        interp.eval(program)
    assert released == ["r"]


def test_top_level_resources_belong_to_the_interpreter(interp, released):
    interp.eval('(track "root")')
    assert released == []
    interp.close()
    assert released == ["root"]


def test_release_failure_raised_on_successful_exit(interp, released):
    with pytest.raises(SableResourceError, match="Failed to release x: disk gone"):
        interp.eval('(set\' ((x (fragile "x")) (y (track "y"))) 1)')
    assert released == ["y"]


def test_release_failure_does_not_mask_the_original_error(interp, released):
    with pytest.raises(SableArithmeticError):
        interp.eval('(set\' ((x (fragile "x"))) (/ 1 0))')


def test_open_reads_characters_lazily(interp, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hi!", encoding="utf-8")
    program = f"""
    (set' ((f (open "{path.as_posix()}")))
      (concat (head f) (head (tail f))))
    """
    assert interp.eval(program) == "hi"


def test_open_file_length(interp, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("abc\n", encoding="utf-8")
    assert interp.eval(f'(set\' ((f (open "{path.as_posix()}"))) (length f))') == 4


def test_file_closed_when_scope_exits(interp, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("abc", encoding="utf-8")
    interp.eval(f'(set leaked (set\' ((f (open "{path.as_posix()}"))) f))')
    with pytest.raises(SableRuntimeError, match="read after its scope released it"):
        interp.eval("(head leaked)")


def test_open_missing_file(interp, tmp_path):
    with pytest.raises(SableRuntimeError, match="open: cannot open"):
        interp.eval(f'(open "{(tmp_path / "missing.txt").as_posix()}")')


def test_open_reports_undecodable_files(interp, tmp_path):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"ab\xff\xfe")
    program = f'(set\' ((f (open "{path.as_posix()}"))) (length f))'
    with pytest.raises(SableRuntimeError, match="is not valid UTF-8"):
        interp.eval(program)


def test_interpreter_usable_after_close(interp, released):
    interp.eval('(track "first")')
    assert interp.close() == []
    assert released == ["first"]
    assert interp.eval("(set x 2) (+ x 1)") == 3
    interp.eval('(track "second")')
    interp.close()
    assert released == ["first", "second"]
