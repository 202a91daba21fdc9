import pytest
from click.testing import CliRunner

from sable.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def program(tmp_path):
    def _program(source, name="main.sb"):
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return str(path)
    return _program


def test_run_prints_program_output(runner, program):
    result = runner.invoke(main, ["run", program('(print "hello" (+ 1 2))')])
    assert result.exit_code == 0
    assert result.output == "hello 3\n"


def test_run_reports_errors_with_context(runner, program):
    path = program("(def inner (x) (/ x 0))\n(def outer (x) (+ 1 (inner x)))\n(outer 1)")
    result = runner.invoke(main, ["run", path])
    assert result.exit_code == 1
    assert "error: /: division by zero\n  in inner" in result.output


def test_check_clean_program(runner, program):
    result = runner.invoke(main, ["check", program("(def f (x:int) :int x)\n(f 1)")])
    assert result.exit_code == 0
    assert "no errors" in result.output


def test_check_reports_every_diagnostic(runner, program):
    result = runner.invoke(main, ["check", program('(print "never")\n(+ 1 "a")\n(concat 1 2)')])
    assert result.exit_code == 1
    assert "+: no matching function implementation found for [int str]" in result.output
    assert "concat: no matching function implementation found for [int int]" in result.output
    assert "never" not in result.output


def test_log_level_option(runner, program):
    result = runner.invoke(main, ["--log-level", "debug", "check", program("(+ 1 2)")])
    assert result.exit_code == 0


def test_missing_file(runner, tmp_path):
    result = runner.invoke(main, ["run", str(tmp_path / "absent.sb")])
    assert result.exit_code != 0
