from io import StringIO

import pytest

from sable.interpreter import Interpreter


@pytest.fixture
def output():
    """Captures everything the program prints."""
    return StringIO()


@pytest.fixture
def interp(output, tmp_path):
    """A fresh interpreter per test; modules resolve against tmp_path."""
    with Interpreter(output, module_roots=[tmp_path]) as interpreter:
        yield interpreter
