from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO

from sable import SExpression, SableValue
from sable.builtin.env_builtin import register
from sable.errors import SableError, SableResourceError, SableRuntimeError
from sable.evaluation.evaluator import evaluate
from sable.modules.loader import ModuleLoader
from sable.runtime_context import RuntimeContext
from sable.types.environment import Environment
from sable.types.nil import Nil
from sable.typesys.checker import Checker
from sable.typesys.model import TypeRegistry

logger = logging.getLogger(__name__)


class Interpreter:
    """
    Orchestrates reading, checking and evaluating Sable code.
    Maintains the root Environment, TypeRegistry and module loader across calls.

    Usable as a context manager; leaving the block releases any resources
    still owned by the root scope (see `close`).
    """

    def __init__(
        self,
        output: Optional[TextIO] = None,
        *,
        module_roots: Optional[Iterable[Path]] = None,
        max_type_depth: Optional[int] = None,
    ):
        self.env: Environment = Environment()
        self.registry = TypeRegistry(max_type_depth)
        register(self.env, self.registry)
        self.loader = ModuleLoader(module_roots)
        self.ctx = RuntimeContext(self.env, self.registry, output or sys.stdout, self.loader)

    def load(self, code: str, origin: Optional[str] = None) -> list[SExpression]:
        """Merge the declarations of `code`; return its remaining top-level forms."""
        return self.loader.load_source(code, self.ctx, origin)

    def run(self, forms: list[SExpression]) -> SableValue:
        result: SableValue = Nil
        try:
            for form in forms:
                result = evaluate(form, self.env, self.ctx)
        except RecursionError as exc:
            raise SableRuntimeError("maximum recursion depth exceeded") from exc
        return result

    def eval(self, code: str) -> SableValue:
        """Evaluate a program and return the value of its last expression ('() if none)."""
        return self.run(self.load(code))

    def run_file(self, path: Path) -> SableValue:
        return self.run(self.loader.load_file(Path(path), self.ctx))

    def check(self, code: str, origin: Optional[str] = None) -> list[SableError]:
        """Type-check a program without evaluating it; return every diagnostic."""
        try:
            forms = self.load(code, origin)
        except SableError as err:
            return [err]
        return Checker(self.registry, self.env).check(forms)

    def check_file(self, path: Path) -> list[SableError]:
        try:
            forms = self.loader.load_file(Path(path), self.ctx)
        except SableError as err:
            return [err]
        return Checker(self.registry, self.env).check(forms)

    def close(self) -> list[SableResourceError]:
        """Release resources still owned by the root scope.

        The root scope stays open, so the interpreter remains usable.
        """
        failures = self.env.release(freeze=False)
        if failures:
            logger.warning("%d resources failed to release on close", len(failures))
        return failures

    def __enter__(self) -> Interpreter:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
