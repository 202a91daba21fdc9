from __future__ import annotations

from typing import TYPE_CHECKING, Optional, TextIO

from sable import SableValue
from sable.types.environment import Environment
from sable.typesys.model import TypeRegistry

if TYPE_CHECKING:
    from sable.modules.loader import ModuleLoader


class RuntimeContext:
    """State threaded through one program: the root environment, the type
    registry, the output stream, the module loader and the stack of active
    scoped-resource (`set'`) scopes.

    There is one context per Interpreter; nothing here is process-global.
    """

    def __init__(
        self,
        root: Environment,
        registry: TypeRegistry,
        output: TextIO,
        loader: Optional[ModuleLoader] = None,
    ):
        self.root = root
        self.registry = registry
        self.output = output
        self.loader = loader
        self.current_module: Optional[str] = None
        self._resource_scopes: list[Environment] = []

    def call(self, fn: SableValue, args: list[SableValue]) -> SableValue:
        """Apply `fn` to `args` outside tail position and return its value."""
        # Lazy import to avoid circular imports
        from sable.evaluation.apply import apply
        from sable.evaluation.evaluator import evaluate0
        return apply(fn, args, self, evaluate0, False)

    # --- Scoped resources ---
    def push_resource_scope(self, scope: Environment) -> None:
        self._resource_scopes.append(scope)

    def pop_resource_scope(self, scope: Environment) -> None:
        if self._resource_scopes and self._resource_scopes[-1] is scope:
            self._resource_scopes.pop()

    def resource_scope(self) -> Environment:
        """The innermost active `set'` scope, or the root environment."""
        if self._resource_scopes:
            return self._resource_scopes[-1]
        return self.root
