"""Runtime environment for Sable.

The Environment stores bindings of names to evaluated values and supports
nested scopes via an `outer` link. Lookups walk the live chain, so a closure
sees bindings added to an outer scope after it was created. A scope that has
been exited is frozen and refuses new bindings. A scope may also own release
callables for resources (open files) acquired while it was active.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sable import SableValue
from sable.errors import SableFrozenScope, SableResourceError, SableUnboundSymbol
from sable.types.symbol import Symbol

logger = logging.getLogger(__name__)

Release = Callable[[], None]


class Environment:
    """Hierarchical mapping from names to Sable values."""

    __slots__ = ("vars", "outer", "resources", "frozen")

    def __init__(self, outer: Optional[Environment] = None):
        self.vars: dict[str, SableValue] = {}
        self.outer: Environment | None = outer
        self.resources: list[tuple[str, Release]] = []
        self.frozen = False

    def define(self, name: Symbol | str, value: SableValue) -> None:
        """Bind `name` to `value` in this scope, shadowing outer bindings."""
        key = name.id if isinstance(name, Symbol) else name
        if self.frozen:
            raise SableFrozenScope(f"Cannot bind {key} in a scope that has been exited")
        self.vars[key] = value

    def find(self, name: Symbol | str) -> Optional[Environment]:
        """Find the nearest environment in the chain that contains `name`."""
        key = name.id if isinstance(name, Symbol) else name
        env: Optional[Environment] = self
        while env is not None:
            if key in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol | str) -> SableValue:
        """Look up the value bound to `name`, innermost scope first.

        Raises SableUnboundSymbol if not found.
        """
        key = name.id if isinstance(name, Symbol) else name
        env: Optional[Environment] = self
        while env is not None:
            vars = env.vars
            if key in vars:
                return vars[key]
            env = env.outer
        raise SableUnboundSymbol(f"Cannot lookup unbound symbol {key}")

    def child(self) -> Environment:
        return Environment(outer=self)

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def update(self, mapping: dict[str, SableValue]) -> None:
        """Bulk-define a mapping of name -> value in the current frame."""
        for k, v in mapping.items():
            self.define(k, v)

    # --- Scoped resources ---
    def acquire(self, description: str, release: Release) -> None:
        if self.frozen:
            raise SableFrozenScope(f"Cannot acquire {description} in a scope that has been exited")
        self.resources.append((description, release))

    def freeze(self) -> None:
        self.frozen = True

    def release(self, freeze: bool = True) -> list[SableResourceError]:
        """Release held resources in reverse acquisition order and, unless
        `freeze` is false, freeze the scope.

        Every handle is released even if an earlier one fails. Failures are
        logged and returned; raising them is left to the caller, which knows
        whether another error is already unwinding.
        """
        failures: list[SableResourceError] = []
        while self.resources:
            description, release = self.resources.pop()
            try:
                release()
            except Exception as exc:
                logger.error("Failed to release %s: %s", description, exc)
                failures.append(SableResourceError(f"Failed to release {description}: {exc}"))
        if freeze:
            self.frozen = True
        return failures

    def __repr__(self) -> str:
        return f"<Environment {len(self.vars)} bindings{' (frozen)' if self.frozen else ''}>"
