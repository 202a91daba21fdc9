"""Module loading for `(use "name")`.

Loading a module merges its declarations (function clauses, `deftype`,
`contract` and nested `use`) into the root environment and type registry.
Declarations are hoisted: within one source, `use` forms load first, then
type declarations, then function clauses, each group in source order. The
remaining forms of the main program are handed back to the caller; those of
a used module are ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from sable import SExpression
from sable.config import SOURCE_SUFFIX, get_module_roots
from sable.errors import SableRuntimeError
from sable.evaluation.evaluator import evaluate
from sable.reader.parser import parse
from sable.types.symbol import Symbol

logger = logging.getLogger(__name__)

USE_FORMS = frozenset({"use"})
TYPE_FORMS = frozenset({"deftype", "contract"})
DEFINITION_FORMS = frozenset({"def", "def'", "defpure", "defpure'"})
DECLARATION_FORMS = USE_FORMS | TYPE_FORMS | DEFINITION_FORMS


def form_name(form: SExpression) -> Optional[str]:
    if isinstance(form, list) and form and isinstance(form[0], Symbol):
        return form[0].id
    return None


def is_declaration(form: SExpression) -> bool:
    return form_name(form) in DECLARATION_FORMS


def _hoisted(forms: list[SExpression]) -> list[SExpression]:
    groups = (USE_FORMS, TYPE_FORMS, DEFINITION_FORMS)
    return [f for group in groups for f in forms if form_name(f) in group]


# Map a dotted namespace (or an explicit relative path) to a source file

def _ns_to_relpath(namespace: str) -> Path:
    if namespace.endswith(SOURCE_SUFFIX) or "/" in namespace:
        return Path(namespace)
    return Path(*namespace.split('.')).with_suffix(SOURCE_SUFFIX)


class ModuleLoader:
    def __init__(self, roots: Optional[Iterable[Path]] = None):
        self.roots: list[Path] = list(roots) if roots is not None else get_module_roots()
        self.loaded: set[str] = set()

    def resolve(self, namespace: str, base_dir: Optional[Path] = None) -> Optional[Path]:
        rel = _ns_to_relpath(namespace)
        candidates = ([base_dir] if base_dir is not None else []) + self.roots
        for root in candidates:
            candidate = root / rel
            if candidate.is_file():
                return candidate
        return None

    def use(self, namespace: str, ctx) -> None:
        base_dir = Path(ctx.current_module).parent if ctx.current_module else None
        path = self.resolve(namespace, base_dir)
        if path is None:
            raise SableRuntimeError(f"use: cannot find module '{namespace}'")
        leftovers = self.load_file(path, ctx)
        if leftovers:
            logger.debug("Ignoring %d top-level expressions in module %s", len(leftovers), path)

    def load_file(self, path: Path, ctx) -> list[SExpression]:
        key = str(Path(path).resolve())
        if key in self.loaded:
            return []
        self.loaded.add(key)
        logger.debug("Loading module %s", key)
        code = Path(path).read_text(encoding='utf-8')
        return self.load_source(code, ctx, origin=key)

    def load_source(self, code: str, ctx, origin: Optional[str] = None) -> list[SExpression]:
        """Merge the declarations in `code`; return its other top-level forms."""
        forms = list(parse(code))
        previous = ctx.current_module
        ctx.current_module = origin
        try:
            for form in _hoisted(forms):
                evaluate(form, ctx.root, ctx)
        finally:
            ctx.current_module = previous
        return [f for f in forms if not is_declaration(f)]
