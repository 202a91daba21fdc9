from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Source file suffix used by the module loader
SOURCE_SUFFIX = '.sb'

# Defaults
_DEFAULT_MODULE_DIRS = [Path.cwd()]
_DEFAULT_LOG_LEVEL = 'WARNING'
_DEFAULT_MAX_TYPE_DEPTH = 64


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_module_roots() -> List[Path]:
    return paths_from_env('SABLE_PATH', _DEFAULT_MODULE_DIRS)


def get_log_level() -> str:
    return os.environ.get('SABLE_LOG_LEVEL', _DEFAULT_LOG_LEVEL).upper()


def get_max_type_depth() -> int:
    raw = os.environ.get('SABLE_MAX_TYPE_DEPTH')
    if not raw:
        return _DEFAULT_MAX_TYPE_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        return _DEFAULT_MAX_TYPE_DEPTH
    return depth if depth > 0 else _DEFAULT_MAX_TYPE_DEPTH
