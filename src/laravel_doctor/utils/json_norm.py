"""Canonical JSON serialization — single dump path for report artifacts.

Guarantees:
  - Stable key ordering (``sort_keys=True``)
  - Trailing newline at EOF
  - ``Path`` objects → POSIX strings, enums → their values
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Mapping


def _to_builtin(obj: Any) -> Any:
    """Convert common non-JSON types into JSON-safe builtins."""
    if isinstance(obj, Enum):
        return obj.value
    if obj is None or isinstance(obj, (str, bool, int, float)):
        return obj
    if isinstance(obj, Path):
        return obj.as_posix()
    if isinstance(obj, Mapping):
        return {str(_to_builtin(k)): _to_builtin(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_to_builtin(v) for v in obj]
    # Fall back to string (keeps CLI resilient)
    return str(obj)


def stable_json_dumps(obj: Any, *, indent: int | None = 2) -> str:
    """Canonical JSON used for ``--report`` files and ``export_json``."""
    s = json.dumps(
        _to_builtin(obj),
        indent=indent,
        sort_keys=True,
        ensure_ascii=False,
    )
    return s + "\n"
