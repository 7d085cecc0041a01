from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator


def load_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _format_path(error: Any) -> str:
    path = "$"
    for p in error.path:
        path += f"[{p!r}]" if isinstance(p, str) else f"[{p}]"
    return path


def validate_instance(schema: Any, inst: Any) -> list[str]:
    """
    Validate an in-memory JSON value against a schema.
    Returns "<jsonpath>: <message>" strings, empty if valid.
    """
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(inst), key=lambda e: list(e.path))
    return [f"{_format_path(e)}: {e.message}" for e in errors]
