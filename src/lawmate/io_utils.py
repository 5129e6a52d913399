"""JSON helpers built on orjson.

Shared by the DuckDB store (payload columns) and backup export/import.
"""
from __future__ import annotations

from typing import Any

import orjson

JSONDecodeError = orjson.JSONDecodeError


def dumps(obj: Any, *, pretty: bool = False) -> bytes:
    """Serialize *obj* to UTF-8 JSON bytes."""
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts)


def dumps_str(obj: Any) -> str:
    return orjson.dumps(obj).decode("utf-8")


def loads(raw: bytes | str) -> Any:
    """Parse JSON; raises :data:`JSONDecodeError` on malformed input."""
    return orjson.loads(raw)

