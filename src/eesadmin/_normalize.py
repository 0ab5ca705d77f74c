"""Normalization helpers.

Centralizes defensive parsing of loosely typed payload and form values.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def is_blank(value: Any) -> bool:
    """Return True for ``None`` and strings that are empty after stripping."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def split_csv(value: str | None) -> list[str]:
    """Split a comma separated string, trimming items and dropping empties."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def drop_none(params: dict[str, Any] | None) -> dict[str, Any]:
    """Return a copy of *params* without ``None`` values."""
    if not params:
        return {}
    return {key: value for key, value in params.items() if value is not None}
