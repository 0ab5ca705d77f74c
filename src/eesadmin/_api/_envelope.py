"""Response envelope classification and message extraction.

The backend nests payloads in three ways depending on the endpoint:

  - flat: ``{"success": true, ...}`` with no ``data`` key
  - wrapped: ``{"data": <payload>}``
  - paginated: ``{"data": {"data": [...], "totalCount": n, ...}}``
  - double wrapped: ``{"data": {"data": <payload>, "message": ...}}``

:func:`classify_envelope` is the single place that tells them apart.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

_PAGINATION_MARKERS = ("totalCount", "totalPages")


class EnvelopeKind(enum.StrEnum):
    FLAT = "flat"
    WRAPPED = "wrapped"
    PAGINATED = "paginated"
    DOUBLE_WRAPPED = "double_wrapped"


def classify_envelope(body: Any) -> tuple[EnvelopeKind, Any]:
    """Classify a successful response body and return its normalized data.

    Paginated payloads are passed through untouched so callers can read the
    pagination siblings. A nested ``data`` without pagination markers is
    unwrapped one extra level. Arrays are never unwrapped.
    """
    if not isinstance(body, Mapping):
        return EnvelopeKind.FLAT, body

    inner = body.get("data")
    if inner is None:
        return EnvelopeKind.FLAT, body

    if isinstance(inner, Mapping):
        if any(marker in inner for marker in _PAGINATION_MARKERS):
            return EnvelopeKind.PAGINATED, inner
        if "data" in inner:
            return EnvelopeKind.DOUBLE_WRAPPED, inner["data"]
    return EnvelopeKind.WRAPPED, inner


def normalize_success_payload(body: Any) -> Any:
    return classify_envelope(body)[1]


def _nested(body: Any, *keys: str) -> Any:
    value = body
    for key in keys:
        if not isinstance(value, Mapping):
            return None
        value = value.get(key)
    return value


def _first_text(*values: Any) -> str | None:
    for value in values:
        if isinstance(value, str) and value:
            return value
    return None


def extract_error_message(body: Any, status: int, reason: str | None) -> str:
    """Pick the most specific error message for a non-2xx reply."""
    message = _first_text(_nested(body, "data", "message"), _nested(body, "message"))
    if message is not None:
        return message
    return f"HTTP {status}: {reason or ''}".rstrip()


def extract_error_data(body: Any) -> Any:
    inner = _nested(body, "data", "data")
    if inner is not None:
        return inner
    return _nested(body, "data")


def extract_success_message(body: Any) -> str:
    return _first_text(_nested(body, "data", "message"), _nested(body, "message")) or "Success"
