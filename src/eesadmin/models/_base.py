"""Base model and enum for admin API payloads.

Every response model inherits from :class:`EesBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``raw`` dict that captures the original payload.
* Frozen instances; stores replace entries instead of mutating them.

Status enums inherit from :class:`EesStrEnum` whose ``_missing_`` hook
returns ``UNKNOWN`` for values without a mapped member.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_api_timestamp(value: Any) -> datetime | None:
    """Convert an ISO string or epoch (seconds or milliseconds) to a UTC datetime.

    Returns ``None`` when the value is missing or unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = int(value)
        if ts >= _MS_THRESHOLD:
            ts = ts // 1000
        return datetime.fromtimestamp(ts, tz=UTC)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


ApiTimestamp = Annotated[datetime | None, BeforeValidator(parse_api_timestamp)]
"""Annotated type that coerces ISO strings and epoch numbers to UTC datetimes."""


class EesStrEnum(StrEnum):
    """Base for status enums. Subclasses **must** define ``UNKNOWN``."""

    @classmethod
    def _missing_(cls, value: object) -> EesStrEnum:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        unknown: EesStrEnum = cls["UNKNOWN"]  # type: ignore[misc]
        return unknown


class EesBaseModel(BaseModel):
    """Base for admin API payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API payload."""

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        if "raw" in values:
            return values
        merged = dict(values)
        merged["raw"] = dict(values)
        return merged

    def to_api(self) -> dict[str, Any]:
        """Serialize back to the camelCase API shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
