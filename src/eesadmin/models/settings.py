"""Server health and system settings models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from eesadmin._normalize import safe_float, safe_int
from eesadmin.models._base import ApiTimestamp, EesBaseModel


class ServerHealth(EesBaseModel):
    """Health of the backend as seen from the console.

    ``status`` is ``healthy``, ``unhealthy``, ``offline`` (unreachable)
    or ``unknown`` (never checked). ``database`` is ``connected`` or
    ``error``.
    """

    status: str = "unknown"
    database: str | None = None
    database_name: str | None = None
    uptime: float | None = None
    memory: Any = None
    version: str | None = None
    last_checked: ApiTimestamp = None

    @field_validator("uptime", mode="before")
    @classmethod
    def _coerce_uptime(cls, value: Any) -> float | None:
        return safe_float(value)

    @classmethod
    def from_payload(cls, payload: Any, *, status: str, checked_at: Any) -> ServerHealth:
        """Build from a ``/health`` body ``{success, database: {status, name}, ...}``."""
        body = payload if isinstance(payload, dict) else {}
        database = body.get("database")
        database = database if isinstance(database, dict) else {}
        return cls(
            status=status,
            database="connected" if database.get("status") == "connected" else "error",
            database_name=database.get("name"),
            uptime=body.get("uptime"),
            memory=body.get("memory"),
            version=None if body.get("version") is None else str(body.get("version")),
            last_checked=checked_at,
            raw=body,
        )


class CloudSyncSettings(EesBaseModel):
    enabled: bool = False
    interval_hours: int | None = None
    last_sync_at: ApiTimestamp = None

    @field_validator("interval_hours", mode="before")
    @classmethod
    def _coerce_interval(cls, value: Any) -> int | None:
        return safe_int(value)


class CloudProcessingSettings(EesBaseModel):
    enabled: bool = True
    disabled_reason: str | None = None


class SystemSettings(EesBaseModel):
    """Cloud sync and cloud processing configuration."""

    cloud_sync: CloudSyncSettings = Field(default_factory=CloudSyncSettings)
    cloud_processing: CloudProcessingSettings = Field(default_factory=CloudProcessingSettings)


class SyncResult(EesBaseModel):
    """Outcome of a manually triggered cloud sync."""

    success: bool = False
    total_synced: int = 0
    message: str | None = None

    @field_validator("total_synced", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> int:
        return safe_int(value) or 0
