"""Evacuation route models (server-computed, read-only)."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from eesadmin._normalize import safe_float
from eesadmin.models._base import ApiTimestamp, EesBaseModel


class Route(EesBaseModel):
    """A path from a start node to an exit with its hazard assessment."""

    start_node: str | None = None
    exit_node: str | None = None
    path: list[str] = Field(default_factory=list)
    distance: float | None = None
    distance_meters: float | None = None
    hazard_level: str | None = None
    exceeds_thresholds: bool = False
    hazard_details: Any = None

    @field_validator("distance", "distance_meters", mode="before")
    @classmethod
    def _coerce_distances(cls, value: Any) -> float | None:
        return safe_float(value)

    @property
    def formatted_path(self) -> str:
        if not self.path:
            return "N/A"
        return " → ".join(self.path)

    @property
    def formatted_distance(self) -> str:
        if self.distance_meters is not None:
            return f"{self.distance_meters:.1f}m"
        if self.distance is not None:
            return f"{self.distance:.1f}px"
        return "N/A"


class RouteComputation(EesBaseModel):
    """One route computation run for a floor."""

    floor_id: str | None = None
    computed_at: ApiTimestamp = None
    routes: list[Route] = Field(default_factory=list)
    hazard_level: str | None = None
    overall_hazard_level: str | None = None
    emergency: bool = False

    @property
    def is_emergency(self) -> bool:
        return self.emergency is True

    @property
    def effective_hazard_level(self) -> str:
        """``critical`` in emergency mode, else the reported level (``safe`` when absent)."""
        if self.is_emergency:
            return "critical"
        return self.overall_hazard_level or self.hazard_level or "safe"
