"""Detection record models and record page parsing."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from eesadmin._constants import DETECTION_THRESHOLD
from eesadmin._normalize import safe_float, safe_int
from eesadmin.models._base import ApiTimestamp, EesBaseModel


class AiResult(EesBaseModel):
    """Detector output for one captured frame."""

    people_count: int = 0
    fire_prob: float = 0.0
    smoke_prob: float = 0.0

    @field_validator("people_count", mode="before")
    @classmethod
    def _coerce_people(cls, value: Any) -> int:
        return safe_int(value) or 0

    @field_validator("fire_prob", "smoke_prob", mode="before")
    @classmethod
    def _coerce_probability(cls, value: Any) -> float:
        return safe_float(value) or 0.0


class DetectionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    people_count: int
    fire_prob: float
    smoke_prob: float
    fire_detected: bool
    smoke_detected: bool


class Record(EesBaseModel):
    """A single detection event produced by a camera."""

    id: str = Field(validation_alias=AliasChoices("_id", "id"))
    floor_id: str | None = None
    camera_id: str | None = None
    edge_id: str | None = None
    timestamp: ApiTimestamp = None
    processed: bool = False
    ai_result: AiResult | None = Field(default=None, validation_alias=AliasChoices("aiResult", "analysis", "ai_result"))
    local_path: str | None = None
    cloud_url: str | None = None

    def summary(self) -> DetectionSummary:
        result = self.ai_result or AiResult()
        return DetectionSummary(
            people_count=result.people_count,
            fire_prob=result.fire_prob,
            smoke_prob=result.smoke_prob,
            fire_detected=result.fire_prob > DETECTION_THRESHOLD,
            smoke_detected=result.smoke_prob > DETECTION_THRESHOLD,
        )

    @property
    def is_hazard(self) -> bool:
        summary = self.summary()
        return summary.fire_detected or summary.smoke_detected


class Pagination(BaseModel):
    """Pagination state of a record listing."""

    model_config = ConfigDict(frozen=True)

    page: int = 1
    limit: int
    total: int = 0
    total_pages: int = 1
    has_next_page: bool = False
    has_prev_page: bool = False


class RecordPage(BaseModel):
    model_config = ConfigDict(frozen=True)

    records: list[Record]
    pagination: Pagination


def parse_record_page(data: Any, *, default_limit: int, requested_page: int = 1) -> RecordPage:
    """Parse a records listing reply.

    Accepts the paginated envelope (``{"data": [...], "totalCount": ...}``)
    and the legacy bare array. A bare array counts as a single page.
    """
    if isinstance(data, list):
        records = [Record.model_validate(item) for item in data]
        return RecordPage(
            records=records,
            pagination=Pagination(page=1, limit=default_limit, total=len(records), total_pages=1),
        )

    if isinstance(data, dict) and isinstance(data.get("data"), list):
        records = [Record.model_validate(item) for item in data["data"]]
        total = safe_int(data.get("totalCount")) or safe_int(data.get("recordsCount")) or 0
        return RecordPage(
            records=records,
            pagination=Pagination(
                page=safe_int(data.get("page")) or 1,
                limit=safe_int(data.get("limit")) or default_limit,
                total=total,
                total_pages=safe_int(data.get("totalPages")) or 1,
                has_next_page=bool(data.get("hasNextPage")),
                has_prev_page=bool(data.get("hasPrevPage")),
            ),
        )

    return RecordPage(records=[], pagination=Pagination(page=requested_page, limit=default_limit))
