"""Store lifecycle events delivered to subscribers."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class OperationPhase(StrEnum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class StoreEvent(BaseModel):
    """One transition of a store operation.

    ``error`` is set only for ``REJECTED`` events and carries the message
    that was stored in the store's ``error`` field.
    """

    model_config = ConfigDict(frozen=True)

    store: str
    operation: str
    phase: OperationPhase
    error: str | None = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
