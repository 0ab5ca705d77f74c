"""Normalized result envelope returned by every transport call."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ApiResult(BaseModel):
    """Outcome of one HTTP call.

    ``success`` is true exactly when ``error`` is ``None``. ``status`` is
    the HTTP status, or ``0`` when the request never reached the server
    (network failure or timeout).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    data: Any = None
    error: str | None = None
    status: int = 0
    message: str = ""

    @model_validator(mode="after")
    def _check_error_matches_success(self) -> ApiResult:
        if self.success and self.error is not None:
            raise ValueError("successful result cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("failed result must carry an error")
        return self

    @classmethod
    def ok(cls, data: Any = None, *, status: int = 200, message: str = "Success") -> ApiResult:
        return cls(success=True, data=data, error=None, status=status, message=message)

    @classmethod
    def fail(cls, error: str, *, status: int = 0, data: Any = None) -> ApiResult:
        return cls(success=False, data=data, error=error, status=status, message=error)
