from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Mapping
from typing import Any

import pytest

from eesadmin.models.result import ApiResult


@dataclasses.dataclass
class RecordedCall:
    method: str
    path: str
    query: dict[str, Any]
    body: Any
    binary_body: bool


class ScriptedTransport:
    """Transport double answering from per-route reply queues.

    Replies are consumed in order; the last one consumed for a route is
    reused when its queue runs dry. Setting ``gate`` holds every call
    until the event is set.
    """

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self.gate: asyncio.Event | None = None
        self._replies: dict[tuple[str, str], list[ApiResult]] = {}
        self._last: dict[tuple[str, str], ApiResult] = {}

    def reply(self, method: str, path: str, result: ApiResult) -> None:
        self._replies.setdefault((method, path), []).append(result)

    def calls_to(self, method: str, path: str) -> list[RecordedCall]:
        return [call for call in self.calls if call.method == method and call.path == path]

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        body: Any = None,
        binary_body: bool = False,
    ) -> ApiResult:
        self.calls.append(RecordedCall(method, path, dict(query or {}), body, binary_body))
        if self.gate is not None:
            await self.gate.wait()
        key = (method, path)
        queue = self._replies.get(key)
        if queue:
            self._last[key] = queue.pop(0)
        if key not in self._last:
            raise AssertionError(f"unexpected request {method} {path}")
        return self._last[key]


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()
