"""Unauthenticated service checks.

Endpoints:
  - /health
  - /ready
"""

from __future__ import annotations

from eesadmin._constants import HEALTH, READY
from eesadmin._transport import Transport
from eesadmin.models.result import ApiResult


async def get_health(transport: Transport) -> ApiResult:
    return await transport.request("GET", HEALTH)


async def get_ready(transport: Transport) -> ApiResult:
    return await transport.request("GET", READY)
