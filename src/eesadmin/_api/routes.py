"""Evacuation route endpoints.

Endpoints:
  - /api/routes (history)
  - /api/routes/latest
  - /api/routes/compute
"""

from __future__ import annotations

from eesadmin._constants import ROUTES, ROUTES_COMPUTE, ROUTES_LATEST
from eesadmin._transport import Transport
from eesadmin.models.result import ApiResult


async def get_route_history(transport: Transport, floor_id: str) -> ApiResult:
    return await transport.request("GET", ROUTES, query={"floorId": floor_id})


async def get_latest_routes(transport: Transport, floor_id: str) -> ApiResult:
    return await transport.request("GET", ROUTES_LATEST, query={"floorId": floor_id})


async def compute_routes(transport: Transport, floor_id: str) -> ApiResult:
    """Ask the server to recompute routes for *floor_id* now."""
    return await transport.request("POST", ROUTES_COMPUTE, body={"floorId": floor_id})
