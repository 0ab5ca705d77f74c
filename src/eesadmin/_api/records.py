"""Detection record endpoints.

Endpoints:
  - /api/records (paginated, floor scoped)
  - /api/records/{id}
"""

from __future__ import annotations

from typing import Any

from eesadmin._constants import RECORDS, record_path
from eesadmin._transport import Transport
from eesadmin.models.result import ApiResult


def build_records_query(
    *,
    floor_id: str | None = None,
    camera_id: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Build the listing query; empty filters and zero paging values are left out."""
    candidates = {
        "floorId": floor_id,
        "cameraId": camera_id,
        "startDate": start_date,
        "endDate": end_date,
        "page": page,
        "limit": limit,
    }
    return {key: value for key, value in candidates.items() if value}


async def list_records(
    transport: Transport,
    *,
    floor_id: str | None = None,
    camera_id: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> ApiResult:
    query = build_records_query(
        floor_id=floor_id,
        camera_id=camera_id,
        start_date=start_date,
        end_date=end_date,
        page=page,
        limit=limit,
    )
    return await transport.request("GET", RECORDS, query=query)


async def get_record(transport: Transport, record_id: str) -> ApiResult:
    return await transport.request("GET", record_path(record_id))


async def delete_record(transport: Transport, record_id: str) -> ApiResult:
    return await transport.request("DELETE", record_path(record_id))
