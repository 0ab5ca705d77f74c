"""Floor endpoints.

Endpoints:
  - /api/floors (list, create)
  - /api/floors/{id} (get, update, delete)
  - /api/floors/{id}/status
  - /api/floors/{id}/cameras/{cameraId}/status
  - /api/floors/{id}/screens/{screenId}/status
  - /api/floors/{id}/cameras/reset
  - /api/floors/system/status
  - /api/floors/system/cameras/reset
  - /api/floors/system/bulk-update
"""

from __future__ import annotations

import dataclasses
import json
import mimetypes
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import aiohttp

from eesadmin._constants import (
    FLOORS,
    SYSTEM_BULK_UPDATE,
    SYSTEM_CAMERAS_RESET,
    SYSTEM_STATUS,
    camera_status_path,
    floor_cameras_reset_path,
    floor_path,
    floor_status_path,
    screen_status_path,
)
from eesadmin._transport import Transport
from eesadmin.models.result import ApiResult

_JSON_FIELDS = ("nodes", "edges", "cameraToEdge", "startPoints", "exitPoints")
_DIMENSION_FIELDS = ("widthMeters", "heightMeters")


@dataclasses.dataclass(frozen=True)
class MapImageUpload:
    """A floor plan image to attach to a create or update request."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Path | str) -> MapImageUpload:
        path = Path(path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        return cls(filename=path.name, content=path.read_bytes(), content_type=content_type)


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_floor_form_data(
    submission: Mapping[str, Any],
    image: MapImageUpload | None = None,
) -> aiohttp.FormData:
    """Build the multipart body for floor create/update.

    Scalar fields are sent as plain parts, graph fields as JSON strings,
    and the image (when given) as the ``mapImage`` file part.
    """
    form = aiohttp.FormData()
    for key in ("id", "name", "status"):
        if submission.get(key):
            form.add_field(key, str(submission[key]))
    for key in _JSON_FIELDS:
        if submission.get(key) is not None:
            form.add_field(key, json.dumps(submission[key]))
    for key in _DIMENSION_FIELDS:
        if submission.get(key):
            form.add_field(key, _format_number(submission[key]))
    if image is not None:
        form.add_field("mapImage", image.content, filename=image.filename, content_type=image.content_type)
    return form


async def list_floors(transport: Transport) -> ApiResult:
    return await transport.request("GET", FLOORS)


async def get_floor(transport: Transport, floor_id: str) -> ApiResult:
    return await transport.request("GET", floor_path(floor_id))


async def create_floor(transport: Transport, form: aiohttp.FormData) -> ApiResult:
    return await transport.request("POST", FLOORS, body=form, binary_body=True)


async def update_floor(transport: Transport, floor_id: str, form: aiohttp.FormData) -> ApiResult:
    return await transport.request("PATCH", floor_path(floor_id), body=form, binary_body=True)


async def delete_floor(transport: Transport, floor_id: str) -> ApiResult:
    return await transport.request("DELETE", floor_path(floor_id))


async def update_floor_status(transport: Transport, floor_id: str, status: str, reason: str = "") -> ApiResult:
    return await transport.request("PUT", floor_status_path(floor_id), body={"status": status, "reason": reason})


async def update_camera_status(
    transport: Transport,
    floor_id: str,
    camera_id: str,
    status: str,
    reason: str = "",
) -> ApiResult:
    return await transport.request(
        "PUT",
        camera_status_path(floor_id, camera_id),
        body={"status": status, "reason": reason},
    )


async def update_screen_status(
    transport: Transport,
    floor_id: str,
    screen_id: str,
    status: str,
    reason: str = "",
) -> ApiResult:
    return await transport.request(
        "PUT",
        screen_status_path(floor_id, screen_id),
        body={"status": status, "reason": reason},
    )


async def get_system_status(transport: Transport) -> ApiResult:
    return await transport.request("GET", SYSTEM_STATUS)


async def reset_floor_cameras(transport: Transport, floor_id: str) -> ApiResult:
    return await transport.request("POST", floor_cameras_reset_path(floor_id))


async def reset_all_cameras(transport: Transport) -> ApiResult:
    return await transport.request("POST", SYSTEM_CAMERAS_RESET)


async def bulk_update(transport: Transport, updates: Sequence[Mapping[str, Any]]) -> ApiResult:
    """Apply several floor/camera status changes in one call.

    Each update is ``{"floorId": ..., "status": ...}`` with an optional
    ``cameraId`` or ``screenId``.
    """
    return await transport.request("POST", SYSTEM_BULK_UPDATE, body={"updates": [dict(u) for u in updates]})
