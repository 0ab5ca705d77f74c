"""Floor store: floor list, detail, status changes and system counts."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

import aiohttp

from eesadmin._api import floors as floors_api
from eesadmin._api.floors import MapImageUpload, build_floor_form_data
from eesadmin.models.floor import CameraStatus, Floor, FloorStatus, SystemStatus
from eesadmin.models.result import ApiResult
from eesadmin.state._base import EntityStore

if TYPE_CHECKING:
    from eesadmin.authoring import FloorDraft

_logger = logging.getLogger(__name__)


def _parse_floors(data: Any) -> list[Floor]:
    if not isinstance(data, list):
        return []
    return [Floor.model_validate(item) for item in data]


def _echoed_status(data: Any) -> str | None:
    if isinstance(data, Mapping) and isinstance(data.get("status"), str):
        return data["status"]
    return None


class FloorsStore(EntityStore[Floor]):
    """Floors known to the console, keyed by floor id."""

    name = "floors"
    operations = ("list", "current", "create", "update", "delete", "status", "system_status", "reset")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.system_status: SystemStatus | None = None
        self.last_fetch: datetime | None = None
        self.last_reset: Any = None

    @property
    def active_floors(self) -> list[Floor]:
        return [floor for floor in self.items if floor.status == FloorStatus.ACTIVE]

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def list(self) -> ApiResult:
        """Replace the collection with the server's floors."""

        def commit(result: ApiResult) -> None:
            self._replace_all(_parse_floors(result.data))
            self.last_fetch = self._clock()

        return await self._run("list", floors_api.list_floors(self._transport), commit)

    async def fetch(self, floor_id: str) -> ApiResult:
        """Load one floor into ``current``; the collection is left as is."""

        def commit(result: ApiResult) -> None:
            self._current = Floor.model_validate(result.data)

        return await self._run("current", floors_api.get_floor(self._transport, floor_id), commit)

    async def create(self, form: aiohttp.FormData) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self._append(Floor.model_validate(result.data))

        return await self._run("create", floors_api.create_floor(self._transport, form), commit)

    async def update(self, floor_id: str, form: aiohttp.FormData) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self._replace(Floor.model_validate(result.data))

        return await self._run("update", floors_api.update_floor(self._transport, floor_id, form), commit)

    async def delete(self, floor_id: str) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self._remove(floor_id)

        return await self._run("delete", floors_api.delete_floor(self._transport, floor_id), commit)

    async def submit_draft(self, draft: FloorDraft, image: MapImageUpload | None = None) -> ApiResult:
        """Validate *draft* and create or update the floor it describes.

        Raises :class:`~eesadmin.exceptions.FloorValidationError` before any
        request is made when the draft is invalid.
        """
        if image is not None:
            draft.image = image
        submission = draft.to_submission()
        form = build_floor_form_data(submission, draft.image)
        if draft.is_edit:
            return await self.update(submission["id"], form)
        return await self.create(form)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def update_status(self, floor_id: str, status: FloorStatus | str, reason: str = "") -> ApiResult:
        """Change a floor's status; only the status field of the entry changes."""
        requested = FloorStatus(status)

        def commit(result: ApiResult) -> None:
            self._patch(floor_id, status=FloorStatus(_echoed_status(result.data) or requested))

        call = floors_api.update_floor_status(self._transport, floor_id, requested.value, reason)
        return await self._run("status", call, commit)

    async def update_camera_status(
        self,
        floor_id: str,
        camera_id: str,
        status: CameraStatus | str,
        reason: str = "",
    ) -> ApiResult:
        """Change a camera's status.

        The nested camera is patched when the reply echoes the new status;
        otherwise the floor list is refreshed.
        """
        requested = CameraStatus(status)
        echoed: list[str] = []

        def commit(result: ApiResult) -> None:
            new_status = _echoed_status(result.data)
            if new_status is None:
                return
            echoed.append(new_status)
            self._patch_nested(floor_id, "cameras", camera_id, CameraStatus(new_status))

        call = floors_api.update_camera_status(self._transport, floor_id, camera_id, requested.value, reason)
        result = await self._run("status", call, commit)
        if result.success and not echoed:
            await self.list()
        return self._with_ids(result, floorId=floor_id, cameraId=camera_id)

    async def update_screen_status(
        self,
        floor_id: str,
        screen_id: str,
        status: FloorStatus | str,
        reason: str = "",
    ) -> ApiResult:
        requested = FloorStatus(status)
        echoed: list[str] = []

        def commit(result: ApiResult) -> None:
            new_status = _echoed_status(result.data)
            if new_status is None:
                return
            echoed.append(new_status)
            self._patch_nested(floor_id, "screens", screen_id, FloorStatus(new_status))

        call = floors_api.update_screen_status(self._transport, floor_id, screen_id, requested.value, reason)
        result = await self._run("status", call, commit)
        if result.success and not echoed:
            await self.list()
        return self._with_ids(result, floorId=floor_id, screenId=screen_id)

    def _patch_nested(self, floor_id: str, field: str, child_id: str, status: Any) -> None:
        floor = self.get(floor_id)
        if floor is None and self._current is not None and self._current.id == floor_id:
            floor = self._current
        if floor is None:
            return
        children = getattr(floor, field) or []
        patched = [child.model_copy(update={"status": status}) if child.id == child_id else child for child in children]
        self._patch(floor_id, **{field: patched})

    @staticmethod
    def _with_ids(result: ApiResult, **ids: str) -> ApiResult:
        if not result.success:
            return result
        data = dict(result.data) if isinstance(result.data, Mapping) else {}
        return result.model_copy(update={"data": {**ids, **data}})

    # ------------------------------------------------------------------
    # System-wide
    # ------------------------------------------------------------------

    async def fetch_system_status(self) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self.system_status = SystemStatus.model_validate(result.data or {})

        return await self._run("system_status", floors_api.get_system_status(self._transport), commit)

    async def reset_cameras(self, floor_id: str) -> ApiResult:
        """Reset every camera on a floor to active."""

        def commit(result: ApiResult) -> None:
            self.last_reset = result.data

        return await self._run("reset", floors_api.reset_floor_cameras(self._transport, floor_id), commit)

    async def reset_all_cameras(self) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self.last_reset = result.data

        return await self._run("reset", floors_api.reset_all_cameras(self._transport), commit)

    async def bulk_update(self, updates: Sequence[Mapping[str, Any]]) -> ApiResult:
        """Apply several status changes, then refresh the floor list."""
        result = await self._run("status", floors_api.bulk_update(self._transport, updates))
        if result.success:
            await self.list()
        return result
