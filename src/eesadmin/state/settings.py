"""Settings store: cloud sync and cloud processing configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from eesadmin._api import settings as settings_api
from eesadmin.models.result import ApiResult
from eesadmin.models.settings import SyncResult, SystemSettings
from eesadmin.state._base import StoreBase


class SettingsStore(StoreBase):
    name = "settings"
    operations = ("fetch", "update", "sync")

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.settings: SystemSettings | None = None
        self.last_sync: SyncResult | None = None

    async def fetch(self) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self.settings = SystemSettings.model_validate(result.data or {})

        return await self._run("fetch", settings_api.get_settings(self._transport), commit)

    async def update(self, changes: Mapping[str, Any] | SystemSettings) -> ApiResult:
        """Send *changes* (wire shape or a settings model) and keep the server's reply."""
        body = changes.to_api() if isinstance(changes, SystemSettings) else dict(changes)

        def commit(result: ApiResult) -> None:
            if isinstance(result.data, Mapping):
                self.settings = SystemSettings.model_validate(result.data)

        return await self._run("update", settings_api.update_settings(self._transport, body), commit)

    async def trigger_sync(self) -> ApiResult:
        def commit(result: ApiResult) -> None:
            self.last_sync = SyncResult.model_validate(result.data or {})

        return await self._run("sync", settings_api.trigger_sync(self._transport), commit)
