"""System settings endpoints.

Endpoints:
  - /api/settings (get, update)
  - /api/settings/sync (manual cloud sync)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from eesadmin._constants import SETTINGS, SETTINGS_SYNC
from eesadmin._transport import Transport
from eesadmin.models.result import ApiResult


async def get_settings(transport: Transport) -> ApiResult:
    return await transport.request("GET", SETTINGS)


async def update_settings(transport: Transport, settings: Mapping[str, Any]) -> ApiResult:
    """Update cloud sync/processing settings.

    *settings* uses the wire shape, e.g.
    ``{"cloudSync": {"enabled": True, "intervalHours": 6}}``. Omitted
    sections are left unchanged by the server.
    """
    return await transport.request("PUT", SETTINGS, body=dict(settings))


async def trigger_sync(transport: Transport) -> ApiResult:
    return await transport.request("POST", SETTINGS_SYNC)
