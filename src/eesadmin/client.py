"""High-level async client for the evacuation admin API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import aiohttp

from eesadmin._transport import HttpTransport
from eesadmin.config import EesConfig
from eesadmin.credentials import CredentialContext, Credentials
from eesadmin.exceptions import EesClientError
from eesadmin.images import ImageSource
from eesadmin.models.floor import Floor
from eesadmin.models.record import Record
from eesadmin.state.auth import AuthStore
from eesadmin.state.events import StoreEvent
from eesadmin.state.floors import FloorsStore
from eesadmin.state.preferences import Preferences
from eesadmin.state.records import RecordsStore
from eesadmin.state.routes import RoutesStore
from eesadmin.state.settings import SettingsStore
from eesadmin.storage import KeyValueStorage, open_storage

_logger = logging.getLogger(__name__)


class EesClient:
    """Async client owning the transport and the entity stores.

    Usage::

        async with EesClient(EesConfig.from_env()) as client:
            client.auth.set_credentials(token="secret")
            await client.floors.list()
            for floor in client.floors.items:
                print(floor.id, floor.status)
    """

    def __init__(
        self,
        config: EesConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        storage: KeyValueStorage | None = None,
        on_event: Callable[[StoreEvent], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._storage = storage if storage is not None else open_storage(config.storage_path)
        self._credentials = CredentialContext(
            self._storage,
            default_base_url=config.base_url,
            default_token=config.default_token,
        )
        self._preferences = Preferences(self._storage)
        self._on_event = on_event
        self._transport: HttpTransport | None = None
        self._stores: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> EesClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session, self._credentials)
        self._stores = {
            "floors": FloorsStore(self._transport),
            "routes": RoutesStore(self._transport),
            "records": RecordsStore(self._transport, page_size=self._config.records_page_size),
            "auth": AuthStore(self._transport, self._credentials),
            "settings": SettingsStore(self._transport),
        }
        if self._on_event is not None:
            for store in self._stores.values():
                store.subscribe(self._on_event)
        _logger.debug("Client ready for %s", self._credentials.get().base_url)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._stores = {}

    def _require_store(self, name: str) -> Any:
        store = self._stores.get(name)
        if store is None:
            raise EesClientError("Client not initialized. Use 'async with EesClient(...) as client:'")
        return store

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> EesConfig:
        return self._config

    @property
    def credentials(self) -> CredentialContext:
        return self._credentials

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    @property
    def transport(self) -> HttpTransport:
        if self._transport is None:
            raise EesClientError("Client not initialized. Use 'async with EesClient(...) as client:'")
        return self._transport

    @property
    def floors(self) -> FloorsStore:
        store: FloorsStore = self._require_store("floors")
        return store

    @property
    def routes(self) -> RoutesStore:
        store: RoutesStore = self._require_store("routes")
        return store

    @property
    def records(self) -> RecordsStore:
        store: RecordsStore = self._require_store("records")
        return store

    @property
    def auth(self) -> AuthStore:
        store: AuthStore = self._require_store("auth")
        return store

    @property
    def settings(self) -> SettingsStore:
        store: SettingsStore = self._require_store("settings")
        return store

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _base_url(self) -> str:
        creds: Credentials = self._credentials.get()
        return creds.base_url

    def floor_image(self, floor: Floor) -> ImageSource:
        return ImageSource.for_floor(self._base_url(), floor.id, floor.map_image)

    def record_image(self, record: Record) -> ImageSource:
        return ImageSource.for_record(self._base_url(), record)
