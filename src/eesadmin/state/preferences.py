"""Console preferences persisted in durable storage."""

from __future__ import annotations

from eesadmin._constants import STORAGE_KEY_SIDEBAR_COLLAPSED
from eesadmin.storage import KeyValueStorage


class Preferences:
    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._sidebar_collapsed = storage.get(STORAGE_KEY_SIDEBAR_COLLAPSED) == "true"

    @property
    def sidebar_collapsed(self) -> bool:
        return self._sidebar_collapsed

    def set_sidebar_collapsed(self, collapsed: bool) -> None:
        self._sidebar_collapsed = bool(collapsed)
        self._storage.set(STORAGE_KEY_SIDEBAR_COLLAPSED, "true" if collapsed else "false")

    def toggle_sidebar(self) -> bool:
        self.set_sidebar_collapsed(not self._sidebar_collapsed)
        return self._sidebar_collapsed
