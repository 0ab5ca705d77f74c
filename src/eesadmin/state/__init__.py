"""Observable client-side stores for admin API entities."""

from eesadmin.state._base import EntityStore, StoreBase
from eesadmin.state.auth import AuthStore
from eesadmin.state.events import OperationPhase, StoreEvent
from eesadmin.state.floors import FloorsStore
from eesadmin.state.preferences import Preferences
from eesadmin.state.records import RecordFilters, RecordsStore
from eesadmin.state.routes import RoutesStore
from eesadmin.state.settings import SettingsStore

__all__ = [
    "AuthStore",
    "EntityStore",
    "FloorsStore",
    "OperationPhase",
    "Preferences",
    "RecordFilters",
    "RecordsStore",
    "RoutesStore",
    "SettingsStore",
    "StoreBase",
    "StoreEvent",
]
