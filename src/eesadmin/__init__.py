"""eesadmin - Async Python client for the evacuation system admin API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eesadmin")
except PackageNotFoundError:
    __version__ = "0+local"
from eesadmin._api.floors import MapImageUpload
from eesadmin.authoring import CameraDraft, EdgeDraft, FloorDraft, NodeDraft
from eesadmin.client import EesClient
from eesadmin.config import EesConfig
from eesadmin.credentials import CredentialContext, Credentials
from eesadmin.exceptions import EesClientError, EesConfigError, EesError, FloorValidationError
from eesadmin.images import ImageSource
from eesadmin.models import (
    ApiResult,
    CameraBinding,
    CameraStatus,
    Edge,
    Floor,
    FloorStatus,
    Node,
    Record,
    Route,
    RouteComputation,
    ServerHealth,
    SystemSettings,
)
from eesadmin.state import (
    AuthStore,
    FloorsStore,
    OperationPhase,
    Preferences,
    RecordsStore,
    RoutesStore,
    SettingsStore,
    StoreEvent,
)
from eesadmin.storage import JsonFileStorage, KeyValueStorage, MemoryStorage

__all__ = [
    "__version__",
    "ApiResult",
    "AuthStore",
    "CameraBinding",
    "CameraDraft",
    "CameraStatus",
    "CredentialContext",
    "Credentials",
    "Edge",
    "EdgeDraft",
    "EesClient",
    "EesClientError",
    "EesConfig",
    "EesConfigError",
    "EesError",
    "Floor",
    "FloorDraft",
    "FloorStatus",
    "FloorValidationError",
    "FloorsStore",
    "ImageSource",
    "JsonFileStorage",
    "KeyValueStorage",
    "MapImageUpload",
    "MemoryStorage",
    "Node",
    "NodeDraft",
    "OperationPhase",
    "Preferences",
    "Record",
    "RecordsStore",
    "Route",
    "RouteComputation",
    "RoutesStore",
    "ServerHealth",
    "SettingsStore",
    "StoreEvent",
    "SystemSettings",
]
