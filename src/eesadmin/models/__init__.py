"""Data models for admin API payloads."""

from eesadmin.models._base import ApiTimestamp, EesBaseModel, EesStrEnum, parse_api_timestamp
from eesadmin.models.floor import (
    CameraBinding,
    CameraStatus,
    Edge,
    Floor,
    FloorStatus,
    MapImage,
    Node,
    Screen,
    SystemStatus,
    coerce_camera_bindings,
    coerce_screens,
)
from eesadmin.models.record import AiResult, DetectionSummary, Pagination, Record, RecordPage, parse_record_page
from eesadmin.models.result import ApiResult
from eesadmin.models.route import Route, RouteComputation
from eesadmin.models.settings import (
    CloudProcessingSettings,
    CloudSyncSettings,
    ServerHealth,
    SyncResult,
    SystemSettings,
)

__all__ = [
    "AiResult",
    "ApiResult",
    "ApiTimestamp",
    "CameraBinding",
    "CameraStatus",
    "CloudProcessingSettings",
    "CloudSyncSettings",
    "DetectionSummary",
    "Edge",
    "EesBaseModel",
    "EesStrEnum",
    "Floor",
    "FloorStatus",
    "MapImage",
    "Node",
    "Pagination",
    "Record",
    "RecordPage",
    "Route",
    "RouteComputation",
    "Screen",
    "ServerHealth",
    "SyncResult",
    "SystemSettings",
    "SystemStatus",
    "coerce_camera_bindings",
    "coerce_screens",
    "parse_api_timestamp",
    "parse_record_page",
]
