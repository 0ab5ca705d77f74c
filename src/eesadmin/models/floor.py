"""Floor topology models.

A floor is a graph of nodes and edges plus the cameras watching edges and
the screens placed on nodes. The backend has shipped two shapes for the
camera bindings (an array of camera objects, or the legacy
``cameraToEdge`` id-to-edge mapping) and two for screens (an array, or a
bare count). Both are folded into one canonical shape at the model
boundary by :func:`coerce_camera_bindings` and :func:`coerce_screens`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from eesadmin._constants import (
    DEFAULT_FIRE_THRESHOLD,
    DEFAULT_NODE_TYPE,
    DEFAULT_PEOPLE_THRESHOLD,
    DEFAULT_SMOKE_THRESHOLD,
    DEFAULT_STATIC_WEIGHT,
)
from eesadmin._normalize import safe_float, safe_int
from eesadmin.models._base import ApiTimestamp, EesBaseModel, EesStrEnum


class FloorStatus(EesStrEnum):
    ACTIVE = "active"
    DISABLED = "disabled"
    MAINTENANCE = "maintenance"
    UNKNOWN = "unknown"


class CameraStatus(EesStrEnum):
    ACTIVE = "active"
    DISABLED = "disabled"
    MAINTENANCE = "maintenance"
    ERROR = "error"
    UNKNOWN = "unknown"


class Node(EesBaseModel):
    """A labeled point in the floor graph."""

    id: str
    x: float | None = None
    y: float | None = None
    label: str | None = None
    type: str = DEFAULT_NODE_TYPE

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coerce_coordinates(cls, value: Any) -> float | None:
        return safe_float(value)


class Edge(EesBaseModel):
    """A connection between two nodes with its hazard thresholds.

    ``fire_threshold`` and ``smoke_threshold`` are probabilities in
    ``[0, 1]``; the route solver treats the edge as hazardous once the
    camera readings exceed them.
    """

    id: str
    from_node: str = Field(default="", alias="from")
    to_node: str = Field(default="", alias="to")
    static_weight: float = DEFAULT_STATIC_WEIGHT
    people_threshold: int = DEFAULT_PEOPLE_THRESHOLD
    fire_threshold: float = DEFAULT_FIRE_THRESHOLD
    smoke_threshold: float = DEFAULT_SMOKE_THRESHOLD

    @field_validator("static_weight", mode="before")
    @classmethod
    def _coerce_weight(cls, value: Any) -> float:
        parsed = safe_float(value)
        return DEFAULT_STATIC_WEIGHT if parsed is None else parsed

    @field_validator("people_threshold", mode="before")
    @classmethod
    def _coerce_people(cls, value: Any) -> int:
        parsed = safe_int(value)
        return DEFAULT_PEOPLE_THRESHOLD if parsed is None else parsed

    @field_validator("fire_threshold", mode="before")
    @classmethod
    def _coerce_fire(cls, value: Any) -> float:
        parsed = safe_float(value)
        return DEFAULT_FIRE_THRESHOLD if parsed is None else parsed

    @field_validator("smoke_threshold", mode="before")
    @classmethod
    def _coerce_smoke(cls, value: Any) -> float:
        parsed = safe_float(value)
        return DEFAULT_SMOKE_THRESHOLD if parsed is None else parsed


class CameraBinding(EesBaseModel):
    """A camera and the edge it watches."""

    id: str = Field(validation_alias=AliasChoices("id", "cameraId", "camera_id"))
    edge_id: str | None = Field(default=None, validation_alias=AliasChoices("edgeId", "edge_id"))
    status: CameraStatus = CameraStatus.ACTIVE
    name: str | None = None


class Screen(EesBaseModel):
    """A display placed on a node; screens double as route start points."""

    id: str = Field(validation_alias=AliasChoices("id", "screenId", "screen_id"))
    node_id: str | None = Field(default=None, validation_alias=AliasChoices("nodeId", "node_id"))
    status: FloorStatus = FloorStatus.ACTIVE


class MapImage(EesBaseModel):
    """Floor plan image metadata."""

    url: str | None = None
    local_url: str | None = None
    width_meters: float | None = None
    height_meters: float | None = None

    @field_validator("width_meters", "height_meters", mode="before")
    @classmethod
    def _coerce_dimensions(cls, value: Any) -> float | None:
        return safe_float(value)


def coerce_camera_bindings(value: Any) -> list[Any]:
    """Return camera bindings as a list, accepting either wire shape.

    * ``[{"id": "CAM_1", "edgeId": "E1", ...}]`` is returned as-is.
    * ``{"CAM_1": "E1"}`` (legacy ``cameraToEdge``) becomes
      ``[{"id": "CAM_1", "edgeId": "E1"}]``.
    """
    if value is None:
        return []
    if isinstance(value, Mapping):
        bindings: list[Any] = []
        for camera_id, target in value.items():
            if isinstance(target, Mapping):
                bindings.append({"id": str(camera_id), **target})
            else:
                bindings.append({"id": str(camera_id), "edgeId": None if target is None else str(target)})
        return bindings
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ValueError(f"unsupported camera binding shape: {type(value).__name__}")


def coerce_screens(value: Any) -> tuple[list[Any] | None, int | None]:
    """Split the screens field into ``(screens, declared_count)``.

    An array yields the array and no count; a scalar yields no array and
    the count; anything missing yields ``(None, None)``.
    """
    if value is None:
        return None, None
    if isinstance(value, (list, tuple)):
        return list(value), None
    count = safe_int(value)
    if count is None:
        raise ValueError(f"unsupported screens shape: {value!r}")
    return None, count


class Floor(EesBaseModel):
    """One building level: its graph, bindings and map image.

    ``id`` is the operator-chosen slug and never changes after creation.
    """

    id: str
    name: str = ""
    status: FloorStatus = FloorStatus.ACTIVE
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    cameras: list[CameraBinding] = Field(default_factory=list)
    screens: list[Screen] | None = None
    declared_screen_count: int | None = Field(default=None, exclude=True)
    start_points: list[str] = Field(default_factory=list)
    exit_points: list[str] = Field(default_factory=list)
    map_image: MapImage | None = None
    created_at: ApiTimestamp = None
    updated_at: ApiTimestamp = None

    @model_validator(mode="before")
    @classmethod
    def _canonical_shapes(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        merged = dict(values)
        cameras = merged.get("cameras")
        legacy = merged.pop("cameraToEdge", None)
        if not cameras and legacy:
            cameras = legacy
        merged["cameras"] = coerce_camera_bindings(cameras)
        if "screens" in merged and "declared_screen_count" not in merged:
            screens, count = coerce_screens(merged["screens"])
            merged["screens"] = screens
            merged["declared_screen_count"] = count
        return merged

    @property
    def camera_count(self) -> int:
        return len(self.cameras)

    @property
    def screen_count(self) -> int:
        if self.screens is not None:
            return len(self.screens)
        if self.declared_screen_count is not None:
            return self.declared_screen_count
        return len(self.start_points)

    @property
    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    @property
    def edge_ids(self) -> set[str]:
        return {edge.id for edge in self.edges}

    def camera_to_edge(self) -> dict[str, str]:
        """Canonical bindings flattened to the ``cameraToEdge`` mapping."""
        return {camera.id: camera.edge_id for camera in self.cameras if camera.edge_id}

    def find_camera(self, camera_id: str) -> CameraBinding | None:
        for camera in self.cameras:
            if camera.id == camera_id:
                return camera
        return None

    def reference_issues(self) -> list[str]:
        """List references to unknown node or edge ids.

        The server is authoritative for graph integrity, so these are
        reported for display and never used to reject a floor.
        """
        node_ids = self.node_ids
        edge_ids = self.edge_ids
        issues: list[str] = []
        for edge in self.edges:
            for endpoint in (edge.from_node, edge.to_node):
                if endpoint not in node_ids:
                    issues.append(f"edge {edge.id} references unknown node {endpoint}")
        for camera in self.cameras:
            if camera.edge_id and camera.edge_id not in edge_ids:
                issues.append(f"camera {camera.id} references unknown edge {camera.edge_id}")
        for label, points in (("start point", self.start_points), ("exit point", self.exit_points)):
            for point in points:
                if point not in node_ids:
                    issues.append(f"{label} {point} is not a node")
        return issues


class SystemStatus(EesBaseModel):
    """System-wide counts of floors, cameras and screens."""

    floors: dict[str, int] = Field(default_factory=dict)
    cameras: dict[str, int] = Field(default_factory=dict)
    screens: dict[str, int] = Field(default_factory=dict)

    @field_validator("floors", "cameras", "screens", mode="before")
    @classmethod
    def _coerce_counts(cls, value: Any) -> dict[str, int]:
        if not isinstance(value, Mapping):
            return {}
        counts: dict[str, int] = {}
        for key, raw_count in value.items():
            parsed = safe_int(raw_count)
            if parsed is not None:
                counts[str(key)] = parsed
        return counts
