"""Editable floor graph used while creating or editing a floor.

A :class:`FloorDraft` holds the graph as the operator types it: every
value is a string, ids may be provisional, and nothing is checked until
:meth:`FloorDraft.validate` runs. :meth:`FloorDraft.to_submission` turns a
valid draft into the payload the floors endpoint expects.

Validation checks that fields are present, not that edges and cameras
point at declared ids; the server decides graph integrity.
:meth:`FloorDraft.reference_warnings` lists such references without
blocking submission.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from eesadmin._api.floors import MapImageUpload
from eesadmin._constants import (
    DEFAULT_FIRE_THRESHOLD,
    DEFAULT_NODE_TYPE,
    DEFAULT_PEOPLE_THRESHOLD,
    DEFAULT_SMOKE_THRESHOLD,
    DEFAULT_STATIC_WEIGHT,
    NODE_TYPES,
)
from eesadmin._normalize import is_blank, safe_float, safe_int, split_csv
from eesadmin.exceptions import FloorValidationError
from eesadmin.models.floor import Floor, FloorStatus


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclasses.dataclass
class NodeDraft:
    id: str = ""
    x: str = ""
    y: str = ""
    label: str = ""
    type: str = DEFAULT_NODE_TYPE


@dataclasses.dataclass
class EdgeDraft:
    id: str = ""
    from_node: str = ""
    to_node: str = ""
    static_weight: str = _text(DEFAULT_STATIC_WEIGHT)
    people_threshold: str = _text(DEFAULT_PEOPLE_THRESHOLD)
    fire_threshold: str = _text(DEFAULT_FIRE_THRESHOLD)
    smoke_threshold: str = _text(DEFAULT_SMOKE_THRESHOLD)


@dataclasses.dataclass
class CameraDraft:
    camera_id: str = ""
    edge_id: str = ""


def _with_default(value: str, parse: Any, default: float | int) -> Any:
    parsed = parse(value)
    return default if parsed is None else parsed


def _update(item: Any, field: str, value: Any) -> None:
    if field not in {f.name for f in dataclasses.fields(item)}:
        raise AttributeError(f"{type(item).__name__} has no field {field!r}")
    setattr(item, field, _text(value))


@dataclasses.dataclass
class FloorDraft:
    """Floor form state.

    ``start_points`` and ``exit_points`` are comma separated node ids.
    ``image`` is required when creating a floor and optional on edit.
    ``original_id`` is the id the floor was loaded with; an edit always
    targets it, whatever the id field holds.
    """

    id: str = ""
    name: str = ""
    status: str = FloorStatus.ACTIVE.value
    width_meters: str = ""
    height_meters: str = ""
    nodes: list[NodeDraft] = dataclasses.field(default_factory=list)
    edges: list[EdgeDraft] = dataclasses.field(default_factory=list)
    cameras: list[CameraDraft] = dataclasses.field(default_factory=list)
    start_points: str = ""
    exit_points: str = ""
    is_edit: bool = False
    image: MapImageUpload | None = None
    original_id: str = ""

    @classmethod
    def from_floor(cls, floor: Floor) -> FloorDraft:
        """Load a server floor for editing."""
        if floor.screens:
            start_points = ", ".join(screen.node_id for screen in floor.screens if screen.node_id)
        else:
            start_points = ", ".join(floor.start_points)
        map_image = floor.map_image
        return cls(
            id=floor.id,
            name=floor.name,
            status=floor.status.value if floor.status != FloorStatus.UNKNOWN else FloorStatus.ACTIVE.value,
            width_meters=_text(map_image.width_meters) if map_image else "",
            height_meters=_text(map_image.height_meters) if map_image else "",
            nodes=[
                NodeDraft(id=n.id, x=_text(n.x), y=_text(n.y), label=n.label or "", type=n.type or DEFAULT_NODE_TYPE)
                for n in floor.nodes
            ],
            edges=[
                EdgeDraft(
                    id=e.id,
                    from_node=e.from_node,
                    to_node=e.to_node,
                    static_weight=_text(e.static_weight),
                    people_threshold=_text(e.people_threshold),
                    fire_threshold=_text(e.fire_threshold),
                    smoke_threshold=_text(e.smoke_threshold),
                )
                for e in floor.edges
            ],
            cameras=[CameraDraft(camera_id=c.id, edge_id=c.edge_id or "") for c in floor.cameras],
            start_points=start_points,
            exit_points=", ".join(floor.exit_points),
            is_edit=True,
            original_id=floor.id,
        )

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def add_node(self) -> NodeDraft:
        node = NodeDraft(id=f"N{len(self.nodes) + 1}")
        self.nodes.append(node)
        return node

    def update_node(self, index: int, field: str, value: Any) -> None:
        _update(self.nodes[index], field, value)

    def remove_node(self, index: int) -> None:
        del self.nodes[index]

    def add_edge(self) -> EdgeDraft:
        edge = EdgeDraft(id=f"E{len(self.edges) + 1}")
        self.edges.append(edge)
        return edge

    def update_edge(self, index: int, field: str, value: Any) -> None:
        _update(self.edges[index], field, value)

    def remove_edge(self, index: int) -> None:
        del self.edges[index]

    def add_camera(self) -> CameraDraft:
        camera = CameraDraft()
        self.cameras.append(camera)
        return camera

    def update_camera(self, index: int, field: str, value: Any) -> None:
        _update(self.cameras[index], field, value)

    def remove_camera(self, index: int) -> None:
        del self.cameras[index]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> dict[str, str]:
        """Return ``field -> message`` for every problem; empty when valid."""
        errors: dict[str, str] = {}
        if is_blank(self.id):
            errors["id"] = "Floor ID is required"
        if is_blank(self.name):
            errors["name"] = "Floor name is required"
        if not self.is_edit and self.image is None:
            errors["mapImage"] = "Floor map image is required"
        if not self.nodes:
            errors["nodes"] = "At least one node is required"
        if not self.edges:
            errors["edges"] = "At least one edge is required"
        if is_blank(self.exit_points):
            errors["exitPoints"] = "Exit points are required"
        if is_blank(self.start_points):
            errors["startPoints"] = "Start points are required"

        for i, node in enumerate(self.nodes):
            if is_blank(node.id) or safe_float(node.x) is None or safe_float(node.y) is None:
                errors[f"node_{i}"] = "Node ID, X, and Y are required"

        for i, edge in enumerate(self.edges):
            if is_blank(edge.id) or is_blank(edge.from_node) or is_blank(edge.to_node):
                errors[f"edge_{i}"] = "Edge ID, From, and To are required"

        return errors

    @property
    def target_id(self) -> str:
        if self.is_edit and self.original_id:
            return self.original_id
        return self.id.strip()

    def is_valid(self) -> bool:
        return not self.validate()

    def reference_warnings(self) -> list[str]:
        """References to undeclared nodes or edges; informational only."""
        node_ids = {node.id.strip() for node in self.nodes}
        edge_ids = {edge.id.strip() for edge in self.edges}
        warnings: list[str] = []
        for edge in self.edges:
            for endpoint in (edge.from_node.strip(), edge.to_node.strip()):
                if endpoint and endpoint not in node_ids:
                    warnings.append(f"edge {edge.id} references unknown node {endpoint}")
        for node in self.nodes:
            node_type = node.type.strip()
            if node_type and node_type not in NODE_TYPES:
                warnings.append(f"node {node.id} has unknown type {node_type}")
        for camera in self.cameras:
            edge_id = camera.edge_id.strip()
            if edge_id and edge_id not in edge_ids:
                warnings.append(f"camera {camera.camera_id} references unknown edge {edge_id}")
        for label, points in (("start point", self.start_points), ("exit point", self.exit_points)):
            for point in split_csv(points):
                if point not in node_ids:
                    warnings.append(f"{label} {point} is not a node")
        return warnings

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def camera_to_edge(self) -> dict[str, str]:
        """Camera pairs with both ids set, as the ``cameraToEdge`` mapping."""
        return {
            camera.camera_id.strip(): camera.edge_id.strip()
            for camera in self.cameras
            if not is_blank(camera.camera_id) and not is_blank(camera.edge_id)
        }

    def to_submission(self) -> dict[str, Any]:
        """Build the floor payload.

        Raises :class:`~eesadmin.exceptions.FloorValidationError` when
        :meth:`validate` reports any problem.
        """
        errors = self.validate()
        if errors:
            raise FloorValidationError(errors)

        nodes = [
            {
                "id": node.id.strip(),
                "x": safe_float(node.x),
                "y": safe_float(node.y),
                "label": node.label.strip() or node.id.strip(),
                "type": node.type.strip() or DEFAULT_NODE_TYPE,
            }
            for node in self.nodes
        ]
        edges = [
            {
                "id": edge.id.strip(),
                "from": edge.from_node.strip(),
                "to": edge.to_node.strip(),
                "staticWeight": _with_default(edge.static_weight, safe_float, DEFAULT_STATIC_WEIGHT),
                "peopleThreshold": _with_default(edge.people_threshold, safe_int, DEFAULT_PEOPLE_THRESHOLD),
                "fireThreshold": _with_default(edge.fire_threshold, safe_float, DEFAULT_FIRE_THRESHOLD),
                "smokeThreshold": _with_default(edge.smoke_threshold, safe_float, DEFAULT_SMOKE_THRESHOLD),
            }
            for edge in self.edges
        ]
        return {
            "id": self.target_id,
            "name": self.name.strip(),
            "status": self.status,
            "nodes": nodes,
            "edges": edges,
            "cameraToEdge": self.camera_to_edge(),
            "startPoints": split_csv(self.start_points),
            "exitPoints": split_csv(self.exit_points),
            "widthMeters": safe_float(self.width_meters),
            "heightMeters": safe_float(self.height_meters),
        }
