from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from eesadmin._api.floors import MapImageUpload, build_floor_form_data
from eesadmin.authoring import CameraDraft, EdgeDraft, FloorDraft, NodeDraft
from eesadmin.exceptions import FloorValidationError
from eesadmin.models.floor import Floor
from eesadmin.models.result import ApiResult
from eesadmin.state.floors import FloorsStore

if TYPE_CHECKING:
    from conftest import ScriptedTransport

IMAGE = MapImageUpload(filename="f1.jpg", content=b"\xff\xd8jpeg", content_type="image/jpeg")


def _valid_draft() -> FloorDraft:
    return FloorDraft(
        id="f1",
        name="Lobby",
        nodes=[NodeDraft(id="N1", x="10", y="20"), NodeDraft(id="N2", x="30.5", y="20", label="Exit", type="exit")],
        edges=[EdgeDraft(id="E1", from_node="N1", to_node="N2")],
        cameras=[CameraDraft(camera_id="CAM_1", edge_id="E1")],
        start_points="N1",
        exit_points="N2",
        image=IMAGE,
    )


def test_valid_draft_has_no_errors() -> None:
    assert _valid_draft().validate() == {}


def test_empty_draft_reports_every_required_field() -> None:
    errors = FloorDraft().validate()

    assert errors == {
        "id": "Floor ID is required",
        "name": "Floor name is required",
        "mapImage": "Floor map image is required",
        "nodes": "At least one node is required",
        "edges": "At least one edge is required",
        "exitPoints": "Exit points are required",
        "startPoints": "Start points are required",
    }


def test_image_is_only_required_on_create() -> None:
    draft = _valid_draft()
    draft.image = None
    assert "mapImage" in draft.validate()

    draft.is_edit = True
    assert "mapImage" not in draft.validate()


def test_incomplete_nodes_and_edges_are_reported_by_index() -> None:
    draft = _valid_draft()
    draft.nodes.append(NodeDraft(id="N3", x="", y="4"))
    draft.nodes.append(NodeDraft(id="N4", x="abc", y="4"))
    draft.edges.append(EdgeDraft(id="E2", from_node="N1", to_node=""))

    errors = draft.validate()

    assert errors == {
        "node_2": "Node ID, X, and Y are required",
        "node_3": "Node ID, X, and Y are required",
        "edge_1": "Edge ID, From, and To are required",
    }


def test_zero_coordinates_are_valid() -> None:
    draft = _valid_draft()
    draft.nodes[0] = NodeDraft(id="N1", x="0", y="0")

    assert draft.validate() == {}


@pytest.mark.asyncio
async def test_zero_edges_is_rejected_before_any_request(transport: ScriptedTransport) -> None:
    store = FloorsStore(transport)
    draft = _valid_draft()
    draft.edges = []

    with pytest.raises(FloorValidationError) as excinfo:
        await store.submit_draft(draft)

    assert "edges" in excinfo.value.errors
    assert transport.calls == []


@pytest.mark.asyncio
async def test_edge_to_unknown_node_is_accepted(transport: ScriptedTransport) -> None:
    store = FloorsStore(transport)
    draft = _valid_draft()
    draft.edges.append(EdgeDraft(id="E2", from_node="GHOST", to_node="N2"))
    transport.reply("POST", "/api/floors", ApiResult.ok({"id": "f1", "name": "Lobby"}, status=201))

    result = await store.submit_draft(draft)

    assert result.success is True
    assert draft.validate() == {}
    assert draft.reference_warnings() == ["edge E2 references unknown node GHOST"]
    assert transport.calls_to("POST", "/api/floors")[0].binary_body is True
    assert [floor.id for floor in store.items] == ["f1"]


@pytest.mark.asyncio
async def test_edit_draft_submits_update(transport: ScriptedTransport) -> None:
    store = FloorsStore(transport)
    draft = _valid_draft()
    draft.is_edit = True
    draft.image = None
    transport.reply("PATCH", "/api/floors/f1", ApiResult.ok({"id": "f1", "name": "Lobby"}))

    await store.submit_draft(draft)

    assert len(transport.calls_to("PATCH", "/api/floors/f1")) == 1


def test_submission_flattens_cameras_and_splits_points() -> None:
    draft = _valid_draft()
    draft.cameras.append(CameraDraft(camera_id="CAM_2", edge_id=""))
    draft.cameras.append(CameraDraft(camera_id="", edge_id="E1"))
    draft.start_points = " N1 , ,N2"
    draft.exit_points = "N2,"

    submission = draft.to_submission()

    assert submission["cameraToEdge"] == {"CAM_1": "E1"}
    assert submission["startPoints"] == ["N1", "N2"]
    assert submission["exitPoints"] == ["N2"]


def test_submission_applies_defaults_and_labels() -> None:
    draft = _valid_draft()
    draft.edges[0] = EdgeDraft(
        id="E1",
        from_node="N1",
        to_node="N2",
        static_weight="",
        people_threshold="many",
        fire_threshold="0",
        smoke_threshold="",
    )

    submission = draft.to_submission()

    edge = submission["edges"][0]
    assert edge == {
        "id": "E1",
        "from": "N1",
        "to": "N2",
        "staticWeight": 1.0,
        "peopleThreshold": 10,
        "fireThreshold": 0.0,
        "smokeThreshold": 0.6,
    }
    assert submission["nodes"][0] == {"id": "N1", "x": 10.0, "y": 20.0, "label": "N1", "type": "room"}
    assert submission["nodes"][1]["label"] == "Exit"
    assert submission["widthMeters"] is None


def test_new_edge_carries_default_thresholds() -> None:
    draft = FloorDraft()
    edge = draft.add_edge()

    assert edge.static_weight == "1"
    assert edge.people_threshold == "10"
    assert edge.fire_threshold == "0.7"
    assert edge.smoke_threshold == "0.6"


def test_invalid_submission_raises_with_errors() -> None:
    draft = _valid_draft()
    draft.name = "  "

    with pytest.raises(FloorValidationError) as excinfo:
        draft.to_submission()

    assert excinfo.value.errors == {"name": "Floor name is required"}


def test_list_editing_uses_sequential_ids() -> None:
    draft = FloorDraft()
    draft.add_node()
    draft.add_node()
    draft.add_edge()
    draft.add_camera()

    assert [node.id for node in draft.nodes] == ["N1", "N2"]
    assert draft.edges[0].id == "E1"
    assert draft.cameras[0] == CameraDraft(camera_id="", edge_id="")

    draft.update_node(1, "x", 12.5)
    draft.update_edge(0, "from_node", "N1")
    draft.update_camera(0, "camera_id", "CAM_9")
    assert draft.nodes[1].x == "12.5"
    assert draft.edges[0].from_node == "N1"
    assert draft.cameras[0].camera_id == "CAM_9"

    draft.remove_node(0)
    draft.add_node()
    assert [node.id for node in draft.nodes] == ["N2", "N2"]

    with pytest.raises(AttributeError):
        draft.update_node(0, "colour", "red")


def test_from_floor_accepts_legacy_camera_mapping() -> None:
    floor = Floor.model_validate(
        {
            "id": "f1",
            "name": "Lobby",
            "status": "maintenance",
            "nodes": [{"id": "N1", "x": 0, "y": 5}],
            "edges": [{"id": "E1", "from": "N1", "to": "N1", "fireThreshold": 0.8}],
            "cameraToEdge": {"CAM_1": "E1"},
            "startPoints": ["N1"],
            "exitPoints": ["N1"],
            "mapImage": {"url": "https://cdn/f1.jpg", "widthMeters": 40, "heightMeters": 22.5},
        }
    )

    draft = FloorDraft.from_floor(floor)

    assert draft.is_edit is True
    assert draft.status == "maintenance"
    assert draft.cameras == [CameraDraft(camera_id="CAM_1", edge_id="E1")]
    assert draft.nodes[0].x == "0"
    assert draft.edges[0].fire_threshold == "0.8"
    assert draft.start_points == "N1"
    assert draft.width_meters == "40"
    assert draft.height_meters == "22.5"
    assert draft.validate() == {}


def test_from_floor_prefers_screen_nodes_for_start_points() -> None:
    floor = Floor.model_validate(
        {
            "id": "f2",
            "name": "Office",
            "cameras": [{"id": "CAM_1", "edgeId": "E1"}],
            "screens": [{"id": "S1", "nodeId": "N4"}, {"id": "S2", "nodeId": "N7"}],
            "startPoints": ["N1"],
        }
    )

    draft = FloorDraft.from_floor(floor)

    assert draft.start_points == "N4, N7"
    assert draft.cameras == [CameraDraft(camera_id="CAM_1", edge_id="E1")]


def test_form_data_contains_json_fields_and_image() -> None:
    submission = _valid_draft().to_submission()
    submission["widthMeters"] = 40.0

    form = build_floor_form_data(submission, IMAGE)

    fields = {options["name"]: value for options, _headers, value in form._fields}
    assert fields["id"] == "f1"
    assert json.loads(fields["nodes"])[0]["id"] == "N1"
    assert json.loads(fields["cameraToEdge"]) == {"CAM_1": "E1"}
    assert fields["widthMeters"] == "40"
    assert "heightMeters" not in fields
    assert fields["mapImage"] == IMAGE.content


def test_map_image_upload_from_path(tmp_path) -> None:
    image = tmp_path / "plan.png"
    image.write_bytes(b"\x89PNG")

    upload = MapImageUpload.from_path(image)

    assert upload.filename == "plan.png"
    assert upload.content == b"\x89PNG"
    assert upload.content_type == "image/png"


@pytest.mark.asyncio
async def test_edit_targets_the_loaded_floor_even_if_id_is_changed(transport: ScriptedTransport) -> None:
    floor = Floor.model_validate(
        {
            "id": "f1",
            "name": "Lobby",
            "nodes": [{"id": "N1", "x": 0, "y": 0}, {"id": "N2", "x": 5, "y": 0}],
            "edges": [{"id": "E1", "from": "N1", "to": "N2"}],
            "startPoints": ["N1"],
            "exitPoints": ["N2"],
        }
    )
    store = FloorsStore(transport)
    draft = FloorDraft.from_floor(floor)
    draft.id = "f9"
    transport.reply("PATCH", "/api/floors/f1", ApiResult.ok({"id": "f1", "name": "Lobby"}))

    await store.submit_draft(draft)

    assert draft.original_id == "f1"
    assert draft.to_submission()["id"] == "f1"
    assert len(transport.calls_to("PATCH", "/api/floors/f1")) == 1
    assert transport.calls_to("PATCH", "/api/floors/f9") == []


def test_new_floor_submits_typed_id() -> None:
    draft = _valid_draft()
    draft.id = " f7 "

    assert draft.target_id == "f7"
    assert draft.to_submission()["id"] == "f7"


def test_unknown_node_type_is_a_warning_only() -> None:
    draft = _valid_draft()
    draft.update_node(0, "type", "balcony")

    assert draft.reference_warnings() == ["node N1 has unknown type balcony"]
    assert draft.validate() == {}
