"""Integration tests for the REST API."""

import pytest
from fastapi.testclient import TestClient

from casework.application.session import DesignSession
from casework.domain import HierarchyStore
from casework.infrastructure import BundledTemplateSource, SceneGraphAdapter
from casework.web import create_app

pytestmark = pytest.mark.integration

API = "/api/v1"


@pytest.fixture
def api_session() -> DesignSession:
    """Session with the bundled templates and one project."""
    session = DesignSession(
        HierarchyStore(SceneGraphAdapter()), template_source=BundledTemplateSource()
    )
    session.bootstrap("Kitchen")
    return session


@pytest.fixture
def client(api_session: DesignSession) -> TestClient:
    return TestClient(create_app(api_session))


def _create(client: TestClient, **overrides) -> dict:
    body = {"width": 600, "height": 720, "depth": 560, "thickness": 18, **overrides}
    response = client.post(f"{API}/design/cabinets", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestHealthAndTemplates:
    """Health check and bundled template endpoints."""

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "healthy"}

    def test_list_templates(self, client: TestClient) -> None:
        response = client.get(f"{API}/templates")

        assert response.status_code == 200
        names = [t["name"] for t in response.json()["templates"]]
        assert names == ["base-cabinet", "kitchen-run", "wall-unit"]

    def test_get_template(self, client: TestClient) -> None:
        response = client.get(f"{API}/templates/base-cabinet")

        assert response.status_code == 200
        assert response.json()["content"]["cabinets"][0]["id"] == "base-600"

    def test_unknown_template(self, client: TestClient) -> None:
        response = client.get(f"{API}/templates/nope")

        assert response.status_code == 404
        assert response.json()["error_type"] == "not_found"


class TestRulesEndpoint:
    """POST /rules/derive."""

    def test_derive(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/rules/derive",
            json={
                "width": 600,
                "height": 720,
                "depth": 560,
                "thickness": 18,
                "options": {"top_style": "flushWithSides"},
            },
        )

        assert response.status_code == 200
        panels = response.json()["panels"]
        assert [p["name"] for p in panels] == ["Left Side", "Right Side", "Bottom", "Top", "Back"]
        assert panels[3]["length"] == 600
        assert panels[0]["id"] is None

    def test_derive_rejects_thick_boards(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/rules/derive",
            json={"width": 30, "height": 720, "depth": 560, "thickness": 18},
        )
        assert response.status_code == 422


class TestCabinetEndpoints:
    """Cabinet and panel CRUD."""

    def test_create_and_get(self, client: TestClient, api_session: DesignSession) -> None:
        created = _create(client, options={"back_type": "groove"})

        assert created["name"] == "Cabinet 1"
        assert created["floor_id"] == api_session.active_floor_id
        assert created["parameters"]["options"]["backType"] == "groove"
        assert len(created["panels"]) == 5

        fetched = client.get(f"{API}/design/cabinets/{created['id']}").json()
        assert fetched == created

    def test_create_on_unknown_floor(self, client: TestClient) -> None:
        response = client.post(
            f"{API}/design/cabinets",
            json={"width": 600, "height": 720, "depth": 560, "thickness": 18, "floor_id": "x"},
        )

        assert response.status_code == 404
        assert response.json()["details"] == {"kind": "floor", "id": "x"}

    def test_list_by_floor(self, client: TestClient, api_session: DesignSession) -> None:
        _create(client, name="A")
        _create(client, name="B")

        response = client.get(
            f"{API}/design/cabinets", params={"floor_id": api_session.active_floor_id}
        )

        assert [c["name"] for c in response.json()["cabinets"]] == ["A", "B"]

    def test_delete_cabinet(self, client: TestClient, api_session: DesignSession) -> None:
        created = _create(client)

        assert client.delete(f"{API}/design/cabinets/{created['id']}").status_code == 204
        assert client.get(f"{API}/design/cabinets/{created['id']}").status_code == 404
        assert api_session.store.panel_count == 0

    def test_update_panel(self, client: TestClient) -> None:
        panel_id = _create(client)["panels"][0]["id"]

        response = client.patch(
            f"{API}/design/panels/{panel_id}",
            json={"name": "Gable", "position": {"x": -10}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Gable"
        assert body["position"] == {"x": -10.0, "y": 0.0, "z": 0.0}
        assert body["length"] == 720

    def test_update_unknown_panel(self, client: TestClient) -> None:
        response = client.patch(f"{API}/design/panels/ghost", json={"name": "x"})
        assert response.status_code == 404

    def test_move_panel(self, client: TestClient) -> None:
        source = _create(client)
        target = _create(client)
        panel_id = source["panels"][4]["id"]

        response = client.post(
            f"{API}/design/panels/{panel_id}/move",
            json={"target_cabinet_id": target["id"]},
        )

        assert response.status_code == 200
        assert response.json()["panels"][-1]["id"] == panel_id
        assert len(client.get(f"{API}/design/cabinets/{source['id']}").json()["panels"]) == 4

    def test_delete_panel(self, client: TestClient) -> None:
        panel_id = _create(client)["panels"][0]["id"]

        assert client.delete(f"{API}/design/panels/{panel_id}").status_code == 204
        assert client.get(f"{API}/design/panels/{panel_id}").status_code == 404


class TestSelectionEndpoints:
    """Picks and selection removal."""

    def test_pick_selects_cabinet(self, client: TestClient) -> None:
        cabinet = _create(client)

        response = client.post(
            f"{API}/design/pick", json={"panel_id": cabinet["panels"][0]["id"]}
        )

        body = response.json()
        assert body["mode"] == "cabinet"
        assert body["cabinets"] == [cabinet["id"]]
        assert len(body["group_selected"]) == 5

    def test_pick_unknown_panel(self, client: TestClient) -> None:
        body = client.post(f"{API}/design/pick", json={"panel_id": "ghost"}).json()

        assert body["mode"] is None
        assert body["selected"] == []

    def test_clear_selection(self, client: TestClient) -> None:
        cabinet = _create(client)
        client.post(
            f"{API}/design/pick",
            json={"panel_id": cabinet["panels"][0]["id"], "shift": True},
        )

        body = client.delete(f"{API}/design/selection").json()

        assert body["selected"] == []

    def test_remove_selection(self, client: TestClient, api_session: DesignSession) -> None:
        keep = _create(client)
        drop = _create(client)
        client.post(f"{API}/design/pick", json={"panel_id": drop["panels"][0]["id"]})

        response = client.post(f"{API}/design/selection/remove")

        assert response.json() == {"removed": 1}
        assert [c.id for c in api_session.store.get_all_cabinets()] == [keep["id"]]


class TestTemplateLoading:
    """Template and document loading through the session."""

    def test_load_bundled_template(self, client: TestClient) -> None:
        response = client.post(f"{API}/design/templates/wall-unit/load")

        assert response.status_code == 200
        body = response.json()
        assert [c["id"] for c in body["cabinets"]] == ["wall-left", "wall-right"]
        assert body["skipped"] == []

    def test_load_unknown_template(self, client: TestClient) -> None:
        response = client.post(f"{API}/design/templates/nope/load")
        assert response.status_code == 404

    def test_load_document_reports_skips(self, client: TestClient, base_cabinet_entry: dict) -> None:
        response = client.post(
            f"{API}/design/documents",
            json={"document": {"cabinets": [base_cabinet_entry, {"name": "Broken"}]}},
        )

        body = response.json()
        assert [c["id"] for c in body["cabinets"]] == ["base-600"]
        assert body["skipped"][0]["index"] == 1
        assert body["skipped"][0]["name"] == "Broken"

    def test_load_document_without_cabinets(self, client: TestClient) -> None:
        response = client.post(f"{API}/design/documents", json={"document": {"rooms": []}})

        assert response.status_code == 422
        assert response.json()["error_type"] == "template"

    def test_export(self, client: TestClient, base_cabinet_entry: dict) -> None:
        client.post(f"{API}/design/documents", json={"document": {"cabinets": [base_cabinet_entry]}})

        assert client.get(f"{API}/design/export").json() == {"cabinets": [base_cabinet_entry]}

    def test_scene(self, client: TestClient) -> None:
        client.post(f"{API}/design/templates/base-cabinet/load")

        scene = client.get(f"{API}/design/scene").json()

        floor = scene["projects"][0]["floors"][0]
        assert floor["name"] == "Ground Floor"
        assert floor["cabinets"][0]["name"] == "Base 600"


class TestViewMode:
    """PUT /design/view-mode."""

    def test_switch_view_mode(self, client: TestClient) -> None:
        first = client.put(f"{API}/design/view-mode", json={"mode": "solid"}).json()
        second = client.put(f"{API}/design/view-mode", json={"mode": "solid"}).json()

        assert first == {"view_mode": "solid", "changed": True}
        assert second["changed"] is False

    def test_invalid_view_mode(self, client: TestClient) -> None:
        assert client.put(f"{API}/design/view-mode", json={"mode": "hologram"}).status_code == 422
