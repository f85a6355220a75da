"""Integration tests for DesignSession: templates, picks and bulk edits."""

import json
from typing import Any

import pytest

from casework.application.config import DesignerSettings
from casework.application.factory import ServiceFactory
from casework.application.session import DesignSession, PickEvent
from casework.application.templates import (
    TemplateError,
    TemplateNotFoundError,
    TemplateSourceError,
)
from casework.domain import HierarchyStore, SelectionMode
from casework.infrastructure import (
    BundledTemplateSource,
    DirectoryTemplateSource,
    HttpTemplateSource,
    SceneGraphAdapter,
)

pytestmark = pytest.mark.integration


class FailingSource:
    """Template source whose fetches always fail."""

    async def list_templates(self) -> list[str]:
        return ["kitchen-run"]

    async def fetch_template(self, name: str) -> dict[str, Any]:
        raise TemplateSourceError("Connection reset", "http://templates.test")


class StaticSource:
    """Template source serving one fixed document."""

    def __init__(self, document: Any) -> None:
        self.document = document

    async def list_templates(self) -> list[str]:
        return ["static"]

    async def fetch_template(self, name: str) -> Any:
        return self.document


def _session(source=None) -> DesignSession:
    session = DesignSession(HierarchyStore(SceneGraphAdapter()), template_source=source)
    session.bootstrap("Kitchen")
    return session


class TestLoadTemplate:
    """Loading templates through a session."""

    @pytest.mark.asyncio
    async def test_load_bundled_template(self) -> None:
        session = _session(BundledTemplateSource())

        result = await session.load_template("kitchen-run")

        assert result.ok
        assert len(result.cabinets) == 4
        floor = session.store.get_floor(session.active_floor_id)
        assert floor.cabinets == ["run-sink", "run-drawers", "run-oven", "run-end"]

    @pytest.mark.asyncio
    async def test_list_templates(self) -> None:
        session = _session(BundledTemplateSource())
        assert await session.list_templates() == ["base-cabinet", "kitchen-run", "wall-unit"]

    @pytest.mark.asyncio
    async def test_failed_fetch_leaves_store_unchanged(self) -> None:
        session = _session(FailingSource())
        live = session.store.adapter.live_count

        with pytest.raises(TemplateSourceError):
            await session.load_template("kitchen-run")

        assert session.store.cabinet_count == 0
        assert session.store.adapter.live_count == live

    @pytest.mark.asyncio
    async def test_unknown_template(self) -> None:
        session = _session(BundledTemplateSource())

        with pytest.raises(TemplateNotFoundError):
            await session.load_template("nope")

    @pytest.mark.asyncio
    async def test_document_without_cabinets(self) -> None:
        session = _session(StaticSource({"panels": []}))

        with pytest.raises(TemplateError):
            await session.load_template("static")
        assert session.store.cabinet_count == 0

    @pytest.mark.asyncio
    async def test_without_source(self) -> None:
        with pytest.raises(RuntimeError, match="No template source"):
            await _session().load_template("kitchen-run")

    @pytest.mark.asyncio
    async def test_directory_source(self, tmp_path, base_cabinet_entry: dict) -> None:
        (tmp_path / "mine.json").write_text(json.dumps({"cabinets": [base_cabinet_entry]}))
        session = _session(DirectoryTemplateSource(tmp_path))

        result = await session.load_template("mine")

        assert [c.id for c in result.cabinets] == ["base-600"]

    @pytest.mark.asyncio
    async def test_http_source(self, httpx_mock, base_cabinet_entry: dict) -> None:
        httpx_mock.add_response(
            url="http://templates.test/getJson.php?file=remote.json",
            json={"cabinets": [base_cabinet_entry]},
        )
        session = _session(HttpTemplateSource("http://templates.test"))

        result = await session.load_template("remote")

        assert result.cabinets[0].name == "Base 600"


class TestEditing:
    """Picks, removal and export through a session."""

    def test_add_cabinet_uses_default_names(self, session: DesignSession) -> None:
        first = session.add_cabinet(600, 720, 560, 18)
        second = session.add_cabinet(400, 720, 560, 18, {"backType": "groove"})

        assert first.name == "Cabinet 1"
        assert second.name == "Cabinet 2"
        assert second.panels[4].length == 400 - 36

    def test_add_cabinet_rejects_bad_dimensions(self, session: DesignSession) -> None:
        assert session.add_cabinet(30, 720, 560, 18) is None
        assert session.store.cabinet_count == 0

    def test_add_cabinet_unknown_floor(self, session: DesignSession) -> None:
        assert session.add_cabinet(600, 720, 560, 18, floor_id="missing") is None

    def test_pick_then_remove_cabinet(self, session: DesignSession) -> None:
        keep = session.add_cabinet(600, 720, 560, 18)
        drop = session.add_cabinet(600, 720, 560, 18)

        mode = session.handle_pick(PickEvent(drop.panels[0].id))
        removed = session.remove_selection()

        assert mode is SelectionMode.CABINET
        assert removed == 1
        assert session.store.get_all_cabinets() == [keep]
        assert session.selection.get_selected_panel_ids() == []

    def test_remove_selected_panels(self, session: DesignSession) -> None:
        cabinet = session.add_cabinet(600, 720, 560, 18)
        session.handle_pick(PickEvent(cabinet.panels[3].id, shift=True))
        session.handle_pick(PickEvent(cabinet.panels[4].id, shift=True, ctrl=True))

        assert session.remove_selection() == 2
        assert [p.name for p in cabinet.panels] == ["Left Side", "Right Side", "Bottom"]

    def test_export_round_trip_between_sessions(self, session: DesignSession) -> None:
        session.add_cabinet(800, 720, 560, 18, {"topStyle": "flushWithSides"}, name="Sink")
        document = session.export_template()

        other = _session()
        result = other.load_document(document)

        assert result.ok
        assert other.export_template() == document

    def test_snapshot(self, session: DesignSession) -> None:
        cabinet = session.add_cabinet(600, 720, 560, 18)
        session.handle_pick(PickEvent(cabinet.panels[0].id))

        snapshot = session.snapshot()

        project = snapshot["projects"][0]
        assert project["name"] == "Test Project"
        assert project["floors"][0]["cabinets"][0]["id"] == cabinet.id
        assert snapshot["selection"]["cabinets"] == [cabinet.id]
        assert snapshot["cabinets"] == []

    def test_clear(self, session: DesignSession) -> None:
        cabinet = session.add_cabinet(600, 720, 560, 18)
        session.handle_pick(PickEvent(cabinet.panels[0].id))

        session.clear()

        assert session.store.adapter.live_count == 1
        assert session.active_floor_id is None
        assert session.selection.get_selected_panel_ids() == []

    def test_view_mode_keeps_selection_colour(self, session: DesignSession) -> None:
        cabinet = session.add_cabinet(600, 720, 560, 18)
        session.handle_pick(PickEvent(cabinet.panels[0].id))

        assert session.set_view_mode("solid") is True
        assert cabinet.panels[0].representation.color == "#90EE90"


class TestServiceFactory:
    """Sessions built from settings."""

    def test_settings_drive_session(self) -> None:
        settings = DesignerSettings(
            view_mode="solid",
            default_floor_name="Level 0",
            palette={"group": "#00ff00"},
        )
        session = ServiceFactory(settings=settings).create_session()
        session.bootstrap()
        cabinet = session.add_cabinet(600, 720, 560, 18)
        session.handle_pick(PickEvent(cabinet.panels[0].id))

        floor = session.store.get_floor(session.active_floor_id)
        assert floor.name == "Level 0"
        assert cabinet.panels[0].representation.style.value == "solid"
        assert cabinet.panels[0].representation.color == "#00FF00"

    def test_source_precedence(self, tmp_path) -> None:
        both = ServiceFactory(
            DesignerSettings(template_dir=str(tmp_path), template_url="https://t.test")
        )
        directory = ServiceFactory(DesignerSettings(template_dir=str(tmp_path)))

        assert isinstance(both.get_template_source(), HttpTemplateSource)
        assert isinstance(directory.get_template_source(), DirectoryTemplateSource)
        assert isinstance(ServiceFactory().get_template_source(), BundledTemplateSource)
