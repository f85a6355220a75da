"""Unit tests for template materialization and export."""

import pytest

from casework.application.templates import (
    TemplateError,
    TemplateExporter,
    TemplateManager,
    TemplateMaterializer,
)
from casework.domain import HierarchyStore, Position


@pytest.fixture
def materializer(store: HierarchyStore) -> TemplateMaterializer:
    return TemplateMaterializer(store)


class TestMaterialize:
    """Tests for TemplateMaterializer.materialize."""

    def test_creates_cabinet_with_derived_panels(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        result = materializer.materialize({"cabinets": [base_cabinet_entry]}, floor_id)

        assert result.ok
        cabinet = result.cabinets[0]
        assert cabinet.id == "base-600"
        assert cabinet.name == "Base 600"
        assert [p.name for p in cabinet.panels] == [
            "Left Side",
            "Right Side",
            "Bottom",
            "Top",
            "Back",
        ]
        back = cabinet.panels[4]
        assert (back.length, back.width) == (564, 684)
        assert back.position == Position(300, 360, 18)
        assert store.owner_floor_of_cabinet(cabinet.id).id == floor_id
        assert cabinet.parameters.width == 600

    def test_bundled_kitchen_run(self, store: HierarchyStore, materializer, floor_id: str) -> None:
        document = TemplateManager().load("kitchen-run")

        cabinets = materializer.load_from_template(document, floor_id)

        assert [c.name for c in cabinets] == [
            "Sink Base",
            "Drawer Base",
            "Oven Housing",
            "End Base",
        ]
        assert store.panel_count == 20
        assert cabinets[2].panels[3].length == 600  # flush top

    def test_root_level_when_no_floor(self, store: HierarchyStore, materializer, base_cabinet_entry) -> None:
        cabinet = materializer.load_from_template({"cabinets": [base_cabinet_entry]})[0]

        assert store.owner_floor_of_cabinet(cabinet.id) is None
        assert cabinet.visual_handle.parent is store.root_handle

    def test_malformed_entries_are_skipped(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        document = {
            "cabinets": [
                {"name": "No Size"},
                base_cabinet_entry,
                "not an object",
                {**base_cabinet_entry, "id": "thick", "name": "Thick", "thickness": 400},
            ]
        }

        result = materializer.materialize(document, floor_id)

        assert [c.id for c in result.cabinets] == ["base-600"]
        assert [s.index for s in result.skipped] == [0, 2, 3]
        assert result.skipped[0].name == "No Size"
        assert "width" in result.skipped[0].reason
        assert result.skipped[1].name is None
        assert store.cabinet_count == 1

    def test_document_without_cabinets_raises(self, store: HierarchyStore, materializer, floor_id) -> None:
        with pytest.raises(TemplateError):
            materializer.materialize({"items": []}, floor_id)
        assert store.cabinet_count == 0

    def test_unknown_floor_skips_everything(self, store: HierarchyStore, materializer, base_cabinet_entry) -> None:
        result = materializer.materialize({"cabinets": [base_cabinet_entry]}, "floor-missing")

        assert result.cabinets == []
        assert "not found" in result.skipped[0].reason
        assert store.cabinet_count == 0

    def test_reload_replaces_cabinet(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        document = {"cabinets": [base_cabinet_entry]}
        materializer.materialize(document, floor_id)
        live = store.adapter.live_count

        result = materializer.materialize(document, floor_id)

        assert result.ok
        assert store.cabinet_count == 1
        assert store.panel_count == 5
        assert store.adapter.live_count == live
        assert store.get_floor(floor_id).cabinets == ["base-600"]

    def test_duplicate_id_in_one_document_is_skipped(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        first = {**base_cabinet_entry, "id": "x", "name": "A"}
        second = {**base_cabinet_entry, "id": "x", "name": "B"}

        result = materializer.materialize({"cabinets": [first, second]}, floor_id)

        assert [c.name for c in result.cabinets] == ["A"]
        assert all(store.get_cabinet(c.id) is c for c in result.cabinets)
        assert result.skipped[0].index == 1
        assert "duplicate id" in result.skipped[0].reason
        assert store.cabinet_count == 1
        assert store.panel_count == 5

    def test_non_string_options_use_defaults(
        self, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        base_cabinet_entry["options"] = {"backType": 1, "topStyle": True}

        result = materializer.materialize({"cabinets": [base_cabinet_entry]}, floor_id)

        assert result.ok
        cabinet = result.cabinets[0]
        assert cabinet.panels[3].length == 600 - 36
        assert cabinet.panels[4].length == 600

    def test_id_used_by_other_kind_is_skipped(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        base_cabinet_entry["id"] = floor_id

        result = materializer.materialize({"cabinets": [base_cabinet_entry]}, floor_id)

        assert result.cabinets == []
        assert "used by a floor" in result.skipped[0].reason
        assert store.get_floor(floor_id) is not None

    def test_adapter_failure_only_drops_that_cabinet(
        self, flaky_adapter_cls, base_cabinet_entry: dict
    ) -> None:
        adapter = flaky_adapter_cls(fail_on=3)
        store = HierarchyStore(adapter)
        floor_id = store.create_project().floors[0]
        live = adapter.live_count
        second = {**base_cabinet_entry, "id": "base-601", "name": "Base 601"}

        result = TemplateMaterializer(store).materialize(
            {"cabinets": [base_cabinet_entry, second]}, floor_id
        )

        assert [c.id for c in result.cabinets] == ["base-601"]
        assert result.skipped[0].reason == "materialization failed: GPU out of memory"
        assert store.get_cabinet("base-600") is None
        assert store.panel_count == 5
        # one cabinet group plus five panel groups and five representations
        assert adapter.live_count == live + 11


class TestTemplateExporter:
    """Tests for TemplateExporter."""

    def test_export_round_trip(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        materializer.materialize({"cabinets": [base_cabinet_entry]}, floor_id)

        document = TemplateExporter(store).export()

        assert document == {"cabinets": [base_cabinet_entry]}

    def test_hand_built_cabinets_are_left_out(
        self, store: HierarchyStore, materializer, floor_id: str, base_cabinet_entry: dict
    ) -> None:
        materializer.materialize({"cabinets": [base_cabinet_entry]}, floor_id)
        manual = store.create_cabinet(floor_id)
        store.add_panel(manual.id, 100, 100, 18)

        document = TemplateExporter(store).export()

        assert [entry["id"] for entry in document["cabinets"]] == ["base-600"]

    def test_export_selected_ids(self, store: HierarchyStore, materializer, floor_id: str) -> None:
        materializer.materialize(TemplateManager().load("wall-unit"), floor_id)

        document = TemplateExporter(store).export(["wall-right", "missing"])

        assert [entry["name"] for entry in document["cabinets"]] == ["Wall Unit Right"]
