"""Unit tests for STL export."""

from pathlib import Path

import numpy as np
import pytest
from stl import mesh

from casework.application.templates import TemplateMaterializer
from casework.domain import HierarchyStore, PanelSpec, Position, Rotation, derive_panels
from casework.infrastructure import StlExporter, StlMeshBuilder
from casework.infrastructure.stl_exporter import rotation_matrix


def _bounds(panel) -> tuple[np.ndarray, np.ndarray]:
    vertices = StlMeshBuilder().panel_vertices(panel)
    return vertices.min(axis=0), vertices.max(axis=0)


@pytest.fixture
def carcass() -> dict[str, PanelSpec]:
    return {spec.name: spec for spec in derive_panels(600, 720, 560, 18)}


class TestRotationMatrix:
    """Tests for rotation_matrix."""

    def test_identity(self) -> None:
        assert np.allclose(rotation_matrix(Rotation()), np.eye(3))

    def test_quarter_turn_about_z(self) -> None:
        rotated = rotation_matrix(Rotation(rz=90)) @ np.array([1.0, 0.0, 0.0])
        assert np.allclose(rotated, [0.0, 1.0, 0.0])


class TestStlMeshBuilder:
    """Panel boxes land where the rules engine puts them."""

    def test_unrotated_box(self) -> None:
        spec = PanelSpec("P", 100, 50, 10, Position(0, 0, 0))
        low, high = _bounds(spec)

        assert np.allclose(low, [-50, -25, -5])
        assert np.allclose(high, [50, 25, 5])

    def test_left_side(self, carcass) -> None:
        low, high = _bounds(carcass["Left Side"])

        assert np.allclose(low, [0, 0, 18])
        assert np.allclose(high, [18, 720, 578])

    def test_bottom(self, carcass) -> None:
        low, high = _bounds(carcass["Bottom"])

        assert np.allclose(low, [18, 0, 18])
        assert np.allclose(high, [582, 18, 578])

    def test_screwed_back(self, carcass) -> None:
        low, high = _bounds(carcass["Back"])

        assert np.allclose(low, [0, 0, 0])
        assert np.allclose(high, [600, 720, 18])

    def test_panel_mesh_has_twelve_faces(self, carcass) -> None:
        panel_mesh = StlMeshBuilder().build_panel_mesh(carcass["Top"])
        assert panel_mesh.vectors.shape == (12, 3, 3)

    def test_normals_point_outward(self) -> None:
        spec = PanelSpec("P", 100, 50, 10)
        panel_mesh = StlMeshBuilder().build_panel_mesh(spec)

        centroids = panel_mesh.vectors.mean(axis=1)
        normals = np.cross(
            panel_mesh.vectors[:, 1] - panel_mesh.vectors[:, 0],
            panel_mesh.vectors[:, 2] - panel_mesh.vectors[:, 0],
        )
        assert np.all(np.einsum("ij,ij->i", centroids, normals) > 0)


class TestStlExporter:
    """Tests for StlExporter."""

    def test_export_all_cabinets(self, store: HierarchyStore, floor_id: str, base_cabinet_entry) -> None:
        second = {**base_cabinet_entry, "id": "base-601"}
        TemplateMaterializer(store).materialize(
            {"cabinets": [base_cabinet_entry, second]}, floor_id
        )

        combined = StlExporter().export(store)

        assert combined.vectors.shape[0] == 2 * 5 * 12

    def test_export_selected_cabinet(self, store: HierarchyStore, floor_id: str, base_cabinet_entry) -> None:
        TemplateMaterializer(store).materialize({"cabinets": [base_cabinet_entry]}, floor_id)
        other = store.create_cabinet(floor_id)
        store.add_panel(other.id, 100, 100, 18)

        combined = StlExporter().export(store, [other.id, "missing"])

        assert combined.vectors.shape[0] == 12

    def test_export_to_file(
        self, store: HierarchyStore, floor_id: str, base_cabinet_entry, tmp_path: Path
    ) -> None:
        TemplateMaterializer(store).materialize({"cabinets": [base_cabinet_entry]}, floor_id)
        output = tmp_path / "base.stl"

        StlExporter().export_to_file(store, output)

        loaded = mesh.Mesh.from_file(str(output))
        assert len(loaded.vectors) == 60
