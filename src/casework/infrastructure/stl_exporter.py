"""STL export functionality using numpy-stl.

Every panel is written as an oriented box. A panel's box extends
``length`` along local X, ``width`` along local Y and ``thickness`` along
local Z, is centred on the panel position and rotated by its Euler angles
(degrees, X then Y then Z intrinsic order). The scene is already Y-up, so
no axis swap is applied.
"""

import math
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import numpy as np
from stl import mesh

from casework.domain.entities import Panel
from casework.domain.hierarchy import HierarchyStore
from casework.domain.value_objects import PanelSpec, Rotation

# Unit-box corners in (x, y, z) sign form, ordered like the triangles below.
_CORNER_SIGNS = np.array(
    [
        (-1, -1, -1),  # 0: x0 y0 z0
        (1, -1, -1),  # 1: x1 y0 z0
        (1, 1, -1),  # 2: x1 y1 z0
        (-1, 1, -1),  # 3: x0 y1 z0
        (-1, -1, 1),  # 4: x0 y0 z1
        (1, -1, 1),  # 5: x1 y0 z1
        (1, 1, 1),  # 6: x1 y1 z1
        (-1, 1, 1),  # 7: x0 y1 z1
    ],
    dtype=float,
)

# Counter-clockwise seen from outside, so normals point outward.
BOX_TRIANGLES: list[tuple[int, int, int]] = [
    # z min
    (0, 2, 1),
    (0, 3, 2),
    # z max
    (4, 5, 6),
    (4, 6, 7),
    # y min
    (0, 1, 5),
    (0, 5, 4),
    # y max
    (2, 3, 7),
    (2, 7, 6),
    # x min
    (0, 4, 7),
    (0, 7, 3),
    # x max
    (1, 2, 6),
    (1, 6, 5),
]


def rotation_matrix(rotation: Rotation) -> np.ndarray:
    """3x3 matrix for an XYZ Euler rotation given in degrees (Rx @ Ry @ Rz)."""
    ax, ay, az = (math.radians(a) for a in (rotation.rx, rotation.ry, rotation.rz))
    cx, sx = math.cos(ax), math.sin(ax)
    cy, sy = math.cos(ay), math.sin(ay)
    cz, sz = math.cos(az), math.sin(az)

    rx = np.array([[1, 0, 0], [0, cx, -sx], [0, sx, cx]])
    ry = np.array([[cy, 0, sy], [0, 1, 0], [-sy, 0, cy]])
    rz = np.array([[cz, -sz, 0], [sz, cz, 0], [0, 0, 1]])
    return rx @ ry @ rz


class StlMeshBuilder:
    """Builds STL meshes from panel geometry."""

    def panel_vertices(self, panel: Panel | PanelSpec) -> np.ndarray:
        """The 8 world-space corners of a panel's box, shape (8, 3)."""
        half_extents = np.array([panel.length, panel.width, panel.thickness]) / 2.0
        local = _CORNER_SIGNS * half_extents
        rotated = local @ rotation_matrix(panel.rotation).T
        position = panel.position
        return rotated + np.array([position.x, position.y, position.z])

    def build_panel_mesh(self, panel: Panel | PanelSpec) -> mesh.Mesh:
        """Create a 12-triangle mesh for one panel."""
        vertices = self.panel_vertices(panel)
        box_mesh = mesh.Mesh(np.zeros(len(BOX_TRIANGLES), dtype=mesh.Mesh.dtype))
        for i, (v0, v1, v2) in enumerate(BOX_TRIANGLES):
            box_mesh.vectors[i] = [vertices[v0], vertices[v1], vertices[v2]]
        return box_mesh

    def combine_meshes(self, meshes: list[mesh.Mesh]) -> mesh.Mesh:
        """Combine multiple meshes into a single mesh."""
        if not meshes:
            return mesh.Mesh(np.zeros(0, dtype=mesh.Mesh.dtype))

        total_faces = sum(m.vectors.shape[0] for m in meshes)
        combined = mesh.Mesh(np.zeros(total_faces, dtype=mesh.Mesh.dtype))

        offset = 0
        for m in meshes:
            num_faces = m.vectors.shape[0]
            combined.vectors[offset : offset + num_faces] = m.vectors
            offset += num_faces

        return combined


class StlExporter:
    """Exports the panels held by a hierarchy store to STL.

    Example:
        StlExporter().export_to_file(store, Path("kitchen.stl"))
    """

    def __init__(self, mesh_builder: StlMeshBuilder | None = None) -> None:
        self.mesh_builder = mesh_builder or StlMeshBuilder()

    def export(self, store: HierarchyStore, cabinet_ids: Iterable[Any] | None = None) -> mesh.Mesh:
        """Build one mesh holding every panel of the chosen cabinets.

        Args:
            store: Store to read panels from.
            cabinet_ids: Cabinets to include; None means all of them.
                Unknown ids are ignored.
        """
        if cabinet_ids is None:
            cabinets = store.get_all_cabinets()
        else:
            cabinets = [c for c in (store.get_cabinet(cid) for cid in cabinet_ids) if c is not None]

        meshes = [
            self.mesh_builder.build_panel_mesh(panel)
            for cabinet in cabinets
            for panel in cabinet.panels
        ]
        return self.mesh_builder.combine_meshes(meshes)

    def export_to_file(
        self,
        store: HierarchyStore,
        filepath: Path | str,
        cabinet_ids: Iterable[Any] | None = None,
    ) -> None:
        """Export panels to an STL file at ``filepath``."""
        combined_mesh = self.export(store, cabinet_ids)
        combined_mesh.save(str(filepath))
