"""Hierarchy store: the single source of truth for entity ownership.

The store owns every Project, Floor, Cabinet and Panel, the containment
edges between them and the id indices used to reach them. The visual tree
held by the geometry adapter is a projection of this logical tree: the
store writes to it on every mutation and never reads it back.

Ownership is tracked twice: forward as ordered child lists on each parent,
and backwards as reverse indices (panel -> cabinet, cabinet -> floor,
floor -> project), so owner resolution never walks the tree.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .entities import Cabinet, Floor, Panel, Project
from .events import EntityEvent, EntityEventType, EventBus
from .value_objects import (
    EntityKind,
    PanelSpec,
    Position,
    Rotation,
    SelectionColor,
    ViewMode,
    canonical_id,
    new_entity_id,
)

if TYPE_CHECKING:
    from casework.contracts.protocols import GeometryAdapterProtocol

logger = logging.getLogger(__name__)

__all__ = ["DEFAULT_FIRST_FLOOR_NAME", "HierarchyStore"]

DEFAULT_FIRST_FLOOR_NAME = "Ground Floor"


def _smallest_unused(base: str, names: Iterable[str]) -> str:
    """Return ``"<base> <n>"`` for the smallest positive n not in ``names``."""
    taken = set(names)
    n = 1
    while f"{base} {n}" in taken:
        n += 1
    return f"{base} {n}"


class HierarchyStore:
    """Owns the project/floor/cabinet/panel tree and keeps its projection in sync.

    Operations that name an unknown entity return ``None`` or ``False``
    rather than raising. Exceptions raised by the geometry adapter
    propagate, but only after anything built for the failed operation has
    been disposed, so committed state is never left half-updated.

    Example:
        store = HierarchyStore(SceneGraphAdapter())
        project = store.create_project("Kitchen")
        floor_id = project.floors[0]
        cabinet = store.create_cabinet(floor_id)
        store.add_panel(cabinet.id, 720, 560, 18, name="Left Side")
    """

    def __init__(
        self,
        adapter: GeometryAdapterProtocol,
        events: EventBus | None = None,
        first_floor_name: str = DEFAULT_FIRST_FLOOR_NAME,
    ) -> None:
        self.adapter = adapter
        self.events = events or EventBus()
        self.first_floor_name = first_floor_name

        self._projects: dict[str, Project] = {}
        self._floors: dict[str, Floor] = {}
        self._cabinets: dict[str, Cabinet] = {}
        self._panels: dict[str, Panel] = {}

        # Reverse indices: child id -> owner id
        self._floor_owner: dict[str, str] = {}
        self._cabinet_owner: dict[str, str] = {}
        self._panel_owner: dict[str, str] = {}

        # Entities attached directly under the scene root
        self._root_floors: list[str] = []
        self._root_cabinets: list[str] = []

        # Last highlight pushed to each panel's representation
        self._highlight: dict[str, SelectionColor] = {}

        self.root_handle = adapter.create_visual_group("Scene")

    # ==================== ID HANDLING ====================

    def kind_of(self, entity_id: Any) -> EntityKind | None:
        """Which kind of entity an id names, or None when unknown."""
        key = canonical_id(entity_id)
        if key in self._panels:
            return EntityKind.PANEL
        if key in self._cabinets:
            return EntityKind.CABINET
        if key in self._floors:
            return EntityKind.FLOOR
        if key in self._projects:
            return EntityKind.PROJECT
        return None

    def _allocate_id(self, kind: EntityKind, explicit_id: Any) -> str | None:
        if explicit_id is None:
            return new_entity_id(kind)
        entity_id = canonical_id(explicit_id)
        if not entity_id:
            logger.warning("Rejecting empty explicit %s id", kind.value)
            return None
        if self.kind_of(entity_id) is not None:
            logger.warning(
                "Rejecting explicit %s id %r: already in use", kind.value, entity_id
            )
            return None
        return entity_id

    # ==================== VISUAL HANDLES ====================

    def _new_group(self, name: str, parent_handle: Any) -> Any:
        handle = self.adapter.create_visual_group(name)
        try:
            self.adapter.attach_child(parent_handle, handle)
        except Exception:
            self.adapter.dispose_representation(handle)
            raise
        return handle

    def _release(self, handle: Any) -> None:
        if handle is None:
            return
        self.adapter.detach_child(handle)
        self.adapter.dispose_representation(handle)

    def _build_representation(self, panel: Panel, highlight: SelectionColor) -> Any:
        return self.adapter.build_panel_representation(
            panel.length,
            panel.width,
            panel.thickness,
            panel.position,
            panel.rotation,
            panel.name,
            highlight is not SelectionColor.NONE,
            highlight,
        )

    def _publish(
        self,
        event_type: EntityEventType,
        kind: EntityKind,
        entity_id: str,
        name: str,
        parent_id: str | None = None,
        previous_parent_id: str | None = None,
    ) -> None:
        self.events.publish(
            EntityEvent(
                event_type=event_type,
                kind=kind,
                entity_id=entity_id,
                name=name,
                parent_id=parent_id,
                previous_parent_id=previous_parent_id,
            )
        )

    # ==================== PROJECTS ====================

    def create_project(
        self,
        name: str | None = None,
        floors: Iterable[str | None] | None = None,
        explicit_id: Any = None,
    ) -> Project | None:
        """Create a project with at least one floor.

        Args:
            name: Project name. Defaults to "Project <n>".
            floors: Names of the floors to create; ``None`` entries are
                auto-named. When omitted or empty one default floor is made.
            explicit_id: Identifier to use instead of a generated one.

        Returns:
            The new project, or None if ``explicit_id`` is already in use.
        """
        project_id = self._allocate_id(EntityKind.PROJECT, explicit_id)
        if project_id is None:
            return None
        if name is None:
            name = _smallest_unused("Project", (p.name for p in self._projects.values()))

        handle = self._new_group(name, self.root_handle)
        project = Project(id=project_id, name=name, visual_handle=handle)
        self._projects[project_id] = project
        self._publish(EntityEventType.CREATED, EntityKind.PROJECT, project_id, name)

        for floor_name in list(floors or []) or [None]:
            self.create_floor(project_id, floor_name)
        return project

    def remove_project(self, project_id: Any) -> bool:
        """Remove a project and everything under it, leaf first."""
        project = self.get_project(project_id)
        if project is None:
            return False

        for floor_id in list(project.floors):
            self.remove_floor(floor_id)

        del self._projects[project.id]
        self._release(project.visual_handle)
        self._publish(EntityEventType.REMOVED, EntityKind.PROJECT, project.id, project.name)
        return True

    def rename_project(self, project_id: Any, new_name: str) -> bool:
        project = self.get_project(project_id)
        if project is None:
            return False
        self._rename(project, EntityKind.PROJECT, new_name, None)
        return True

    def get_project(self, project_id: Any) -> Project | None:
        return self._projects.get(canonical_id(project_id))

    def get_project_by_name(self, name: str) -> Project | None:
        return next((p for p in self._projects.values() if p.name == name), None)

    def get_all_projects(self) -> list[Project]:
        return list(self._projects.values())

    # ==================== FLOORS ====================

    def create_floor(
        self,
        project_id: Any = None,
        name: str | None = None,
        explicit_id: Any = None,
    ) -> Floor | None:
        """Create a floor inside a project, or standalone when no project is given.

        The first floor of a parent is named "Ground Floor"; later ones are
        "<n> Floor" with n the number of floors already there.

        Returns:
            The new floor, or None when the project does not exist or the
            explicit id is taken.
        """
        project: Project | None = None
        if project_id is not None:
            project = self.get_project(project_id)
            if project is None:
                logger.warning("Cannot create floor: project %r not found", project_id)
                return None

        floor_id = self._allocate_id(EntityKind.FLOOR, explicit_id)
        if floor_id is None:
            return None

        siblings = project.floors if project else self._root_floors
        if name is None:
            name = self.first_floor_name if not siblings else f"{len(siblings)} Floor"

        parent_handle = project.visual_handle if project else self.root_handle
        handle = self._new_group(name, parent_handle)
        floor = Floor(
            id=floor_id,
            name=name,
            project_id=project.id if project else None,
            visual_handle=handle,
        )
        self._floors[floor_id] = floor
        siblings.append(floor_id)
        if project:
            self._floor_owner[floor_id] = project.id
        self._publish(
            EntityEventType.CREATED, EntityKind.FLOOR, floor_id, name, floor.project_id
        )
        return floor

    def remove_floor(self, floor_id: Any) -> bool:
        """Remove a floor and all of its cabinets."""
        floor = self.get_floor(floor_id)
        if floor is None:
            return False

        for cabinet_id in list(floor.cabinets):
            self.remove_cabinet(cabinet_id)

        owner_id = self._floor_owner.pop(floor.id, None)
        siblings = self._projects[owner_id].floors if owner_id else self._root_floors
        siblings.remove(floor.id)
        del self._floors[floor.id]
        self._release(floor.visual_handle)
        self._publish(EntityEventType.REMOVED, EntityKind.FLOOR, floor.id, floor.name, owner_id)
        return True

    def rename_floor(self, floor_id: Any, new_name: str) -> bool:
        floor = self.get_floor(floor_id)
        if floor is None:
            return False
        self._rename(floor, EntityKind.FLOOR, new_name, floor.project_id)
        return True

    def get_floor(self, floor_id: Any) -> Floor | None:
        return self._floors.get(canonical_id(floor_id))

    def get_floor_by_name(self, name: str) -> Floor | None:
        return next((f for f in self._floors.values() if f.name == name), None)

    def get_all_floors(self, project_id: Any = None) -> list[Floor]:
        """All floors, or only those of one project (empty if unknown)."""
        if project_id is None:
            return list(self._floors.values())
        project = self.get_project(project_id)
        if project is None:
            return []
        return [self._floors[fid] for fid in project.floors]

    # ==================== CABINETS ====================

    def create_cabinet(
        self,
        floor_id: Any = None,
        name: str | None = None,
        explicit_id: Any = None,
    ) -> Cabinet | None:
        """Create an empty cabinet on a floor, or at scene root.

        Unnamed cabinets get "Cabinet <n>" with the smallest positive n not
        already used by a sibling.

        Returns:
            The new cabinet, or None when the floor does not exist or the
            explicit id is taken.
        """
        floor: Floor | None = None
        if floor_id is not None:
            floor = self.get_floor(floor_id)
            if floor is None:
                logger.warning("Cannot create cabinet: floor %r not found", floor_id)
                return None

        cabinet_id = self._allocate_id(EntityKind.CABINET, explicit_id)
        if cabinet_id is None:
            return None

        siblings = floor.cabinets if floor else self._root_cabinets
        if name is None:
            name = self._next_cabinet_name(siblings)

        parent_handle = floor.visual_handle if floor else self.root_handle
        handle = self._new_group(name, parent_handle)
        cabinet = Cabinet(id=cabinet_id, name=name, visual_handle=handle)
        self._cabinets[cabinet_id] = cabinet
        siblings.append(cabinet_id)
        if floor:
            self._cabinet_owner[cabinet_id] = floor.id
        self._publish(
            EntityEventType.CREATED,
            EntityKind.CABINET,
            cabinet_id,
            name,
            floor.id if floor else None,
        )
        return cabinet

    def _next_cabinet_name(self, siblings: list[str]) -> str:
        return _smallest_unused("Cabinet", (self._cabinets[c].name for c in siblings))

    def next_cabinet_name(self, floor_id: Any = None) -> str | None:
        """Default name the next cabinet on a floor (or at root) would get.

        Returns None when the floor does not exist.
        """
        if floor_id is None:
            return self._next_cabinet_name(self._root_cabinets)
        floor = self.get_floor(floor_id)
        return self._next_cabinet_name(floor.cabinets) if floor else None

    def remove_cabinet(self, cabinet_id: Any) -> bool:
        """Remove a cabinet, releasing each panel before the cabinet itself."""
        cabinet = self.get_cabinet(cabinet_id)
        if cabinet is None:
            return False

        for panel in list(cabinet.panels):
            self._discard_panel(cabinet, panel)

        owner_id = self._cabinet_owner.pop(cabinet.id, None)
        siblings = self._floors[owner_id].cabinets if owner_id else self._root_cabinets
        siblings.remove(cabinet.id)
        del self._cabinets[cabinet.id]
        self._release(cabinet.visual_handle)
        self._publish(
            EntityEventType.REMOVED, EntityKind.CABINET, cabinet.id, cabinet.name, owner_id
        )
        return True

    def rename_cabinet(self, cabinet_id: Any, new_name: str) -> bool:
        cabinet = self.get_cabinet(cabinet_id)
        if cabinet is None:
            return False
        self._rename(cabinet, EntityKind.CABINET, new_name, self._cabinet_owner.get(cabinet.id))
        return True

    def get_cabinet(self, cabinet_id: Any) -> Cabinet | None:
        return self._cabinets.get(canonical_id(cabinet_id))

    def get_cabinet_by_name(self, name: str) -> Cabinet | None:
        return next((c for c in self._cabinets.values() if c.name == name), None)

    def get_all_cabinets(self, floor_id: Any = None) -> list[Cabinet]:
        """All cabinets in creation order, or only those on one floor."""
        if floor_id is None:
            return list(self._cabinets.values())
        floor = self.get_floor(floor_id)
        if floor is None:
            return []
        return [self._cabinets[cid] for cid in floor.cabinets]

    def get_cabinet_panels(self, cabinet_id: Any) -> list[Panel]:
        cabinet = self.get_cabinet(cabinet_id)
        return list(cabinet.panels) if cabinet else []

    @property
    def cabinet_count(self) -> int:
        return len(self._cabinets)

    # ==================== PANELS ====================

    def add_panel(
        self,
        cabinet_id: Any,
        length: float,
        width: float,
        thickness: float,
        position: Position | None = None,
        rotation: Rotation | None = None,
        name: str | None = None,
        explicit_id: Any = None,
    ) -> Panel | None:
        """Create a panel under a cabinet.

        Returns:
            The new panel, or None when the cabinet does not exist or the
            explicit id is taken. Nothing is created in either case.
        """
        cabinet = self.get_cabinet(cabinet_id)
        if cabinet is None:
            logger.warning("Cannot add panel: cabinet %r not found", cabinet_id)
            return None

        panel_id = self._allocate_id(EntityKind.PANEL, explicit_id)
        if panel_id is None:
            return None
        if name is None:
            name = _smallest_unused("Panel", (p.name for p in cabinet.panels))

        panel = Panel(
            id=panel_id,
            name=name,
            length=float(length),
            width=float(width),
            thickness=float(thickness),
            position=position or Position(),
            rotation=rotation or Rotation(),
        )

        group = self.adapter.create_visual_group(name)
        representation = None
        try:
            representation = self._build_representation(panel, SelectionColor.NONE)
            self.adapter.attach_child(group, representation)
            self.adapter.attach_child(cabinet.visual_handle, group)
        except Exception:
            logger.error("Adapter failed while building panel %r in %s", name, cabinet.id)
            self._release(representation)
            self._release(group)
            raise

        panel.visual_handle = group
        panel.representation = representation
        cabinet.panels.append(panel)
        self._panels[panel_id] = panel
        self._panel_owner[panel_id] = cabinet.id
        self._publish(EntityEventType.CREATED, EntityKind.PANEL, panel_id, name, cabinet.id)
        return panel

    def add_panel_spec(
        self, cabinet_id: Any, spec: PanelSpec, explicit_id: Any = None
    ) -> Panel | None:
        """Materialize a rules-engine panel spec under a cabinet."""
        return self.add_panel(
            cabinet_id,
            spec.length,
            spec.width,
            spec.thickness,
            position=spec.position,
            rotation=spec.rotation,
            name=spec.name,
            explicit_id=explicit_id,
        )

    def remove_panel(self, panel_id: Any) -> bool:
        panel = self.get_panel(panel_id)
        if panel is None:
            return False
        cabinet = self._cabinets[self._panel_owner[panel.id]]
        self._discard_panel(cabinet, panel)
        return True

    def _discard_panel(self, cabinet: Cabinet, panel: Panel) -> None:
        del cabinet.panels[cabinet.index_of(panel.id)]
        del self._panels[panel.id]
        del self._panel_owner[panel.id]
        self._highlight.pop(panel.id, None)

        self._release(panel.representation)
        self._release(panel.visual_handle)
        panel.representation = None
        panel.visual_handle = None
        self._publish(EntityEventType.REMOVED, EntityKind.PANEL, panel.id, panel.name, cabinet.id)

    def rename_panel(self, panel_id: Any, new_name: str) -> bool:
        panel = self.get_panel(panel_id)
        if panel is None:
            return False
        self._rename(panel, EntityKind.PANEL, new_name, self._panel_owner[panel.id])
        return True

    def update_panel(
        self,
        panel_id: Any,
        *,
        name: str | None = None,
        length: float | None = None,
        width: float | None = None,
        thickness: float | None = None,
        position: Position | None = None,
        rotation: Rotation | None = None,
    ) -> bool:
        """Edit a panel's geometry and rebuild its representation.

        The new representation is built before anything is committed; if
        the adapter fails the panel keeps its previous geometry.
        """
        panel = self.get_panel(panel_id)
        if panel is None:
            return False

        changes: dict[str, Any] = {
            key: value
            for key, value in (
                ("name", name),
                ("length", length),
                ("width", width),
                ("thickness", thickness),
                ("position", position),
                ("rotation", rotation),
            )
            if value is not None
        }
        if not changes:
            return True

        updated = dataclasses.replace(panel, **changes)
        self._swap_representation(panel, updated)
        for key, value in changes.items():
            setattr(panel, key, value)

        if name is not None:
            self.adapter.set_label(panel.visual_handle, name)
            self._publish(
                EntityEventType.RENAMED,
                EntityKind.PANEL,
                panel.id,
                name,
                self._panel_owner[panel.id],
            )
        return True

    def refresh_panel(self, panel_id: Any, highlight: SelectionColor) -> bool:
        """Rebuild one panel's representation with the given highlight."""
        panel = self.get_panel(panel_id)
        if panel is None:
            return False
        self._swap_representation(panel, panel, highlight)
        if highlight is SelectionColor.NONE:
            self._highlight.pop(panel.id, None)
        else:
            self._highlight[panel.id] = highlight
        return True

    def highlight_of(self, panel_id: Any) -> SelectionColor:
        """Highlight last applied to a panel's representation."""
        return self._highlight.get(canonical_id(panel_id), SelectionColor.NONE)

    def _swap_representation(
        self, panel: Panel, geometry: Panel, highlight: SelectionColor | None = None
    ) -> None:
        if highlight is None:
            highlight = self._highlight.get(panel.id, SelectionColor.NONE)
        new_representation = self._build_representation(geometry, highlight)
        try:
            self.adapter.attach_child(panel.visual_handle, new_representation)
        except Exception:
            self.adapter.dispose_representation(new_representation)
            raise
        self._release(panel.representation)
        panel.representation = new_representation

    def move_panel(self, panel_id: Any, target_cabinet_id: Any) -> bool:
        """Move a panel to another cabinet.

        The panel is detached from its source before it is attached to the
        target; on an unknown panel or target nothing changes.
        """
        panel = self.get_panel(panel_id)
        target = self.get_cabinet(target_cabinet_id)
        if panel is None or target is None:
            return False

        source = self._cabinets[self._panel_owner[panel.id]]
        if source is target:
            return True

        self.adapter.detach_child(panel.visual_handle)
        try:
            self.adapter.attach_child(target.visual_handle, panel.visual_handle)
        except Exception:
            self.adapter.attach_child(source.visual_handle, panel.visual_handle)
            raise

        del source.panels[source.index_of(panel.id)]
        target.panels.append(panel)
        self._panel_owner[panel.id] = target.id
        self._publish(
            EntityEventType.MOVED,
            EntityKind.PANEL,
            panel.id,
            panel.name,
            target.id,
            source.id,
        )
        return True

    def get_panel(self, panel_id: Any) -> Panel | None:
        return self._panels.get(canonical_id(panel_id))

    def get_panel_by_name(self, name: str) -> Panel | None:
        return next((p for p in self._panels.values() if p.name == name), None)

    def get_all_panels(self) -> list[Panel]:
        return list(self._panels.values())

    @property
    def panel_count(self) -> int:
        return len(self._panels)

    # ==================== OWNER RESOLUTION ====================

    def owner_cabinet_of_panel(self, panel_id: Any) -> Cabinet | None:
        owner_id = self._panel_owner.get(canonical_id(panel_id))
        return self._cabinets[owner_id] if owner_id else None

    def owner_floor_of_cabinet(self, cabinet_id: Any) -> Floor | None:
        owner_id = self._cabinet_owner.get(canonical_id(cabinet_id))
        return self._floors[owner_id] if owner_id else None

    def owner_project_of_floor(self, floor_id: Any) -> Project | None:
        owner_id = self._floor_owner.get(canonical_id(floor_id))
        return self._projects[owner_id] if owner_id else None

    def find_panel_cabinet(self, panel_id: Any) -> str | None:
        """Id of the cabinet owning a panel, or None."""
        return self._panel_owner.get(canonical_id(panel_id))

    # ==================== WHOLE-STORE OPERATIONS ====================

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        """Switch the adapter's view mode and rebuild every panel.

        Returns:
            False when the adapter is already in that mode.
        """
        mode = ViewMode(mode)
        if self.adapter.view_mode == mode:
            return False
        self.adapter.view_mode = mode
        for panel in self._panels.values():
            self._swap_representation(panel, panel)
        return True

    def clear_all(self) -> None:
        """Remove every project, standalone floor and root-level cabinet."""
        for project_id in list(self._projects):
            self.remove_project(project_id)
        for floor_id in list(self._root_floors):
            self.remove_floor(floor_id)
        for cabinet_id in list(self._root_cabinets):
            self.remove_cabinet(cabinet_id)

    def _rename(
        self,
        entity: Project | Floor | Cabinet | Panel,
        kind: EntityKind,
        new_name: str,
        parent_id: str | None,
    ) -> None:
        entity.name = new_name
        self.adapter.set_label(entity.visual_handle, new_name)
        self._publish(EntityEventType.RENAMED, kind, entity.id, new_name, parent_id)
