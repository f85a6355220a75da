"""Design session: the glue between input, the domain and template sources.

A session owns one hierarchy store and the selection engine attached to
it. It turns pick events into selection changes, loads templates from a
template source, and offers the bulk operations the UI needs (delete the
selection, export, snapshot).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from casework.application.templates.materializer import (
    MaterializationResult,
    TemplateExporter,
    TemplateMaterializer,
)
from casework.application.templates.schema import parse_template_document
from casework.domain.entities import Cabinet, Project
from casework.domain.hierarchy import HierarchyStore
from casework.domain.selection import SelectionEngine, SelectionMode
from casework.domain.value_objects import ConstructionOptions, ViewMode

if TYPE_CHECKING:
    from casework.contracts.protocols import TemplateSourceProtocol

logger = logging.getLogger(__name__)

__all__ = ["DesignSession", "PickEvent"]


@dataclass(frozen=True)
class PickEvent:
    """A resolved pointer pick.

    Attributes:
        panel_id: Panel under the pointer, or None for empty space.
        shift: Shift modifier held.
        ctrl: Ctrl (or Cmd) modifier held.
    """

    panel_id: str | None = None
    shift: bool = False
    ctrl: bool = False


class DesignSession:
    """One user's editing session over a single hierarchy store.

    Example:
        session = DesignSession(HierarchyStore(SceneGraphAdapter()),
                                template_source=BundledTemplateSource())
        session.bootstrap()
        result = await session.load_template("kitchen-run")
        session.handle_pick(PickEvent(result.cabinets[0].panels[0].id))
    """

    def __init__(
        self,
        store: HierarchyStore,
        template_source: TemplateSourceProtocol | None = None,
    ) -> None:
        self.store = store
        self.selection = SelectionEngine(store)
        self.template_source = template_source
        self.materializer = TemplateMaterializer(store)
        self.exporter = TemplateExporter(store)
        self.active_floor_id: str | None = None

    # ==================== LIFECYCLE ====================

    def bootstrap(self, project_name: str | None = None) -> Project:
        """Create the initial project with its default floor and make that floor active."""
        project = self.store.create_project(project_name)
        assert project is not None
        self.active_floor_id = project.floors[0]
        return project

    def close(self) -> None:
        self.selection.close()

    def clear(self) -> None:
        """Deselect and remove everything in the store."""
        self.selection.deselect_all()
        self.store.clear_all()
        self.active_floor_id = None

    def _target_floor(self, floor_id: Any) -> Any:
        if floor_id is not None:
            return floor_id
        if self.active_floor_id is not None and self.store.get_floor(self.active_floor_id):
            return self.active_floor_id
        return None

    # ==================== INPUT ====================

    def handle_pick(self, event: PickEvent) -> SelectionMode | None:
        return self.selection.handle_pick(event.panel_id, event.shift, event.ctrl)

    def set_view_mode(self, mode: ViewMode | str) -> bool:
        return self.store.set_view_mode(mode)

    # ==================== CABINETS ====================

    def add_cabinet(
        self,
        width: float,
        height: float,
        depth: float,
        thickness: float,
        options: ConstructionOptions | Mapping[str, Any] | None = None,
        name: str | None = None,
        floor_id: Any = None,
    ) -> Cabinet | None:
        """Create a cabinet from overall dimensions, deriving its panels.

        Returns:
            The cabinet, or None when the dimensions are rejected or the
            floor does not exist.
        """
        target = self._target_floor(floor_id)
        if name is None:
            name = self.store.next_cabinet_name(target)
            if name is None:
                logger.warning("Cannot add cabinet: floor %r not found", target)
                return None
        entry = {
            "name": name,
            "width": width,
            "height": height,
            "depth": depth,
            "thickness": thickness,
            "options": ConstructionOptions.from_mapping(options).to_dict(),
        }
        result = self.materializer.materialize({"cabinets": [entry]}, floor_id=target)
        return result.cabinets[0] if result.cabinets else None

    def remove_selection(self) -> int:
        """Remove every group-selected cabinet and every individually selected panel.

        Returns:
            Number of entities removed.
        """
        cabinet_ids = self.selection.get_selected_cabinet_ids()
        panel_ids = self.selection.get_selected_panel_ids()
        self.selection.deselect_all()

        removed = 0
        for cabinet_id in cabinet_ids:
            removed += self.store.remove_cabinet(cabinet_id)
        for panel_id in panel_ids:
            removed += self.store.remove_panel(panel_id)
        logger.info("Removed %d selected entities", removed)
        return removed

    # ==================== TEMPLATES ====================

    def _require_source(self) -> TemplateSourceProtocol:
        if self.template_source is None:
            raise RuntimeError("No template source configured for this session")
        return self.template_source

    async def list_templates(self) -> list[str]:
        return await self._require_source().list_templates()

    async def load_template(self, name: str, floor_id: Any = None) -> MaterializationResult:
        """Fetch a template and materialize it onto a floor.

        The store is not touched until the document has been fetched and
        its envelope validated, so a failed fetch leaves it unchanged.

        Raises:
            TemplateNotFoundError: If the source has no such template.
            TemplateSourceError: If the source cannot be read.
            TemplateError: If the fetched document has no cabinets list.
        """
        document = await self._require_source().fetch_template(name)
        parsed = parse_template_document(document)
        logger.info("Loading template %s (%d entries)", name, len(parsed.cabinets))
        return self.materializer.materialize(parsed, floor_id=self._target_floor(floor_id))

    def load_document(self, document: Any, floor_id: Any = None) -> MaterializationResult:
        """Materialize a template document that is already in hand."""
        return self.materializer.materialize(document, floor_id=self._target_floor(floor_id))

    def export_template(self, cabinet_ids: Iterable[Any] | None = None) -> dict[str, Any]:
        return self.exporter.export(cabinet_ids)

    # ==================== SNAPSHOTS ====================

    def export_project(self, project_id: Any) -> dict[str, Any] | None:
        """Nested dict of a project, its floors, cabinets and panels."""
        project = self.store.get_project(project_id)
        if project is None:
            return None
        return {
            "id": project.id,
            "name": project.name,
            "floors": [self._floor_dict(floor_id) for floor_id in project.floors],
        }

    def _floor_dict(self, floor_id: str) -> dict[str, Any]:
        floor = self.store.get_floor(floor_id)
        assert floor is not None
        return {
            "id": floor.id,
            "name": floor.name,
            "cabinets": [cabinet.to_dict() for cabinet in self.store.get_all_cabinets(floor.id)],
        }

    def snapshot(self) -> dict[str, Any]:
        """Everything in the store, plus the current selection."""
        return {
            "projects": [
                self.export_project(project.id) for project in self.store.get_all_projects()
            ],
            "floors": [
                self._floor_dict(floor.id)
                for floor in self.store.get_all_floors()
                if floor.project_id is None
            ],
            "cabinets": [
                cabinet.to_dict()
                for cabinet in self.store.get_all_cabinets()
                if self.store.owner_floor_of_cabinet(cabinet.id) is None
            ],
            "selection": {
                "selected": self.selection.get_selected_panel_ids(),
                "group_selected": self.selection.get_group_selected_panel_ids(),
                "cabinets": self.selection.get_selected_cabinet_ids(),
            },
        }
