"""Panel selection state machine.

Two overlapping sets are tracked:

- ``selected``: panels picked explicitly, one at a time or as part of a
  cabinet pick.
- ``group_selected``: panels selected because their whole cabinet was.

A panel may be in both. For colouring, group membership always wins.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from .events import EntityEvent, EntityEventType
from .value_objects import EntityKind, SelectionColor, canonical_id

if TYPE_CHECKING:
    from .hierarchy import HierarchyStore

logger = logging.getLogger(__name__)

__all__ = ["SelectionEngine", "SelectionMode", "classify_pick"]


class SelectionMode(str, Enum):
    """What a pointer pick does, decided by its modifier keys.

    Attributes:
        CABINET: Plain click. Replace selection with the whole cabinet.
        PANEL: Shift-click. Replace selection with the single panel.
        ADD_CABINET: Ctrl-click. Add the whole cabinet to the selection.
        ADD_PANEL: Shift+ctrl-click. Add the single panel.
        CLEAR: Click on empty space. Deselect everything.
    """

    CABINET = "cabinet"
    PANEL = "panel"
    ADD_CABINET = "add_cabinet"
    ADD_PANEL = "add_panel"
    CLEAR = "clear"


def classify_pick(panel_id: Any, shift: bool = False, ctrl: bool = False) -> SelectionMode:
    """Map a pick (resolved panel id plus modifiers) to a selection mode."""
    if panel_id is None:
        return SelectionMode.CLEAR
    if shift and ctrl:
        return SelectionMode.ADD_PANEL
    if ctrl:
        return SelectionMode.ADD_CABINET
    if shift:
        return SelectionMode.PANEL
    return SelectionMode.CABINET


class SelectionEngine:
    """Tracks selected panels and asks the store to recolour them.

    The engine subscribes to the store's events so that removing a panel,
    or a cabinet/floor/project above it, drops the panel from both sets.
    """

    def __init__(self, store: HierarchyStore) -> None:
        self.store = store
        # dicts used as insertion-ordered sets
        self._selected: dict[str, None] = {}
        self._group_selected: dict[str, None] = {}
        self._unsubscribe = store.events.subscribe(self._on_entity_event)

    def close(self) -> None:
        """Stop listening to the store."""
        self._unsubscribe()

    # ==================== PICK DISPATCH ====================

    def handle_pick(
        self, panel_id: Any, shift: bool = False, ctrl: bool = False
    ) -> SelectionMode | None:
        """Apply one pointer pick.

        Args:
            panel_id: Panel resolved under the pointer, or None for empty space.
            shift: Shift modifier held.
            ctrl: Ctrl (or Cmd) modifier held.

        Returns:
            The mode applied, or None when ``panel_id`` names no panel.
        """
        mode = classify_pick(panel_id, shift, ctrl)
        if mode is SelectionMode.CLEAR:
            self.deselect_all()
            return mode

        if self.store.get_panel(panel_id) is None:
            logger.debug("Ignoring pick on unknown panel %r", panel_id)
            return None

        if mode is SelectionMode.CABINET:
            self.select_cabinet_of(panel_id)
        elif mode is SelectionMode.ADD_CABINET:
            self.select_cabinet_of(panel_id, additive=True)
        elif mode is SelectionMode.PANEL:
            self.select_panel(panel_id)
        else:
            self.select_panel(panel_id, additive=True)
        return mode

    # ==================== SELECTION OPERATIONS ====================

    def select_panel(self, panel_id: Any, additive: bool = False) -> bool:
        """Select one panel, replacing the selection unless ``additive``."""
        panel = self.store.get_panel(panel_id)
        if panel is None:
            return False
        if not additive:
            self.deselect_all()
        self._selected[panel.id] = None
        self._refresh(panel.id)
        return True

    def select_cabinet_of(self, panel_id: Any, additive: bool = False) -> bool:
        """Group-select every panel of the cabinet owning ``panel_id``."""
        cabinet = self.store.owner_cabinet_of_panel(panel_id)
        if cabinet is None:
            return False
        return self.select_cabinet(cabinet.id, additive=additive)

    def select_cabinet(self, cabinet_id: Any, additive: bool = False) -> bool:
        """Group-select every panel of a cabinet, e.g. from the navigation list."""
        cabinet = self.store.get_cabinet(cabinet_id)
        if cabinet is None:
            return False
        if not additive:
            self.deselect_all()
        for panel_id in cabinet.panel_ids:
            self._selected[panel_id] = None
            self._group_selected[panel_id] = None
            self._refresh(panel_id)
        return True

    def deselect_all(self) -> bool:
        """Restore the unselected look of every selected panel and clear both sets.

        Returns:
            False when nothing was selected (no adapter work is done).
        """
        if not self._selected and not self._group_selected:
            return False
        affected = list(dict.fromkeys([*self._selected, *self._group_selected]))
        for panel_id in affected:
            self.store.refresh_panel(panel_id, SelectionColor.NONE)
        self._selected.clear()
        self._group_selected.clear()
        return True

    # ==================== QUERIES ====================

    def highlight_of(self, panel_id: Any) -> SelectionColor:
        """Colour a panel should carry: group beats single beats none."""
        key = canonical_id(panel_id)
        if key in self._group_selected:
            return SelectionColor.GROUP
        if key in self._selected:
            return SelectionColor.SINGLE
        return SelectionColor.NONE

    def is_selected(self, panel_id: Any) -> bool:
        key = canonical_id(panel_id)
        return key in self._selected or key in self._group_selected

    def get_selected_panel_ids(self) -> list[str]:
        return list(self._selected)

    def get_group_selected_panel_ids(self) -> list[str]:
        return list(self._group_selected)

    def get_selected_cabinet_ids(self) -> list[str]:
        """Cabinets selected as a group, in selection order."""
        owners = (self.store.find_panel_cabinet(pid) for pid in self._group_selected)
        return list(dict.fromkeys(owner for owner in owners if owner is not None))

    # ==================== INTERNALS ====================

    def _refresh(self, panel_id: str) -> None:
        self.store.refresh_panel(panel_id, self.highlight_of(panel_id))

    def _on_entity_event(self, event: EntityEvent) -> None:
        if event.kind is EntityKind.PANEL and event.event_type is EntityEventType.REMOVED:
            self._selected.pop(event.entity_id, None)
            self._group_selected.pop(event.entity_id, None)
