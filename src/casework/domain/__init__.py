"""Domain layer - hierarchy, selection and construction rules."""

from .entities import Cabinet, Floor, Panel, Project
from .events import EntityEvent, EntityEventType, EventBus
from .hierarchy import DEFAULT_FIRST_FLOOR_NAME, HierarchyStore
from .rules import PANEL_ORDER, derive_panels
from .selection import SelectionEngine, SelectionMode, classify_pick
from .value_objects import (
    BackType,
    CabinetParameters,
    ConstructionOptions,
    EntityKind,
    PanelSpec,
    Position,
    Rotation,
    SelectionColor,
    TopStyle,
    ViewMode,
    canonical_id,
    new_entity_id,
)

__all__ = [
    "BackType",
    "Cabinet",
    "CabinetParameters",
    "ConstructionOptions",
    "DEFAULT_FIRST_FLOOR_NAME",
    "EntityEvent",
    "EntityEventType",
    "EntityKind",
    "EventBus",
    "Floor",
    "HierarchyStore",
    "PANEL_ORDER",
    "Panel",
    "PanelSpec",
    "Position",
    "Project",
    "Rotation",
    "SelectionColor",
    "SelectionEngine",
    "SelectionMode",
    "TopStyle",
    "ViewMode",
    "canonical_id",
    "classify_pick",
    "derive_panels",
    "new_entity_id",
]
