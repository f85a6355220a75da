"""Value objects for the casework domain.

Immutable geometry types, construction options and the small enums shared
by the hierarchy store, the selection engine and the rules engine.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class EntityKind(str, Enum):
    """Kinds of entity held by the hierarchy store."""

    PROJECT = "project"
    FLOOR = "floor"
    CABINET = "cabinet"
    PANEL = "panel"

    @property
    def id_prefix(self) -> str:
        """Prefix used for generated identifiers of this kind."""
        return _ID_PREFIXES[self]


_ID_PREFIXES: dict[EntityKind, str] = {
    EntityKind.PROJECT: "proj",
    EntityKind.FLOOR: "floor",
    EntityKind.CABINET: "cab",
    EntityKind.PANEL: "panel",
}


def new_entity_id(kind: EntityKind) -> str:
    """Generate a fresh identifier such as ``cab-1b4e...``."""
    return f"{kind.id_prefix}-{uuid.uuid4()}"


def canonical_id(value: Any) -> str:
    """Normalize an identifier to its canonical string form.

    Template documents may carry numeric ids; lookups always compare the
    string form so ``7`` and ``"7"`` name the same entity.
    """
    return str(value).strip()


class TopStyle(str, Enum):
    """How the top panel meets the side panels.

    Attributes:
        BETWEEN_SIDES: Top is inset between the sides (length W - 2t).
        FLUSH_WITH_SIDES: Top spans the full cabinet width (length W).
    """

    BETWEEN_SIDES = "betweenSides"
    FLUSH_WITH_SIDES = "flushWithSides"


class BackType(str, Enum):
    """How the back panel is fixed to the carcass.

    Attributes:
        SCREWED: Full width x height back screwed flush at the rear plane.
        GROOVE: Back inset by one thickness on every edge, sitting in a groove.
    """

    SCREWED = "screwed"
    GROOVE = "groove"


class SelectionColor(str, Enum):
    """Highlight requested for a panel representation."""

    NONE = "none"
    SINGLE = "single"
    GROUP = "group"


class ViewMode(str, Enum):
    """Global render style used by the geometry adapter."""

    WIRE = "wire"
    SOLID = "solid"


@dataclass(frozen=True)
class Position:
    """Panel centre in cabinet-local coordinates.

    Unlike cut-list positions these may be negative: panels can be dragged
    anywhere in the scene.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Position:
        """Build from a ``{"x", "y", "z"}`` mapping, missing keys default to 0."""
        if not data:
            return cls()
        return cls(
            x=float(data.get("x", 0.0)),
            y=float(data.get("y", 0.0)),
            z=float(data.get("z", 0.0)),
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class Rotation:
    """Euler rotation in degrees, applied in X, Y, Z order."""

    rx: float = 0.0
    ry: float = 0.0
    rz: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> Rotation:
        """Build from a ``{"rx", "ry", "rz"}`` mapping, missing keys default to 0."""
        if not data:
            return cls()
        return cls(
            rx=float(data.get("rx", 0.0)),
            ry=float(data.get("ry", 0.0)),
            rz=float(data.get("rz", 0.0)),
        )

    def to_dict(self) -> dict[str, float]:
        return {"rx": self.rx, "ry": self.ry, "rz": self.rz}


# camelCase keys are the template document spelling; snake_case is accepted
# for Python callers.
_OPTION_KEYS: dict[str, tuple[str, ...]] = {
    "top_style": ("topStyle", "top_style"),
    "back_type": ("backType", "back_type"),
}


def _coerce_enum(enum_cls: type[Enum], raw: Any, default: Enum) -> Any:
    if raw is None:
        return default
    if isinstance(raw, enum_cls):
        return raw
    try:
        return enum_cls(raw)
    except (ValueError, TypeError):
        logger.warning(
            "Ignoring unrecognized %s value %r, using %r",
            enum_cls.__name__,
            raw,
            default.value,
        )
        return default


@dataclass(frozen=True)
class ConstructionOptions:
    """Closed set of construction-method options for the rules engine.

    Every recognized key is listed here with its default. Anything else in
    an incoming options bag is dropped.
    """

    top_style: TopStyle = TopStyle.BETWEEN_SIDES
    back_type: BackType = BackType.SCREWED

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> ConstructionOptions:
        """Build options from a loosely-typed mapping. Never raises.

        Args:
            options: Mapping with ``topStyle``/``backType`` (or snake_case)
                keys. ``None`` or a non-mapping yields the defaults.

        Returns:
            ConstructionOptions with unrecognized values replaced by defaults.
        """
        if isinstance(options, ConstructionOptions):
            return options
        if not isinstance(options, Mapping):
            return cls()

        def lookup(attr: str) -> Any:
            for key in _OPTION_KEYS[attr]:
                if key in options:
                    return options[key]
            return None

        return cls(
            top_style=_coerce_enum(TopStyle, lookup("top_style"), TopStyle.BETWEEN_SIDES),
            back_type=_coerce_enum(BackType, lookup("back_type"), BackType.SCREWED),
        )

    def to_dict(self) -> dict[str, str]:
        """Template-document form of the options."""
        return {"backType": self.back_type.value, "topStyle": self.top_style.value}


@dataclass(frozen=True)
class PanelSpec:
    """Geometry of one panel, produced before any id or handle exists."""

    name: str
    length: float
    width: float
    thickness: float
    position: Position = field(default_factory=Position)
    rotation: Rotation = field(default_factory=Rotation)


@dataclass(frozen=True)
class CabinetParameters:
    """The high-level parameters a cabinet's panels were derived from."""

    width: float
    height: float
    depth: float
    thickness: float
    options: ConstructionOptions = field(default_factory=ConstructionOptions)

    def to_template_entry(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "depth": self.depth,
            "thickness": self.thickness,
            "options": self.options.to_dict(),
        }
