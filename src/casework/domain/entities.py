"""Domain entities for the project / floor / cabinet / panel hierarchy."""

from dataclasses import dataclass, field
from typing import Any

from .value_objects import CabinetParameters, PanelSpec, Position, Rotation


@dataclass
class Panel:
    """A single board owned by exactly one cabinet.

    Attributes:
        id: Globally unique, immutable identifier.
        name: Display name (e.g. "Left Side").
        length: Size along the panel's local X axis.
        width: Size along the panel's local Y axis.
        thickness: Size along the panel's local Z axis.
        position: Centre of the panel in cabinet-local coordinates.
        rotation: Euler rotation in degrees.
        visual_handle: Adapter group standing for this panel in the scene.
        representation: Adapter geometry currently hung under the group.
    """

    id: str
    name: str
    length: float
    width: float
    thickness: float
    position: Position = field(default_factory=Position)
    rotation: Rotation = field(default_factory=Rotation)
    visual_handle: Any = field(default=None, repr=False, compare=False)
    representation: Any = field(default=None, repr=False, compare=False)

    def to_spec(self) -> PanelSpec:
        """Geometry of this panel without identity."""
        return PanelSpec(
            name=self.name,
            length=self.length,
            width=self.width,
            thickness=self.thickness,
            position=self.position,
            rotation=self.rotation,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "length": self.length,
            "width": self.width,
            "thickness": self.thickness,
            "position": self.position.to_dict(),
            "rotation": self.rotation.to_dict(),
        }


@dataclass
class Cabinet:
    """A cabinet and its ordered panels.

    ``parameters`` is set when the panels were derived by the rules engine,
    which is what lets the cabinet be written back out as a template entry.
    """

    id: str
    name: str
    panels: list[Panel] = field(default_factory=list)
    visual_handle: Any = field(default=None, repr=False, compare=False)
    parameters: CabinetParameters | None = None

    @property
    def panel_ids(self) -> list[str]:
        return [panel.id for panel in self.panels]

    def index_of(self, panel_id: str) -> int:
        """Position of a panel in this cabinet.

        Raises:
            ValueError: If the panel is not in this cabinet.
        """
        for index, panel in enumerate(self.panels):
            if panel.id == panel_id:
                return index
        raise ValueError(f"panel {panel_id!r} is not in cabinet {self.id!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "parameters": self.parameters.to_template_entry() if self.parameters else None,
            "panels": [panel.to_dict() for panel in self.panels],
        }


@dataclass
class Floor:
    """A floor of a project holding ordered cabinet ids."""

    id: str
    name: str
    project_id: str | None = None
    cabinets: list[str] = field(default_factory=list)
    visual_handle: Any = field(default=None, repr=False, compare=False)


@dataclass
class Project:
    """Top of the hierarchy, holding ordered floor ids."""

    id: str
    name: str
    floors: list[str] = field(default_factory=list)
    visual_handle: Any = field(default=None, repr=False, compare=False)
