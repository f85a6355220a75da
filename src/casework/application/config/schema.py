"""Pydantic models for the designer settings file."""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from casework.domain.value_objects import SelectionColor, ViewMode

_HEX_COLOUR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class PaletteConfig(BaseModel):
    """Display colours for each highlight state.

    Attributes:
        single: Colour of individually selected panels.
        group: Colour of panels selected with their whole cabinet.
        unselected: Colour of panels that are not selected.
    """

    model_config = ConfigDict(extra="forbid")

    single: str = "#87CEFA"
    group: str = "#90EE90"
    unselected: str = "#FFFFFF"

    @field_validator("single", "group", "unselected")
    @classmethod
    def validate_colour(cls, v: str) -> str:
        """Colours are ``#RRGGBB`` hex strings, stored upper case."""
        if not _HEX_COLOUR.match(v):
            raise ValueError(f"Invalid colour '{v}'. Use #RRGGBB hex notation.")
        return v.upper()

    def as_mapping(self) -> dict[SelectionColor, str]:
        return {
            SelectionColor.NONE: self.unselected,
            SelectionColor.SINGLE: self.single,
            SelectionColor.GROUP: self.group,
        }


class DesignerSettings(BaseModel):
    """Root settings model.

    Attributes:
        view_mode: Initial render style of the scene.
        default_floor_name: Name given to the first floor of a new project.
        palette: Highlight colours.
        template_dir: Folder of template documents for the directory source.
        template_url: Base URL of a remote template service.
        http_timeout: Timeout in seconds for remote template requests.
    """

    model_config = ConfigDict(extra="forbid")

    view_mode: ViewMode = ViewMode.WIRE
    default_floor_name: str = Field(default="Ground Floor", min_length=1)
    palette: PaletteConfig = Field(default_factory=PaletteConfig)
    template_dir: str | None = None
    template_url: str | None = None
    http_timeout: float = Field(
        default=10.0,
        gt=0,
        le=300,
        description="Remote template request timeout in seconds",
    )

    @field_validator("template_url")
    @classmethod
    def validate_template_url(cls, v: str | None) -> str | None:
        """Must be an HTTP or HTTPS URL; the trailing slash is dropped."""
        if v is None:
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"Invalid template URL '{v}'. URL must start with http:// or https://"
            )
        return v.rstrip("/")
