"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from casework.application.templates import MaterializationResult
from casework.domain.entities import Cabinet, Panel
from casework.domain.selection import SelectionEngine, SelectionMode
from casework.domain.value_objects import PanelSpec, ViewMode


class PanelSchema(BaseModel):
    """Panel geometry, with its id once materialized."""

    id: str | None = Field(default=None, description="Panel id (absent for derived specs)")
    name: str
    length: float
    width: float
    thickness: float
    position: dict[str, float]
    rotation: dict[str, float]

    @classmethod
    def from_panel(cls, panel: Panel | PanelSpec) -> "PanelSchema":
        return cls(
            id=getattr(panel, "id", None),
            name=panel.name,
            length=panel.length,
            width=panel.width,
            thickness=panel.thickness,
            position=panel.position.to_dict(),
            rotation=panel.rotation.to_dict(),
        )


class CabinetSchema(BaseModel):
    """Cabinet with its panels."""

    id: str
    name: str
    floor_id: str | None = None
    parameters: dict[str, Any] | None = Field(
        default=None, description="Dimensions and options the panels were derived from"
    )
    panels: list[PanelSchema] = Field(default_factory=list)

    @classmethod
    def from_cabinet(cls, cabinet: Cabinet, floor_id: str | None = None) -> "CabinetSchema":
        return cls(
            id=cabinet.id,
            name=cabinet.name,
            floor_id=floor_id,
            parameters=cabinet.parameters.to_template_entry() if cabinet.parameters else None,
            panels=[PanelSchema.from_panel(panel) for panel in cabinet.panels],
        )


class CabinetListSchema(BaseModel):
    cabinets: list[CabinetSchema]


class DeriveResponseSchema(BaseModel):
    """Panels derived from cabinet dimensions."""

    panels: list[PanelSchema]


class SkippedEntrySchema(BaseModel):
    index: int
    name: str | None
    reason: str


class MaterializationSchema(BaseModel):
    """Outcome of loading a template document."""

    cabinets: list[CabinetSchema]
    skipped: list[SkippedEntrySchema] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: MaterializationResult) -> "MaterializationSchema":
        return cls(
            cabinets=[CabinetSchema.from_cabinet(c) for c in result.cabinets],
            skipped=[
                SkippedEntrySchema(index=s.index, name=s.name, reason=s.reason)
                for s in result.skipped
            ],
        )


class SelectionSchema(BaseModel):
    """Current selection state."""

    mode: SelectionMode | None = Field(
        default=None, description="Mode applied by the last pick, null if it was ignored"
    )
    selected: list[str]
    group_selected: list[str]
    cabinets: list[str]

    @classmethod
    def from_engine(
        cls, engine: SelectionEngine, mode: SelectionMode | None = None
    ) -> "SelectionSchema":
        return cls(
            mode=mode,
            selected=engine.get_selected_panel_ids(),
            group_selected=engine.get_group_selected_panel_ids(),
            cabinets=engine.get_selected_cabinet_ids(),
        )


class RemovedSchema(BaseModel):
    removed: int


class ViewModeSchema(BaseModel):
    view_mode: ViewMode
    changed: bool


class TemplateListItemSchema(BaseModel):
    """Template list item."""

    name: str = Field(..., description="Template name")
    description: str = Field(..., description="Template description")


class TemplateListSchema(BaseModel):
    """Response for listing templates."""

    templates: list[TemplateListItemSchema] = Field(..., description="Available templates")


class TemplateContentSchema(BaseModel):
    """Response for getting template content."""

    name: str = Field(..., description="Template name")
    description: str = Field(..., description="Template description")
    content: dict[str, Any] = Field(..., description="Template document JSON")


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error category")
    details: Any = Field(default=None, description="Additional error details")
