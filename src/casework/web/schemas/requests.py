"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from casework.domain.value_objects import BackType, TopStyle, ViewMode


class OptionsSchema(BaseModel):
    """Construction options."""

    top_style: TopStyle = Field(default=TopStyle.BETWEEN_SIDES, description="How the top meets the sides")
    back_type: BackType = Field(default=BackType.SCREWED, description="How the back is fixed")


class DimensionsRequest(BaseModel):
    """Overall cabinet dimensions."""

    width: float = Field(..., gt=0, description="Overall width")
    height: float = Field(..., gt=0, description="Overall height")
    depth: float = Field(..., gt=0, description="Overall depth")
    thickness: float = Field(..., gt=0, description="Board thickness")
    options: OptionsSchema = Field(default_factory=OptionsSchema)

    @model_validator(mode="after")
    def check_thickness(self) -> "DimensionsRequest":
        if 2 * self.thickness >= self.width or 2 * self.thickness >= self.height:
            raise ValueError("thickness must be less than half of width and height")
        return self


class CreateCabinetRequest(DimensionsRequest):
    """Request for creating a cabinet from dimensions."""

    name: str | None = Field(default=None, min_length=1, description="Cabinet name")
    floor_id: str | None = Field(default=None, description="Floor to place it on")


class UpdatePanelRequest(BaseModel):
    """Partial edit of a panel. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1)
    length: float | None = Field(default=None, gt=0)
    width: float | None = Field(default=None, gt=0)
    thickness: float | None = Field(default=None, gt=0)
    position: dict[str, float] | None = Field(default=None, description="{x, y, z}")
    rotation: dict[str, float] | None = Field(default=None, description="{rx, ry, rz} in degrees")


class MovePanelRequest(BaseModel):
    """Request for moving a panel to another cabinet."""

    target_cabinet_id: str = Field(..., description="Cabinet receiving the panel")


class PickRequest(BaseModel):
    """A resolved pointer pick."""

    panel_id: str | None = Field(default=None, description="Panel under the pointer, null for empty space")
    shift: bool = False
    ctrl: bool = False


class LoadDocumentRequest(BaseModel):
    """Request for materializing a template document supplied inline."""

    document: dict[str, Any] = Field(..., description="Template document JSON")
    floor_id: str | None = Field(default=None, description="Floor to place cabinets on")


class ViewModeRequest(BaseModel):
    """Request for switching the render style."""

    mode: ViewMode
