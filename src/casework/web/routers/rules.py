"""Rules engine endpoint."""

from fastapi import APIRouter

from casework.domain.rules import derive_panels
from casework.domain.value_objects import ConstructionOptions
from casework.web.schemas.requests import DimensionsRequest
from casework.web.schemas.responses import DeriveResponseSchema, PanelSchema

router = APIRouter(prefix="/rules", tags=["rules"])


@router.post("/derive", response_model=DeriveResponseSchema)
async def derive(request: DimensionsRequest) -> DeriveResponseSchema:
    """Derive the five carcass panels for the given dimensions without storing anything."""
    options = ConstructionOptions(
        top_style=request.options.top_style, back_type=request.options.back_type
    )
    panels = derive_panels(
        request.width, request.height, request.depth, request.thickness, options
    )
    return DeriveResponseSchema(panels=[PanelSchema.from_panel(p) for p in panels])
