"""Design session endpoints: hierarchy queries, edits, selection and template loading."""

from typing import Any

from fastapi import APIRouter, Response

from casework.application.session import DesignSession
from casework.domain.value_objects import Position, Rotation
from casework.web.dependencies import SessionDep
from casework.web.exceptions import EntityNotFoundError, OperationRejectedError
from casework.web.schemas.requests import (
    CreateCabinetRequest,
    LoadDocumentRequest,
    MovePanelRequest,
    PickRequest,
    UpdatePanelRequest,
    ViewModeRequest,
)
from casework.web.schemas.responses import (
    CabinetListSchema,
    CabinetSchema,
    ErrorResponseSchema,
    MaterializationSchema,
    PanelSchema,
    RemovedSchema,
    SelectionSchema,
    ViewModeSchema,
)

router = APIRouter(
    prefix="/design",
    tags=["design"],
    responses={404: {"model": ErrorResponseSchema}},
)


def _cabinet_schema(session: DesignSession, cabinet_id: str) -> CabinetSchema:
    cabinet = session.store.get_cabinet(cabinet_id)
    if cabinet is None:
        raise EntityNotFoundError("cabinet", cabinet_id)
    floor = session.store.owner_floor_of_cabinet(cabinet.id)
    return CabinetSchema.from_cabinet(cabinet, floor.id if floor else None)


@router.get("/scene")
async def get_scene(session: SessionDep) -> dict[str, Any]:
    """Whole hierarchy plus the current selection."""
    return session.snapshot()


@router.get("/cabinets", response_model=CabinetListSchema)
async def list_cabinets(session: SessionDep, floor_id: str | None = None) -> CabinetListSchema:
    """All cabinets, or those on one floor."""
    if floor_id is not None and session.store.get_floor(floor_id) is None:
        raise EntityNotFoundError("floor", floor_id)
    cabinets = session.store.get_all_cabinets(floor_id)
    return CabinetListSchema(cabinets=[_cabinet_schema(session, c.id) for c in cabinets])


@router.post("/cabinets", response_model=CabinetSchema, status_code=201)
async def create_cabinet(request: CreateCabinetRequest, session: SessionDep) -> CabinetSchema:
    """Create a cabinet from dimensions and derive its panels."""
    if request.floor_id is not None and session.store.get_floor(request.floor_id) is None:
        raise EntityNotFoundError("floor", request.floor_id)
    cabinet = session.add_cabinet(
        request.width,
        request.height,
        request.depth,
        request.thickness,
        options={
            "topStyle": request.options.top_style.value,
            "backType": request.options.back_type.value,
        },
        name=request.name,
        floor_id=request.floor_id,
    )
    if cabinet is None:
        raise OperationRejectedError("Cabinet could not be created")
    return _cabinet_schema(session, cabinet.id)


@router.get("/cabinets/{cabinet_id}", response_model=CabinetSchema)
async def get_cabinet(cabinet_id: str, session: SessionDep) -> CabinetSchema:
    return _cabinet_schema(session, cabinet_id)


@router.delete("/cabinets/{cabinet_id}", status_code=204)
async def delete_cabinet(cabinet_id: str, session: SessionDep) -> Response:
    """Remove a cabinet and all of its panels."""
    if not session.store.remove_cabinet(cabinet_id):
        raise EntityNotFoundError("cabinet", cabinet_id)
    return Response(status_code=204)


@router.get("/panels/{panel_id}", response_model=PanelSchema)
async def get_panel(panel_id: str, session: SessionDep) -> PanelSchema:
    panel = session.store.get_panel(panel_id)
    if panel is None:
        raise EntityNotFoundError("panel", panel_id)
    return PanelSchema.from_panel(panel)


@router.patch("/panels/{panel_id}", response_model=PanelSchema)
async def update_panel(
    panel_id: str, request: UpdatePanelRequest, session: SessionDep
) -> PanelSchema:
    """Edit a panel's name, dimensions, position or rotation."""
    updated = session.store.update_panel(
        panel_id,
        name=request.name,
        length=request.length,
        width=request.width,
        thickness=request.thickness,
        position=Position.from_mapping(request.position) if request.position else None,
        rotation=Rotation.from_mapping(request.rotation) if request.rotation else None,
    )
    if not updated:
        raise EntityNotFoundError("panel", panel_id)
    return PanelSchema.from_panel(session.store.get_panel(panel_id))


@router.post("/panels/{panel_id}/move", response_model=CabinetSchema)
async def move_panel(
    panel_id: str, request: MovePanelRequest, session: SessionDep
) -> CabinetSchema:
    """Move a panel to another cabinet and return the receiving cabinet."""
    if session.store.get_panel(panel_id) is None:
        raise EntityNotFoundError("panel", panel_id)
    if not session.store.move_panel(panel_id, request.target_cabinet_id):
        raise EntityNotFoundError("cabinet", request.target_cabinet_id)
    return _cabinet_schema(session, request.target_cabinet_id)


@router.delete("/panels/{panel_id}", status_code=204)
async def delete_panel(panel_id: str, session: SessionDep) -> Response:
    if not session.store.remove_panel(panel_id):
        raise EntityNotFoundError("panel", panel_id)
    return Response(status_code=204)


@router.post("/pick", response_model=SelectionSchema)
async def pick(request: PickRequest, session: SessionDep) -> SelectionSchema:
    """Apply a pointer pick. Picks on unknown panels change nothing."""
    mode = session.selection.handle_pick(request.panel_id, request.shift, request.ctrl)
    return SelectionSchema.from_engine(session.selection, mode)


@router.get("/selection", response_model=SelectionSchema)
async def get_selection(session: SessionDep) -> SelectionSchema:
    return SelectionSchema.from_engine(session.selection)


@router.delete("/selection", response_model=SelectionSchema)
async def clear_selection(session: SessionDep) -> SelectionSchema:
    session.selection.deselect_all()
    return SelectionSchema.from_engine(session.selection)


@router.post("/selection/remove", response_model=RemovedSchema)
async def remove_selection(session: SessionDep) -> RemovedSchema:
    """Delete the selected cabinets and panels."""
    return RemovedSchema(removed=session.remove_selection())


@router.post("/templates/{name}/load", response_model=MaterializationSchema)
async def load_template(
    name: str, session: SessionDep, floor_id: str | None = None
) -> MaterializationSchema:
    """Fetch a template from the configured source and materialize it."""
    result = await session.load_template(name, floor_id=floor_id)
    return MaterializationSchema.from_result(result)


@router.post("/documents", response_model=MaterializationSchema)
async def load_document(request: LoadDocumentRequest, session: SessionDep) -> MaterializationSchema:
    """Materialize a template document supplied in the request body."""
    result = session.load_document(request.document, floor_id=request.floor_id)
    return MaterializationSchema.from_result(result)


@router.get("/export")
async def export_template(session: SessionDep) -> dict[str, Any]:
    """Every parametric cabinet as a template document."""
    return session.export_template()


@router.put("/view-mode", response_model=ViewModeSchema)
async def set_view_mode(request: ViewModeRequest, session: SessionDep) -> ViewModeSchema:
    changed = session.set_view_mode(request.mode)
    return ViewModeSchema(view_mode=session.store.adapter.view_mode, changed=changed)
