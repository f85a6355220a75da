"""Pydantic schemas for the REST API."""

from casework.web.schemas.requests import (
    CreateCabinetRequest,
    DimensionsRequest,
    LoadDocumentRequest,
    MovePanelRequest,
    OptionsSchema,
    PickRequest,
    UpdatePanelRequest,
    ViewModeRequest,
)
from casework.web.schemas.responses import (
    CabinetListSchema,
    CabinetSchema,
    DeriveResponseSchema,
    ErrorResponseSchema,
    MaterializationSchema,
    PanelSchema,
    RemovedSchema,
    SelectionSchema,
    SkippedEntrySchema,
    TemplateContentSchema,
    TemplateListItemSchema,
    TemplateListSchema,
    ViewModeSchema,
)

__all__ = [
    # Requests
    "CreateCabinetRequest",
    "DimensionsRequest",
    "LoadDocumentRequest",
    "MovePanelRequest",
    "OptionsSchema",
    "PickRequest",
    "UpdatePanelRequest",
    "ViewModeRequest",
    # Responses
    "CabinetListSchema",
    "CabinetSchema",
    "DeriveResponseSchema",
    "ErrorResponseSchema",
    "MaterializationSchema",
    "PanelSchema",
    "RemovedSchema",
    "SelectionSchema",
    "SkippedEntrySchema",
    "TemplateContentSchema",
    "TemplateListItemSchema",
    "TemplateListSchema",
    "ViewModeSchema",
]
