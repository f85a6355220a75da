"""Bundled template endpoints."""

from fastapi import APIRouter

from casework.application.templates import template_description
from casework.web.dependencies import TemplateManagerDep
from casework.web.schemas.responses import (
    TemplateContentSchema,
    TemplateListItemSchema,
    TemplateListSchema,
)

router = APIRouter(prefix="/templates", tags=["templates"])


@router.get("", response_model=TemplateListSchema)
async def list_templates(
    manager: TemplateManagerDep,
) -> TemplateListSchema:
    """List all bundled templates."""
    templates = [
        TemplateListItemSchema(name=name, description=desc)
        for name, desc in manager.list_templates()
    ]
    return TemplateListSchema(templates=templates)


@router.get("/{name}", response_model=TemplateContentSchema)
async def get_template(
    name: str,
    manager: TemplateManagerDep,
) -> TemplateContentSchema:
    """Get the document of a bundled template.

    Raises:
        TemplateNotFoundError: If template does not exist (handled by exception handler).
    """
    document = manager.load(name)
    return TemplateContentSchema(
        name=name,
        description=template_description(document),
        content=document.model_dump(),
    )
