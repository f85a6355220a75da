"""Template documents: schema, bundled templates, materialization and export.

This package turns template documents into cabinets in a hierarchy store,
writes cabinets back out as documents, and provides the bundled templates
through a TemplateManager.
"""

from casework.application.templates.errors import (
    TemplateError,
    TemplateNotFoundError,
    TemplateSourceError,
)
from casework.application.templates.manager import TemplateManager, template_description
from casework.application.templates.materializer import (
    MaterializationResult,
    SkippedEntry,
    TemplateExporter,
    TemplateMaterializer,
)
from casework.application.templates.schema import (
    CabinetTemplateSchema,
    TemplateDocument,
    TemplateOptionsSchema,
    parse_template_document,
)
from casework.application.validation import describe_validation_error

__all__ = [
    "CabinetTemplateSchema",
    "MaterializationResult",
    "SkippedEntry",
    "TemplateDocument",
    "TemplateError",
    "TemplateExporter",
    "TemplateManager",
    "TemplateMaterializer",
    "TemplateNotFoundError",
    "TemplateOptionsSchema",
    "TemplateSourceError",
    "describe_validation_error",
    "parse_template_document",
    "template_description",
]
