"""Pydantic schemas for template documents.

A template document has the shape::

    {
      "cabinets": [
        {"id": "...", "name": "Base 600", "width": 600, "height": 720,
         "depth": 560, "thickness": 18,
         "options": {"backType": "groove", "topStyle": "betweenSides"}}
      ]
    }

The document is validated in two steps: the envelope first (it must carry
a ``cabinets`` list), then each entry on its own so that one malformed
cabinet does not spoil its siblings.
"""

import json
from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from casework.application.validation import describe_validation_error
from casework.domain.value_objects import (
    CabinetParameters,
    ConstructionOptions,
    canonical_id,
)

from .errors import TemplateError


class TemplateOptionsSchema(BaseModel):
    """Construction options of a template entry.

    Unknown keys are ignored. Values are kept as given, whatever their
    type, and anything unrecognized falls back to the rules-engine
    defaults when converted with :meth:`to_options`.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    back_type: Any = Field(default=None, alias="backType")
    top_style: Any = Field(default=None, alias="topStyle")

    def to_options(self) -> ConstructionOptions:
        return ConstructionOptions.from_mapping(
            {"backType": self.back_type, "topStyle": self.top_style}
        )


class CabinetTemplateSchema(BaseModel):
    """One cabinet entry of a template document.

    Attributes:
        id: Optional id to restore; numbers are normalized to strings.
        name: Cabinet name.
        width: Overall width, must be positive.
        height: Overall height, must be positive.
        depth: Overall depth, must be positive.
        thickness: Board thickness, less than half the width and height.
        options: Construction options; missing means defaults.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str = Field(..., min_length=1)
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    depth: float = Field(..., gt=0)
    thickness: float = Field(..., gt=0)
    options: TemplateOptionsSchema = Field(default_factory=TemplateOptionsSchema)

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> str | None:
        if value is None:
            return None
        normalized = canonical_id(value)
        return normalized or None

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, value: Any) -> Any:
        # Anything that is not an options object means "use the defaults".
        return value if isinstance(value, Mapping | TemplateOptionsSchema) else {}

    @model_validator(mode="after")
    def check_thickness(self) -> "CabinetTemplateSchema":
        if 2 * self.thickness >= self.width or 2 * self.thickness >= self.height:
            raise ValueError(
                f"thickness {self.thickness} leaves no room between the sides "
                f"of a {self.width} x {self.height} cabinet"
            )
        return self

    def to_parameters(self) -> CabinetParameters:
        return CabinetParameters(
            width=self.width,
            height=self.height,
            depth=self.depth,
            thickness=self.thickness,
            options=self.options.to_options(),
        )


class TemplateDocument(BaseModel):
    """Envelope of a template document. Entries are validated later."""

    model_config = ConfigDict(extra="allow")

    cabinets: list[Any]


def parse_template_document(data: Any) -> TemplateDocument:
    """Validate the envelope of a template document.

    Args:
        data: Decoded JSON (a dict), a JSON string, or an already-parsed
            TemplateDocument.

    Returns:
        The validated envelope.

    Raises:
        TemplateError: If the input is not JSON or has no ``cabinets`` list.
    """
    if isinstance(data, TemplateDocument):
        return data
    if isinstance(data, str | bytes):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise TemplateError(
                f"Template is not valid JSON: {e.msg}",
                details=[{"line": e.lineno, "column": e.colno}],
            ) from e
    try:
        return TemplateDocument.model_validate(data)
    except ValidationError as e:
        raise TemplateError(
            "Invalid template format: missing cabinets array",
            details=[{"message": line} for line in describe_validation_error(e)],
        ) from e
