"""Exceptions raised while retrieving or parsing template documents."""

from typing import Any


class TemplateError(Exception):
    """Raised when a document is not a template at all.

    Individual malformed cabinet entries never raise; they are skipped and
    reported by the materializer. This error is for documents without a
    ``cabinets`` list or that are not JSON.
    """

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        self.message = message
        self.details = details or []
        super().__init__(message)


class TemplateNotFoundError(Exception):
    """Raised when a requested template does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Template not found: {name}")


class TemplateSourceError(Exception):
    """Raised when a template source cannot be read.

    Attributes:
        source: Description of the source (directory path or URL).
        message: What went wrong.
    """

    def __init__(self, message: str, source: str = "") -> None:
        self.message = message
        self.source = source
        super().__init__(f"{message} ({source})" if source else message)
