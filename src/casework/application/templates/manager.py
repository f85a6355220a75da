"""Bundled cabinet template documents.

Every ``*.json`` file in the ``data`` package is a template: its name is the
file stem and its description is the document's top-level ``description``.
Files are read with :mod:`importlib.resources`, so they work from wheels.
"""

from importlib import resources

from .errors import TemplateNotFoundError
from .schema import TemplateDocument, parse_template_document

DATA_PACKAGE = "casework.application.templates.data"
_SUFFIX = ".json"


def template_description(document: TemplateDocument) -> str:
    description = (document.model_extra or {}).get("description")
    return description if isinstance(description, str) else ""


class TemplateManager:
    """Finds and parses the template documents shipped with the package.

    Example:
        manager = TemplateManager()
        document = manager.load("kitchen-run")
        TemplateMaterializer(store).materialize(document, floor_id)
    """

    def __init__(self, package: str = DATA_PACKAGE) -> None:
        self.package = package

    def names(self) -> list[str]:
        """Bundled template names, sorted."""
        return sorted(
            entry.name[: -len(_SUFFIX)]
            for entry in resources.files(self.package).iterdir()
            if entry.is_file() and entry.name.endswith(_SUFFIX)
        )

    def exists(self, name: str) -> bool:
        return name in self.names()

    def load(self, name: str) -> TemplateDocument:
        """Parse one bundled template.

        Raises:
            TemplateNotFoundError: If no bundled template has that name.
            TemplateError: If the bundled file is not a template document.
        """
        if not self.exists(name):
            raise TemplateNotFoundError(name)
        text = resources.files(self.package).joinpath(name + _SUFFIX).read_text(encoding="utf-8")
        return parse_template_document(text)

    def list_templates(self) -> list[tuple[str, str]]:
        """(name, description) of every bundled template, sorted by name."""
        return [(name, template_description(self.load(name))) for name in self.names()]
