"""Template sources: where template documents are fetched from.

Three implementations of :class:`~casework.contracts.TemplateSourceProtocol`:

- :class:`BundledTemplateSource` serves the templates shipped with the package.
- :class:`DirectoryTemplateSource` reads ``*.json`` files from a folder.
- :class:`HttpTemplateSource` talks to a template service over HTTP with a
  list endpoint returning file names and a get endpoint taking ``?file=``.

Template names are given without the ``.json`` suffix; a suffix supplied by
the caller is accepted and ignored. Names are reduced to their basename so
a source never reads outside its own folder.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any

import httpx

from casework.application.templates.errors import (
    TemplateNotFoundError,
    TemplateSourceError,
)
from casework.application.templates.manager import TemplateManager

logger = logging.getLogger(__name__)

__all__ = [
    "BundledTemplateSource",
    "DirectoryTemplateSource",
    "HttpTemplateSource",
    "sanitize_template_name",
]

_SUFFIX = ".json"


def sanitize_template_name(name: str) -> str:
    """Reduce a requested name to a bare template name.

    Examples:
        >>> sanitize_template_name("../../etc/kitchen-run.json")
        'kitchen-run'
        >>> sanitize_template_name("base-cabinet")
        'base-cabinet'
    """
    base = PurePosixPath(name.replace("\\", "/")).name
    if base.endswith(_SUFFIX):
        base = base[: -len(_SUFFIX)]
    return base


def _require_document(payload: Any, name: str, source: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise TemplateSourceError(f"Template {name!r} is not a JSON object", source)
    return payload


class BundledTemplateSource:
    """Template source backed by the package's bundled templates."""

    def __init__(self, manager: TemplateManager | None = None) -> None:
        self.manager = manager or TemplateManager()

    async def list_templates(self) -> list[str]:
        return self.manager.names()

    async def fetch_template(self, name: str) -> dict[str, Any]:
        return self.manager.load(sanitize_template_name(name)).model_dump()


class DirectoryTemplateSource:
    """Template source reading ``<name>.json`` files from a folder.

    Attributes:
        directory: Folder holding the template documents.
    """

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    async def list_templates(self) -> list[str]:
        """Template names in the folder, sorted.

        Raises:
            TemplateSourceError: If the folder does not exist.
        """
        if not self.directory.is_dir():
            raise TemplateSourceError("Template folder not found", str(self.directory))
        return sorted(path.stem for path in self.directory.glob(f"*{_SUFFIX}") if path.is_file())

    async def fetch_template(self, name: str) -> dict[str, Any]:
        """Read and decode one template document.

        Raises:
            TemplateNotFoundError: If no such file exists in the folder.
            TemplateSourceError: If the file cannot be read or decoded.
        """
        template_name = sanitize_template_name(name)
        if not template_name:
            raise TemplateNotFoundError(name)
        path = self.directory / f"{template_name}{_SUFFIX}"
        if not path.is_file():
            raise TemplateNotFoundError(template_name)

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateSourceError(f"Error reading template: {e}", str(path)) from e
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise TemplateSourceError(
                f"Invalid JSON (line {e.lineno}, column {e.colno}): {e.msg}", str(path)
            ) from e
        logger.debug("Read template %s from %s", template_name, path)
        return _require_document(payload, template_name, str(path))


class HttpTemplateSource:
    """Template source fetching documents from a remote template service.

    The service answers ``GET <base_url><list_path>`` with a JSON array of
    file names and ``GET <base_url><fetch_path>?file=<name>.json`` with the
    document itself. Either endpoint may answer ``{"error": "<code>"}``
    instead; ``file_not_found`` maps to TemplateNotFoundError, any other
    code to TemplateSourceError.

    Attributes:
        base_url: Service URL without trailing slash.
        timeout: Request timeout in seconds.

    Example:
        >>> source = HttpTemplateSource("https://templates.example.com/php")
        >>> names = await source.list_templates()
        >>> document = await source.fetch_template(names[0])
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        list_path: str = "/listJson.php",
        fetch_path: str = "/getJson.php",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.list_path = list_path
        self.fetch_path = fetch_path

    async def list_templates(self) -> list[str]:
        url = f"{self.base_url}{self.list_path}"
        payload = await self._get_json(url)
        if isinstance(payload, dict) and "error" in payload:
            raise TemplateSourceError(f"Template listing failed: {payload['error']}", url)
        if not isinstance(payload, list):
            raise TemplateSourceError("Template listing is not a JSON array", url)
        return [
            sanitize_template_name(entry)
            for entry in payload
            if isinstance(entry, str) and entry.endswith(_SUFFIX)
        ]

    async def fetch_template(self, name: str) -> dict[str, Any]:
        template_name = sanitize_template_name(name)
        url = f"{self.base_url}{self.fetch_path}"
        payload = await self._get_json(url, params={"file": f"{template_name}{_SUFFIX}"})
        if isinstance(payload, dict) and "error" in payload:
            if payload["error"] == "file_not_found":
                raise TemplateNotFoundError(template_name)
            raise TemplateSourceError(f"Template fetch failed: {payload['error']}", url)
        return _require_document(payload, template_name, url)

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(url, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise TemplateSourceError("Timed out contacting template service", url) from e
        except httpx.RequestError as e:
            raise TemplateSourceError(f"Could not reach template service: {e}", url) from e

        if response.status_code != 200:
            raise TemplateSourceError(
                f"Template service returned status {response.status_code}", url
            )
        try:
            return response.json()
        except ValueError as e:
            raise TemplateSourceError("Template service returned invalid JSON", url) from e
