"""Designer settings from defaults, a JSON file and command-line overrides.

Settings are layered: model defaults, then the settings file, then any
overrides whose value is not None. Nested sections such as ``palette`` are
merged key by key, so overriding one colour keeps the others from the file.
"""

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from casework.application.config.schema import DesignerSettings
from casework.application.validation import validation_details

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Settings that cannot be used.

    Attributes:
        message: The primary error message
        error_type: file_not_found, file_read_error, json_parse or validation
        path: Settings file involved, None for overrides alone
        details: One dict per problem (line/column for JSON, path/message for fields)
    """

    def __init__(
        self,
        message: str,
        error_type: str,
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []


def read_settings_file(path: Path) -> dict[str, Any]:
    """Decode a settings file into raw, unvalidated values.

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON, or not
            a JSON object.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Settings file not found: {path}", "file_not_found", path) from e
    except OSError as e:
        raise ConfigError(f"Error reading settings file {path}: {e}", "file_read_error", path) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in settings file {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            "json_parse",
            path,
            [{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Settings file {path} must hold a JSON object",
            "validation",
            path,
            [{"path": "", "message": "Input should be an object", "error_type": "dict_type"}],
        )
    return data


def merge_settings(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay ``overrides`` on ``base``; None values leave ``base`` alone."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = value
    return merged


def load_settings(
    path: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> DesignerSettings:
    """Build validated settings.

    Args:
        path: JSON settings file, or None for defaults only.
        overrides: Values that win over the file, typically CLI options.

    Raises:
        ConfigError: If the file cannot be read or the merged values fail
            validation.
    """
    data = read_settings_file(path) if path is not None else {}
    data = merge_settings(data, overrides or {})

    try:
        settings = DesignerSettings.model_validate(data)
    except ValidationError as e:
        details = validation_details(e)
        lines = [f"  - {d['path'] or '(root)'}: {d['message']}" for d in details]
        raise ConfigError(
            "Settings validation failed:\n" + "\n".join(lines),
            "validation",
            path,
            details,
        ) from e

    logger.debug("Settings loaded from %s", path or "defaults")
    return settings
