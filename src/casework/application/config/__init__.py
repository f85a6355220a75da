"""Designer settings: schema and layered loader.

Example:
    >>> from pathlib import Path
    >>> from casework.application.config import load_settings, ConfigError
    >>>
    >>> try:
    ...     settings = load_settings(Path("casework.json"), {"view_mode": "solid"})
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from casework.application.config.loader import (
    ConfigError,
    load_settings,
    merge_settings,
    read_settings_file,
)
from casework.application.config.schema import DesignerSettings, PaletteConfig

__all__ = [
    "ConfigError",
    "DesignerSettings",
    "PaletteConfig",
    "load_settings",
    "merge_settings",
    "read_settings_file",
]
