"""Readable reports for pydantic validation errors.

Settings files and template entries both report problems as
``path: message`` pairs, where ``path`` is the JSON path of the offending
value (``palette.group``, ``options.backType``, ``cabinets[2]``).
"""

from typing import Any

from pydantic import ValidationError


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Join a pydantic error location into a JSON path.

    Examples:
        >>> format_json_path(("palette", "single"))
        'palette.single'
        >>> format_json_path(("cabinets", 0, "width"))
        'cabinets[0].width'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        elif path:
            path += f".{segment}"
        else:
            path = str(segment)
    return path


def validation_details(error: ValidationError) -> list[dict[str, Any]]:
    """One ``{"path", "message", "error_type"}`` dict per problem."""
    return [
        {
            "path": format_json_path(err["loc"]),
            "message": err["msg"],
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def describe_validation_error(error: ValidationError) -> list[str]:
    """``path: message`` lines; model-level errors have no path."""
    return [
        f"{detail['path']}: {detail['message']}" if detail["path"] else detail["message"]
        for detail in validation_details(error)
    ]
