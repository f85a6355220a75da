"""CLI command implementations for the casework application.

This package contains subcommands for the casework CLI:
- templates: List, show and copy bundled template documents
"""

from casework.cli.commands.templates import templates_app

__all__ = ["templates_app"]
