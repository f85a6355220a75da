"""Templates commands for listing, showing and copying bundled templates."""

import json
from pathlib import Path
from typing import Annotated

import typer

from casework.application.templates import TemplateManager, TemplateNotFoundError

templates_app = typer.Typer(
    name="templates",
    help="Manage bundled cabinet template documents.",
)


def _fail_unknown(manager: TemplateManager, name: str) -> None:
    available = ", ".join(n for n, _ in manager.list_templates())
    typer.echo(f"Error: Template not found: {name}", err=True)
    typer.echo(f"Available templates: {available}", err=True)
    raise typer.Exit(code=1)


@templates_app.command(name="list")
def list_templates() -> None:
    """List all bundled templates.

    Example:
        casework templates list
    """
    manager = TemplateManager()
    templates = manager.list_templates()

    typer.echo("Available templates:")
    typer.echo()

    max_name_width = max(len(name) for name, _ in templates) if templates else 0
    for name, description in templates:
        typer.echo(f"  {name:<{max_name_width}}  - {description}")

    typer.echo()
    typer.echo("Use 'casework templates init <name>' to copy a template to a file.")


@templates_app.command(name="show")
def show_template(
    name: Annotated[str, typer.Argument(help="Name of the template to print")],
) -> None:
    """Print the JSON document of a bundled template."""
    manager = TemplateManager()
    try:
        typer.echo(json.dumps(manager.load(name).model_dump(), indent=2))
    except TemplateNotFoundError:
        _fail_unknown(manager, name)


@templates_app.command(name="init")
def init_template(
    name: Annotated[
        str,
        typer.Argument(help="Name of the template to copy"),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (default: <name>.json)"),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file"),
    ] = False,
) -> None:
    """Copy a bundled template into a new file for editing.

    Examples:
        casework templates init kitchen-run
        casework templates init base-cabinet --output my-base.json
    """
    manager = TemplateManager()

    if output is None:
        output = Path(f"{name}.json")

    if not manager.exists(name):
        _fail_unknown(manager, name)

    if output.exists() and not force:
        typer.echo(f"Error: File already exists: {output}", err=True)
        typer.echo("Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    try:
        document = manager.load(name).model_dump()
        output.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        typer.echo(f"Created: {output}")
    except OSError as e:
        typer.echo(f"Error: Could not write file: {e}", err=True)
        raise typer.Exit(code=1)
