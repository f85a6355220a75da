"""Typer CLI for cabinet design from the command line."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from casework.application.config import ConfigError, load_settings
from casework.application.factory import ServiceFactory
from casework.application.session import DesignSession
from casework.application.templates import (
    CabinetTemplateSchema,
    MaterializationResult,
    TemplateError,
    describe_validation_error,
    parse_template_document,
)
from casework.cli.commands import templates_app
from casework.domain import BackType, TopStyle, ViewMode, derive_panels

app = typer.Typer(
    name="casework",
    help="Design cabinets from dimensions and template documents.",
)

app.add_typer(templates_app, name="templates")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
) -> None:
    """Design cabinets from dimensions and template documents."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_factory(config_file: Path | None, view_mode: ViewMode | None = None) -> ServiceFactory:
    try:
        settings = load_settings(config_file, overrides={"view_mode": view_mode})
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    return ServiceFactory(settings=settings)


def _read_document(template_file: Path) -> str:
    if not template_file.exists():
        typer.echo(f"Error: Template file not found: {template_file}", err=True)
        raise typer.Exit(code=1)
    try:
        return template_file.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: Could not read {template_file}: {e}", err=True)
        raise typer.Exit(code=1)


def _materialize_file(session: DesignSession, template_file: Path) -> MaterializationResult:
    text = _read_document(template_file)
    session.bootstrap()
    try:
        result = session.load_document(text)
    except TemplateError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)
    for skipped in result.skipped:
        typer.echo(
            f"Warning: skipped entry {skipped.index} ({skipped.name or 'unnamed'}): {skipped.reason}",
            err=True,
        )
    return result


@app.command()
def derive(
    width: Annotated[float, typer.Argument(help="Overall cabinet width")],
    height: Annotated[float, typer.Argument(help="Overall cabinet height")],
    depth: Annotated[float, typer.Argument(help="Overall cabinet depth")],
    thickness: Annotated[float, typer.Argument(help="Board thickness")],
    top_style: Annotated[
        TopStyle,
        typer.Option("--top-style", help="How the top meets the sides"),
    ] = TopStyle.BETWEEN_SIDES,
    back_type: Annotated[
        BackType,
        typer.Option("--back-type", help="How the back is fixed"),
    ] = BackType.SCREWED,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the panels as JSON"),
    ] = False,
) -> None:
    """Show the panels a cabinet of the given dimensions is built from.

    Example:
        casework derive 600 720 560 18 --back-type groove
    """
    try:
        spec = CabinetTemplateSchema.model_validate(
            {
                "name": "cabinet",
                "width": width,
                "height": height,
                "depth": depth,
                "thickness": thickness,
                "options": {"topStyle": top_style.value, "backType": back_type.value},
            }
        )
    except ValidationError as e:
        for line in describe_validation_error(e):
            typer.echo(f"Error: {line}", err=True)
        raise typer.Exit(code=1)

    params = spec.to_parameters()
    panels = derive_panels(
        params.width, params.height, params.depth, params.thickness, params.options
    )

    if as_json:
        payload = [
            {
                "name": panel.name,
                "length": panel.length,
                "width": panel.width,
                "thickness": panel.thickness,
                "position": panel.position.to_dict(),
                "rotation": panel.rotation.to_dict(),
            }
            for panel in panels
        ]
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"{'Panel':<12} {'Length':>8} {'Width':>8} {'Thick':>6}  Position / Rotation")
    for panel in panels:
        pos, rot = panel.position, panel.rotation
        typer.echo(
            f"{panel.name:<12} {panel.length:>8g} {panel.width:>8g} {panel.thickness:>6g}  "
            f"({pos.x:g}, {pos.y:g}, {pos.z:g}) / ({rot.rx:g}, {rot.ry:g}, {rot.rz:g})"
        )


@app.command()
def load(
    template_file: Annotated[Path, typer.Argument(help="Template document to load")],
    stl: Annotated[
        Path | None,
        typer.Option("--stl", help="Write the loaded panels to this STL file"),
    ] = None,
    view_mode: Annotated[
        ViewMode | None,
        typer.Option("--view-mode", help="Render style for the scene outline"),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON settings file"),
    ] = None,
) -> None:
    """Load a template document into a new project and print the scene.

    Exits with code 2 when some entries were skipped.

    Example:
        casework load kitchen.json --stl kitchen.stl
    """
    factory = _load_factory(config_file, view_mode)
    session = factory.create_session()
    result = _materialize_file(session, template_file)

    store = session.store
    typer.echo(
        f"Loaded {len(result.cabinets)} cabinet(s) with {store.panel_count} panel(s)"
    )
    typer.echo(store.adapter.render_text(store.root_handle))

    if stl is not None:
        factory.get_stl_exporter().export_to_file(store, stl)
        typer.echo(f"STL written: {stl}")

    if result.skipped:
        raise typer.Exit(code=2)


@app.command()
def export(
    template_file: Annotated[Path, typer.Argument(help="Template document to load")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Where to write the exported template"),
    ],
) -> None:
    """Load a template document and write it back out normalized.

    Malformed entries are dropped and numeric ids become strings.
    """
    session = _load_factory(None).create_session()
    _materialize_file(session, template_file)

    document = session.export_template()
    try:
        output.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    except OSError as e:
        typer.echo(f"Error: Could not write file: {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Exported {len(document['cabinets'])} cabinet(s) to {output}")


@app.command()
def validate(
    template_file: Annotated[Path, typer.Argument(help="Template document to check")],
) -> None:
    """Check every entry of a template document without building anything.

    Exit codes:
        0 - Every entry is valid
        1 - The document or at least one entry is invalid
    """
    text = _read_document(template_file)
    try:
        document = parse_template_document(text)
    except TemplateError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)

    invalid = 0
    seen_ids: set[str] = set()
    for index, entry in enumerate(document.cabinets):
        try:
            spec = CabinetTemplateSchema.model_validate(entry)
        except ValidationError as e:
            invalid += 1
            typer.echo(f"  [{index}] invalid:", err=True)
            for line in describe_validation_error(e):
                typer.echo(f"      {line}", err=True)
            continue
        if spec.id is not None and spec.id in seen_ids:
            invalid += 1
            typer.echo(f"  [{index}] invalid:", err=True)
            typer.echo(f"      id: duplicate id {spec.id!r}", err=True)
            continue
        if spec.id is not None:
            seen_ids.add(spec.id)
        typer.echo(f"  [{index}] {spec.name}: ok")

    if invalid:
        typer.echo(f"{invalid} of {len(document.cabinets)} entries invalid", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"All {len(document.cabinets)} entries valid")


if __name__ == "__main__":
    app()
