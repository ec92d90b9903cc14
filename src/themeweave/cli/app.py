"""
themeweave command-line application.

``themeweave resolve REF``   - Resolve a reference and show its output variable.
``themeweave css``           - Print or write the :root variable block.
``themeweave check``         - Check references, names and contrast.
``themeweave overrides ...`` - Manage persisted token overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from themeweave._version import get_version
from themeweave.cli.common import CliState, configure_logging, console, fail, load_project_config, load_store
from themeweave.cli.overrides import overrides_app
from themeweave.core.compliance import check_store
from themeweave.core.css import export_css, render_css
from themeweave.core.document_index import canonical_location
from themeweave.core.errors import ResolutionError, ThemeweaveError
from themeweave.core.ir import ColorMode
from themeweave.core.loader import open_project
from themeweave.core.references import parse_reference

app = typer.Typer(
    name="themeweave",
    help="Resolve design tokens, brand themes and component mappings into CSS variables.",
    no_args_is_help=True,
)
app.add_typer(overrides_app, name="overrides")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"themeweave {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    project: Annotated[
        Path,
        typer.Option("--project", "-p", help="Project root directory"),
    ] = Path("."),
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    """themeweave: token resolution and CSS-variable synthesis."""
    configure_logging(verbose)
    ctx.obj = CliState(project_root=project, verbose=verbose)


@app.command(name="resolve")
def resolve_command(
    ctx: typer.Context,
    reference: Annotated[
        str,
        typer.Argument(help="Reference such as '{tokens.size.md}' or 'brand.layers.layer-1.properties.padding'"),
    ],
    mode: Annotated[
        ColorMode | None,
        typer.Option("--mode", "-m", help="Theme mode for theme-agnostic brand paths"),
    ] = None,
) -> None:
    """Resolve a reference and show the value, variable name and chain."""
    ref = parse_reference(reference)
    if ref is None:
        fail(f"Not a reference: {reference!r}")

    store = load_store(ctx, mode=mode.value if mode else None)
    resolver = store.resolver()
    try:
        value = resolver.resolve_reference(ref)
    except ResolutionError as e:
        fail(e.message)

    leaf = resolver.index.lookup(ref.collection, ref.path)
    location = canonical_location(ref.collection, leaf.location if leaf is not None else ref.path)

    table = Table(title=escape(str(ref)), show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("Value", escape(str(value)))
    table.add_row("Variable", resolver.variable_name_for(ref.collection, location))
    table.add_row("Mode", store.mode.value)
    table.add_row("Chain", " -> ".join(resolver.chain(ref.collection, ref.path)))
    console.print(table)


@app.command(name="css")
def css_command(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the CSS to this file instead of stdout"),
    ] = None,
    mode: Annotated[
        ColorMode | None,
        typer.Option("--mode", "-m", help="Theme mode to render"),
    ] = None,
) -> None:
    """Render every output variable as a :root block."""
    store = load_store(ctx, mode=mode.value if mode else None)
    if output is None:
        typer.echo(render_css(store.variables()), nl=False)
        return
    path = export_css(store, output)
    console.print(f"[green]Wrote {len(store.variables())} variable(s) to {path}[/green]")


@app.command(name="check")
def check_command(
    ctx: typer.Context,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Treat malformed reference syntax as an error"),
    ] = False,
) -> None:
    """Check documents for cycles, unresolved references, name clashes and contrast."""
    project_root, config = load_project_config(ctx)
    try:
        store = open_project(project_root, config)
    except ThemeweaveError as e:
        console.print(f"[red]ERROR[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    report = check_store(
        store,
        strict=strict or config.resolution.strict_references,
        aa_ratio=config.contrast.aa_ratio,
    )
    for message in report.errors:
        console.print(f"[red]ERROR[/red] {escape(message)}")
    for message in report.warnings:
        console.print(f"[yellow]WARNING[/yellow] {escape(message)}")

    if not report.is_valid:
        console.print(f"\n{len(report.errors)} error(s), {len(report.warnings)} warning(s)")
        raise typer.Exit(code=1)
    console.print(f"[green]Documents OK[/green] ({len(report.warnings)} warning(s))")


def main() -> None:
    app()
