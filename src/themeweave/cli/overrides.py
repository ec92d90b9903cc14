"""CLI commands for persisted token overrides.

``themeweave overrides list``    - List overrides.
``themeweave overrides set``     - Override a token literal.
``themeweave overrides clear``   - Clear overrides for specific tokens.
``themeweave overrides revert``  - Clear every override.
``themeweave overrides export``  - Write overrides as JSON.
``themeweave overrides import``  - Replace overrides from a JSON file.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from themeweave.cli.common import console, fail, load_project_config, parse_literal
from themeweave.core.document_index import DocumentIndex
from themeweave.core.errors import DocumentError
from themeweave.core.ir import Collection
from themeweave.core.loader import load_documents, open_overrides
from themeweave.core.overrides import OverrideLayer
from themeweave.core.references import token_path_for

overrides_app = typer.Typer(help="Manage persisted token overrides", no_args_is_help=True)


def _open(ctx: typer.Context) -> OverrideLayer:
    project_root, config = load_project_config(ctx)
    try:
        return open_overrides(project_root, config)
    except DocumentError as e:
        fail(str(e))


@overrides_app.command(name="list")
def list_command(ctx: typer.Context) -> None:
    """List all token overrides."""
    overrides = _open(ctx).get_all()
    if not overrides:
        console.print("[dim]No overrides set.[/dim]")
        return

    table = Table(title="Token overrides")
    table.add_column("Token")
    table.add_column("Value")
    for name, value in sorted(overrides.items()):
        table.add_row(escape(name), escape(repr(value) if isinstance(value, str) else str(value)))
    console.print(table)
    console.print(f"\n[dim]{len(overrides)} override(s)[/dim]")


@overrides_app.command(name="set")
def set_command(
    ctx: typer.Context,
    token: Annotated[str, typer.Argument(help="Token identity, e.g. size/md")],
    value: Annotated[str, typer.Argument(help="Literal value (numbers and booleans are typed)")],
) -> None:
    """Override a token's literal value."""
    project_root, config = load_project_config(ctx)
    try:
        documents = load_documents(project_root, config)
    except DocumentError as e:
        fail(str(e))

    index = DocumentIndex(tokens=documents[Collection.TOKENS])
    if index.lookup(Collection.TOKENS, token_path_for(token)) is None:
        console.print(f"[yellow]Warning:[/yellow] no token '{escape(token)}' in the tokens document")

    literal = parse_literal(value)
    _open(ctx).set(token, literal)
    console.print(f"[green]Override set:[/green] {escape(token)} = {escape(repr(literal))}")


@overrides_app.command(name="clear")
def clear_command(
    ctx: typer.Context,
    tokens: Annotated[list[str], typer.Argument(help="Token identities to clear")],
) -> None:
    """Clear overrides for the given tokens."""
    layer = _open(ctx)
    cleared = [name for name in tokens if name in layer]
    for name in cleared:
        layer.delete(name)
    for name in tokens:
        if name not in cleared:
            console.print(f"[dim]No override for {escape(name)}[/dim]")
    console.print(f"Cleared {len(cleared)} override(s)")


@overrides_app.command(name="revert")
def revert_command(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Clear every override."""
    layer = _open(ctx)
    count = len(layer)
    if count == 0:
        console.print("[dim]No overrides set.[/dim]")
        return
    if not yes and not typer.confirm(f"Clear {count} override(s)?"):
        raise typer.Exit(code=1)
    layer.clear()
    console.print(f"Reverted {count} override(s)")


@overrides_app.command(name="export")
def export_command(
    ctx: typer.Context,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write to this file instead of stdout"),
    ] = None,
) -> None:
    """Export overrides as a JSON object."""
    text = json.dumps(_open(ctx).get_all(), indent=2, sort_keys=True)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]Exported overrides to {output}[/green]")


@overrides_app.command(name="import")
def import_command(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="JSON file of token name -> literal")],
) -> None:
    """Replace all overrides with the contents of a JSON file."""
    if not source.exists():
        fail(f"File not found: {source}")
    layer = _open(ctx)
    try:
        layer.load_json(source.read_text(encoding="utf-8"))
    except DocumentError as e:
        fail(str(e))
    console.print(f"[green]Imported {len(layer)} override(s)[/green]")
