"""
Shared CLI state and helpers.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from themeweave.core.config import ThemeweaveConfig, load_config
from themeweave.core.errors import ThemeweaveError
from themeweave.core.ir import LiteralValue
from themeweave.core.loader import open_project
from themeweave.core.store import ThemeStore

console = Console()


@dataclass
class CliState:
    """Options given to the top-level command, shared with subcommands."""

    project_root: Path = Path(".")
    verbose: bool = False


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_state(ctx: typer.Context) -> CliState:
    if isinstance(ctx.obj, CliState):
        return ctx.obj
    return CliState()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


def load_project_config(ctx: typer.Context) -> tuple[Path, ThemeweaveConfig]:
    project_root = get_state(ctx).project_root.resolve()
    try:
        return project_root, load_config(project_root)
    except ThemeweaveError as e:
        fail(str(e))


def load_store(ctx: typer.Context, mode: str | None = None) -> ThemeStore:
    """Open the project's store, turning load errors into a clean exit."""
    project_root, config = load_project_config(ctx)
    if mode is not None:
        config.resolution.mode = mode
    try:
        return open_project(project_root, config)
    except ThemeweaveError as e:
        fail(str(e))


def parse_literal(text: str) -> LiteralValue:
    """
    Interpret a command-line value: JSON numbers and booleans are typed,
    anything else is kept as a string.
    """
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return text
    if isinstance(value, (int, float, bool, str)):
        return value
    return text
