"""
CSS rendering for resolved output variables.

render_css() writes the full projection as a custom-property block;
render_delta() turns a ChangeEvent into the minimal set/remove operations a
collaborator applies to a live style scope.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from .ir import ChangeEvent, ColorMode, ResolvedVariable
from .store import ThemeStore


def mode_selector(mode: ColorMode | str | None) -> str:
    """Selector for a mode-scoped block; None means the document root."""
    if mode is None:
        return ":root"
    return f'[data-theme="{ColorMode(mode).value}"]'


def render_css(
    variables: Iterable[ResolvedVariable],
    selector: str = ":root",
    header: str | None = None,
) -> str:
    """
    Render variables as a CSS custom-property block.

    Args:
        variables: Resolved variables in output order
        selector: Block selector
        header: Optional comment placed above the block

    Returns:
        CSS text ending with a newline
    """
    lines: list[str] = []
    if header:
        lines.append(f"/* {header} */")
    lines.append(f"{selector} {{")
    for variable in variables:
        lines.append(f"  {variable.name}: {variable.css_value()};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def render_delta(store: ThemeStore, event: ChangeEvent) -> dict[str, str | None]:
    """
    Changed variables as name -> CSS value, None for variables now absent.
    """
    delta: dict[str, str | None] = {}
    for name in event.changed_variable_names:
        value = store.value_of(name)
        delta[name] = None if value is None else ResolvedVariable(name=name, value=value).css_value()
    return delta


def export_css(store: ThemeStore, output_path: Path, selector: str = ":root") -> Path:
    """Write the store's projection to a CSS file.

    Args:
        store: Store whose variables are rendered
        output_path: Destination file
        selector: Block selector

    Returns:
        Path to the written file.
    """
    css = render_css(
        store.variables(),
        selector=selector,
        header=f"themeweave ({store.mode.value}) - generated, do not edit",
    )
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(css, encoding="utf-8")
    return output_path
