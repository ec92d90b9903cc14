"""
Elevation composition.

Each level (0-4) has four geometry axes (blur, spread, offsetX, offsetY), a
shadow color and a shadow opacity. With an axis's scale-by-default switch on,
level N takes level 0's token for that axis and advances N steps along the
canonical size scale (clamped at the top) instead of using its own token.

The shadow color is emitted as a color-mix() over the token variables so a
later opacity-token switch re-renders without recomputing the color.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .document_index import DocumentIndex
from .errors import ResolutionError, UnresolvedPath
from .ir import (
    Collection,
    ColorMode,
    ElevationAxis,
    ElevationDirection,
    ElevationLevel,
    ElevationSettings,
    ElevationSpec,
)
from .references import parse_reference, referenced_token_name, token_path_for, unwrap_value
from .resolver import Resolver

logger = logging.getLogger(__name__)

ELEVATION_LEVELS: tuple[int, ...] = (0, 1, 2, 3, 4)

# Document keys accepted for each axis, in preference order.
_AXIS_KEYS: dict[ElevationAxis, tuple[str, ...]] = {
    ElevationAxis.BLUR: ("blur",),
    ElevationAxis.SPREAD: ("spread",),
    ElevationAxis.OFFSET_X: ("x", "offsetX", "offset-x", "x-axis"),
    ElevationAxis.OFFSET_Y: ("y", "offsetY", "offset-y", "y-axis"),
}

# Output variable suffix per axis.
AXIS_OUTPUTS: dict[ElevationAxis, str] = {
    ElevationAxis.OFFSET_X: "x-offset",
    ElevationAxis.OFFSET_Y: "y-offset",
    ElevationAxis.BLUR: "blur",
    ElevationAxis.SPREAD: "spread",
}
SHADOW_COLOR_OUTPUT = "shadow-color"

_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")
_MULTIPLIER_RE = re.compile(r"^(\d+(?:\.\d+)?)x$")


def to_number(value: Any) -> float | None:
    """Numeric part of a literal: 16, "16", "16px" -> 16.0."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _NUMBER_RE.match(value)
        if match:
            return float(match.group(1))
    return None


def format_px(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}px"
    return f"{value:g}px"


def _raw(node: dict[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        if key in node:
            return unwrap_value(node[key])
    return None


def _direction(node: dict[str, Any], fallback: ElevationDirection) -> ElevationDirection:
    x_raw = to_number(_raw(node, ("x-direction",)))
    y_raw = to_number(_raw(node, ("y-direction",)))
    return ElevationDirection(
        x=fallback.x if x_raw is None else ("right" if x_raw >= 0 else "left"),
        y=fallback.y if y_raw is None else ("down" if y_raw >= 0 else "up"),
    )


def read_elevation_specs(
    index: DocumentIndex,
    mode: ColorMode | str | None = None,
) -> dict[int, ElevationSpec]:
    """Read the raw elevation definitions of one mode from the brand document."""
    nodes: dict[int, dict[str, Any]] = {}
    for level in ELEVATION_LEVELS:
        found = index.find_group(Collection.BRAND, ("elevations", f"elevation-{level}"), mode=mode)
        if found is not None:
            nodes[level] = found[1]

    base_direction = _direction(nodes.get(1, {}), ElevationDirection())
    specs: dict[int, ElevationSpec] = {}
    for level, node in nodes.items():
        specs[level] = ElevationSpec(
            level=level,
            axes={axis: _raw(node, keys) for axis, keys in _AXIS_KEYS.items()},
            color=_raw(node, ("color",)),
            opacity=_raw(node, ("opacity",)),
            direction=_direction(node, base_direction),
        )
    return specs


def _scale_rank(name: str) -> tuple[int, float]:
    """Position class from a size token's name: none, 0.5x, default, then Nx by N."""
    text = name.replace("-", ".", 1)
    if text == "none":
        return 0, 0.0
    if text == "0.5x":
        return 1, 0.0
    if text == "default":
        return 2, 0.0
    match = _MULTIPLIER_RE.match(text)
    if match:
        return 3, float(match.group(1))
    return 4, 0.0


def size_scale(index: DocumentIndex) -> list[str]:
    """
    Canonical ordered size scale as token identities ("size/none", "size/0-5x", ...).

    Ordered by name: none, 0.5x, default, then multiplier names (1x, 1.5x, 2x,
    ...) by multiplier. Names outside that pattern come last, by the
    document's own numeric value (not overrides), ties keeping document order.
    """
    plain = Resolver(index)
    entries: list[tuple[tuple[int, float], float, int, str]] = []
    for position, leaf in enumerate(index.iter_leaves(Collection.TOKENS)):
        if len(leaf.location) != 2 or leaf.location[0] != "size":
            continue
        try:
            value = to_number(plain.resolve(Collection.TOKENS, leaf.location))
        except ResolutionError:
            value = None
        if value is None:
            continue
        entries.append((_scale_rank(leaf.location[1]), value, position, "/".join(leaf.location)))
    entries.sort()
    return [name for *_, name in entries]


def step_token(scale: list[str], base_token: str, steps: int) -> str:
    """Advance a token along the scale, clamping at the top."""
    if base_token not in scale or steps <= 0:
        return base_token
    index = scale.index(base_token)
    return scale[min(len(scale) - 1, index + steps)]


def _fallback_chain(specs: dict[int, ElevationSpec], level: int, attr: str) -> Any:
    for candidate in (level, 1, 0):
        spec = specs.get(candidate)
        if spec is not None and getattr(spec, attr) is not None:
            return getattr(spec, attr)
    return None


class ElevationComposer:
    """Computes elevation outputs for one mode on top of a Resolver."""

    def __init__(
        self,
        resolver: Resolver,
        settings: ElevationSettings | None = None,
        mode: ColorMode | str | None = None,
    ):
        self.resolver = resolver
        self.settings = settings or ElevationSettings()
        self.mode = ColorMode(mode or resolver.index.mode)
        self.specs = read_elevation_specs(resolver.index, self.mode)
        self.scale = size_scale(resolver.index)

    @property
    def levels(self) -> list[int]:
        return sorted(self.specs)

    def axis_token(self, level: int, axis: ElevationAxis) -> tuple[str | None, Any]:
        """Token identity (if any) and raw value used for an axis at a level."""
        spec = self.specs[level]
        if level > 0 and self.settings.scale_by_default.for_axis(axis) and 0 in self.specs:
            base_raw = self.specs[0].axes.get(axis)
            base_token = referenced_token_name(base_raw)
            if base_token is not None and base_token in self.scale:
                token = step_token(self.scale, base_token, level)
                return token, None
            logger.debug(
                f"elevation-{level} {axis}: level 0 value is not a size token, using it unscaled"
            )
            return base_token, base_raw
        raw = spec.axes.get(axis)
        return referenced_token_name(raw), raw

    def axis_value(self, level: int, axis: ElevationAxis) -> float:
        token, raw = self.axis_token(level, axis)
        if raw is None and token is None:
            value: Any = 0
        elif raw is None:
            value = self.resolver.resolve(Collection.TOKENS, token_path_for(token))
        else:
            value = self.resolver.resolve_raw(raw, mode=self.mode)

        number = to_number(value)
        if number is None:
            raise UnresolvedPath(
                f"elevation-{level} {axis} did not resolve to a number: {value!r}",
                Collection.BRAND.value,
                ("elevations", f"elevation-{level}", axis.value),
            )
        if axis in (ElevationAxis.OFFSET_X, ElevationAxis.OFFSET_Y):
            direction = self.direction(level)
            if axis == ElevationAxis.OFFSET_X and direction.x == "left":
                number = -number
            if axis == ElevationAxis.OFFSET_Y and direction.y == "up":
                number = -number
        return number

    def direction(self, level: int) -> ElevationDirection:
        if level in self.settings.directions:
            return self.settings.directions[level]
        return self.specs[level].direction

    def _term(self, raw: Any) -> tuple[str, Any]:
        """CSS term for a raw value plus its resolved literal."""
        value = self.resolver.resolve_raw(raw, mode=self.mode)
        ref = parse_reference(raw)
        if ref is not None and ref.collection == Collection.TOKENS:
            leaf = self.resolver.index.lookup(Collection.TOKENS, ref.path)
            if leaf is not None and parse_reference(leaf.raw_value) is None:
                return f"var({self.resolver.variable_name_for(Collection.TOKENS, leaf.location)})", value
        return str(value), value

    def shadow_color(self, level: int) -> str:
        """Transparency mix of the level's shadow color and opacity."""
        color_raw = _fallback_chain(self.specs, level, "color")
        opacity_raw = _fallback_chain(self.specs, level, "opacity")
        if color_raw is None:
            raise UnresolvedPath(
                f"elevation-{level} has no shadow color",
                Collection.BRAND.value,
                ("elevations", f"elevation-{level}", "color"),
            )
        color_term, _ = self._term(color_raw)
        if opacity_raw is None:
            return color_term

        opacity_term, opacity_value = self._term(opacity_raw)
        number = to_number(opacity_value)
        if number is None:
            raise UnresolvedPath(
                f"elevation-{level} opacity did not resolve to a number: {opacity_value!r}",
                Collection.BRAND.value,
                ("elevations", f"elevation-{level}", "opacity"),
            )
        # Opacity tokens are fractions (0.4) or percentages (40).
        unit = "100%" if number <= 1 else "1%"
        if opacity_term.startswith("var("):
            amount = f"calc({opacity_term} * {unit})"
        else:
            percent = number * 100 if number <= 1 else number
            amount = f"{percent:g}%"
        return f"color-mix(in srgb, {color_term} {amount}, transparent)"

    def compose(self, level: int) -> ElevationLevel:
        """All five outputs of a level; raises on the first failing one."""
        return ElevationLevel(
            level=level,
            offset_x=self.axis_value(level, ElevationAxis.OFFSET_X),
            offset_y=self.axis_value(level, ElevationAxis.OFFSET_Y),
            blur=self.axis_value(level, ElevationAxis.BLUR),
            spread=self.axis_value(level, ElevationAxis.SPREAD),
            shadow_color=self.shadow_color(level),
            axis_tokens={axis: self.axis_token(level, axis)[0] for axis in ElevationAxis},
        )

    def output_path(self, level: int, suffix: str) -> tuple[str, ...]:
        return ("themes", self.mode.value, "elevations", f"elevation-{level}", suffix)
