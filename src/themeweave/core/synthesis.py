"""
Output variable planning.

plan_outputs() enumerates every output the engine writes to the style scope
as (name, source key, compute) triples:

- one per token leaf, brand leaf and component-mapping leaf;
- five per elevation level (raw elevation leaves are inputs only);
- one on-tone color per surface leaf.

Computation is deferred so the store can evaluate each output on its own and
keep a failing output's previous value without affecting its neighbours.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .contrast import DEFAULT_ON_TONE_CANDIDATES, normalize_hex, pick_on_tone
from .document_index import canonical_location
from .elevation import AXIS_OUTPUTS, SHADOW_COLOR_OUTPUT, ElevationComposer, format_px
from .errors import UnresolvedPath, VariableNameCollision
from .ir import Collection, ColorMode, ElevationSettings, LiteralValue
from .resolver import Resolver, path_key

logger = logging.getLogger(__name__)

DEFAULT_SURFACES: tuple[str, ...] = ("surface", "tone")

_ELEVATION_GROUPS = frozenset({"elevations", "elevation"})


@dataclass(frozen=True)
class PlannedOutput:
    """One output variable and how to compute it."""

    name: str
    source: str
    compute: Callable[[], LiteralValue]


def _is_elevation_input(location: tuple[str, ...]) -> bool:
    return any(segment in _ELEVATION_GROUPS for segment in location)


def _leaf_outputs(resolver: Resolver, collection: Collection) -> list[PlannedOutput]:
    outputs = []
    for leaf in resolver.index.iter_leaves(collection):
        if collection == Collection.BRAND and _is_elevation_input(leaf.location):
            continue
        location = leaf.location
        named = canonical_location(collection, location)
        outputs.append(
            PlannedOutput(
                name=resolver.variable_name_for(collection, named),
                source=path_key(collection, named),
                compute=lambda c=collection, p=location: resolver.resolve(c, p),
            )
        )
    return outputs


def _elevation_outputs(resolver: Resolver, settings: ElevationSettings) -> list[PlannedOutput]:
    outputs = []
    for mode in ColorMode:
        composer = ElevationComposer(resolver, settings, mode)
        for level in composer.levels:
            for axis, suffix in AXIS_OUTPUTS.items():
                path = composer.output_path(level, suffix)
                outputs.append(
                    PlannedOutput(
                        name=resolver.variable_name_for(Collection.BRAND, path),
                        source=path_key(Collection.BRAND, path),
                        compute=lambda c=composer, lv=level, a=axis: format_px(c.axis_value(lv, a)),
                    )
                )
            path = composer.output_path(level, SHADOW_COLOR_OUTPUT)
            outputs.append(
                PlannedOutput(
                    name=resolver.variable_name_for(Collection.BRAND, path),
                    source=path_key(Collection.BRAND, path),
                    compute=lambda c=composer, lv=level: c.shadow_color(lv),
                )
            )
    return outputs


def on_tone_name(surface_segment: str) -> str:
    """Sibling segment holding the on-tone color: "surface" -> "on-surface"."""
    return f"on-{surface_segment}"


def _on_tone_outputs(
    resolver: Resolver,
    surfaces: Sequence[str],
    candidates: Sequence[str],
) -> list[PlannedOutput]:
    outputs = []
    for leaf in resolver.index.iter_leaves(Collection.BRAND):
        if not leaf.location or leaf.location[-1] not in surfaces:
            continue
        surface_location = leaf.location
        named = canonical_location(Collection.BRAND, surface_location)
        target = (*named[:-1], on_tone_name(named[-1]))

        def compute(location: tuple[str, ...] = surface_location) -> LiteralValue:
            value = resolver.resolve(Collection.BRAND, location)
            surface = normalize_hex(value)
            if surface is None:
                raise UnresolvedPath(
                    f"Surface {path_key(Collection.BRAND, location)} is not a hex color: {value!r}",
                    Collection.BRAND.value,
                    location,
                )
            return pick_on_tone(surface, candidates)

        outputs.append(
            PlannedOutput(
                name=resolver.variable_name_for(Collection.BRAND, target),
                source=path_key(Collection.BRAND, target),
                compute=compute,
            )
        )
    return outputs


def plan_outputs(
    resolver: Resolver,
    settings: ElevationSettings | None = None,
    surfaces: Sequence[str] = DEFAULT_SURFACES,
    candidates: Sequence[str] = DEFAULT_ON_TONE_CANDIDATES,
) -> dict[str, PlannedOutput]:
    """
    Plan every output variable for the current documents.

    Derived outputs replace document leaves at the same source path (an
    authored "on-surface" leaf is superseded by the computed one).

    Raises:
        VariableNameCollision: Two distinct source paths map to one name
    """
    by_source: dict[str, PlannedOutput] = {}
    for output in (
        *_leaf_outputs(resolver, Collection.TOKENS),
        *_leaf_outputs(resolver, Collection.BRAND),
        *_leaf_outputs(resolver, Collection.COMPONENTS),
        *_elevation_outputs(resolver, settings or ElevationSettings()),
        *_on_tone_outputs(resolver, surfaces, candidates),
    ):
        if output.source in by_source:
            logger.debug(f"Derived output replaces document leaf {output.source}")
        by_source[output.source] = output

    planned: dict[str, PlannedOutput] = {}
    collisions: dict[str, list[str]] = {}
    for output in by_source.values():
        existing = planned.get(output.name)
        if existing is not None:
            collisions.setdefault(output.name, [existing.source]).append(output.source)
            continue
        planned[output.name] = output
    if collisions:
        raise VariableNameCollision(collisions)
    return planned
