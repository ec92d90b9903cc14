"""
Document index over the three source documents.

Exposes lookup(collection, path) -> LeafNode | None. Historical document
shapes (brand.themes.<mode>.layers vs the older brand.<mode>.layer, plural vs
singular group names, theme-agnostic paths) are handled here by an ordered
list of shape probes; nothing else in the engine branches on document shape.

Lookups are plain pointer descents; there is no caching at this layer.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from .ir import Collection, ColorMode, LeafNode

logger = logging.getLogger(__name__)

Path = tuple[str, ...]

_MODES: tuple[str, ...] = tuple(m.value for m in ColorMode)

# Group names that older documents spell differently.
_SEGMENT_ALIASES: dict[str, str] = {
    "layers": "layer",
    "layer": "layers",
    "palettes": "palette",
    "palette": "palettes",
    "elevations": "elevation",
    "elevation": "elevations",
    "properties": "property",
    "property": "properties",
    "dimensions": "dimension",
    "dimension": "dimensions",
}

# Current spelling of each group name that has an older singular form.
_PLURALS: dict[str, str] = {
    singular: plural for plural, singular in _SEGMENT_ALIASES.items() if plural.endswith("s")
}

# Wrapper keys stripped from the top of each document, in probe order.
_ROOT_KEYS: dict[Collection, tuple[str, ...]] = {
    Collection.TOKENS: ("tokens",),
    Collection.BRAND: ("brand",),
    Collection.COMPONENTS: ("ui-kit", "components"),
}

_MISSING = object()


# =============================================================================
# Shape probes
# =============================================================================


def _as_given(path: Path, mode: str) -> Path | None:
    return path


def _drop_themes_root(path: Path, mode: str) -> Path | None:
    """themes.<mode>.x -> <mode>.x (older documents)."""
    if len(path) >= 2 and path[0] == "themes" and path[1] in _MODES:
        return path[1:]
    return None


def _add_themes_root(path: Path, mode: str) -> Path | None:
    """<mode>.x -> themes.<mode>.x (current documents)."""
    if path and path[0] in _MODES:
        return ("themes", *path)
    return None


def _current_mode(path: Path, mode: str) -> Path | None:
    """Theme-agnostic x -> themes.<mode>.x."""
    if path and path[0] != "themes" and path[0] not in _MODES:
        return ("themes", mode, *path)
    return None


def _current_mode_legacy(path: Path, mode: str) -> Path | None:
    """Theme-agnostic x -> <mode>.x (older documents)."""
    if path and path[0] != "themes" and path[0] not in _MODES:
        return (mode, *path)
    return None


BRAND_SHAPE_PROBES: tuple[Callable[[Path, str], Path | None], ...] = (
    _as_given,
    _drop_themes_root,
    _add_themes_root,
    _current_mode,
    _current_mode_legacy,
)


def _alias_variant(path: Path) -> Path | None:
    """Swap the first group name after the mode prefix for its alias."""
    if path and path[0] == "themes":
        index = 2
    elif path and path[0] in _MODES:
        index = 1
    else:
        index = 0
    if index >= len(path) or path[index] not in _SEGMENT_ALIASES:
        return None
    return (*path[:index], _SEGMENT_ALIASES[path[index]], *path[index + 1 :])


def candidate_paths(collection: Collection, path: Path, mode: str) -> list[Path]:
    """Ordered, de-duplicated candidate locations for a lookup."""
    if collection != Collection.BRAND:
        return [path]

    candidates: list[Path] = []
    for probe in BRAND_SHAPE_PROBES:
        candidate = probe(path, mode)
        if candidate is None:
            continue
        for variant in (candidate, _alias_variant(candidate)):
            if variant is not None and variant not in candidates:
                candidates.append(variant)
    return candidates


def mode_of(location: Path) -> str | None:
    """Mode encoded in a concrete brand location, if any."""
    if len(location) >= 2 and location[0] == "themes" and location[1] in _MODES:
        return location[1]
    if location and location[0] in _MODES:
        return location[0]
    return None


def canonical_location(collection: Collection | str, location: Path) -> Path:
    """
    A concrete location rewritten into the current document shape.

    Older brand shapes name the same leaf differently (light.layer.x vs
    themes.light.layers.x); output names are derived from this form so they
    do not depend on which shape a document uses.
    """
    location = tuple(location)
    if Collection.parse(collection) != Collection.BRAND or not location:
        return location
    if location[0] in _MODES:
        location = ("themes", *location)
    index = 2 if location[0] == "themes" and mode_of(location) else 0
    if index < len(location) and location[index] in _PLURALS:
        location = (*location[:index], _PLURALS[location[index]], *location[index + 1 :])
    return location


# =============================================================================
# Node helpers
# =============================================================================


def _child(node: Any, segment: str) -> Any:
    if not isinstance(node, dict):
        return _MISSING
    if segment in node:
        return node[segment]
    wrapped = node.get("$value")
    if isinstance(wrapped, dict) and segment in wrapped:
        return wrapped[segment]
    return _MISSING


def _leaf_from(node: Any, location: Path) -> LeafNode | None:
    if isinstance(node, dict):
        if "$value" in node and not isinstance(node["$value"], dict):
            return LeafNode(type=node.get("$type"), raw_value=node["$value"], location=location)
        if "value" in node and "type" in node and not isinstance(node["value"], dict):
            return LeafNode(type=node.get("type"), raw_value=node["value"], location=location)
        return None
    if isinstance(node, (str, int, float, bool)):
        return LeafNode(type=None, raw_value=node, location=location)
    return None


def _children(node: dict[str, Any]) -> Iterator[tuple[str, Any]]:
    for key, value in node.items():
        if key.startswith("$"):
            continue
        yield key, value
    wrapped = node.get("$value")
    if isinstance(wrapped, dict):
        for key, value in wrapped.items():
            if not key.startswith("$") and key not in node:
                yield key, value


# =============================================================================
# Index
# =============================================================================


class DocumentIndex:
    """Addressable view over the tokens, brand and component-mapping documents."""

    def __init__(
        self,
        tokens: dict[str, Any] | None = None,
        brand: dict[str, Any] | None = None,
        components: dict[str, Any] | None = None,
        mode: ColorMode | str = ColorMode.LIGHT,
    ):
        self.documents: dict[Collection, dict[str, Any]] = {
            Collection.TOKENS: tokens or {},
            Collection.BRAND: brand or {},
            Collection.COMPONENTS: components or {},
        }
        self.mode = ColorMode(mode)

    def root(self, collection: Collection) -> dict[str, Any]:
        document = self.documents[collection]
        for key in _ROOT_KEYS[collection]:
            wrapped = document.get(key)
            if isinstance(wrapped, dict):
                return wrapped
        return document

    def lookup(
        self,
        collection: Collection | str,
        path: Path | list[str],
        mode: ColorMode | str | None = None,
    ) -> LeafNode | None:
        """
        Find the leaf addressed by path.

        Args:
            collection: Which document to search
            path: Path segments (no collection prefix)
            mode: Mode for theme-agnostic brand paths (defaults to the index mode)

        Returns:
            LeafNode with the concrete location that matched, or None
        """
        collection = Collection.parse(collection)
        path = tuple(path)
        if not path:
            return None
        active_mode = str(mode or self.mode)
        root = self.root(collection)

        for candidate in candidate_paths(collection, path, active_mode):
            node: Any = root
            for segment in candidate:
                node = _child(node, segment)
                if node is _MISSING:
                    break
            if node is _MISSING:
                continue
            leaf = _leaf_from(node, candidate)
            if leaf is not None:
                if candidate != path:
                    logger.debug(f"Resolved {collection}:{'.'.join(path)} via shape probe {candidate}")
                return leaf
        return None

    def iter_leaves(self, collection: Collection | str) -> Iterator[LeafNode]:
        """Yield every leaf of a document in document order."""
        collection = Collection.parse(collection)

        def walk(node: Any, location: Path) -> Iterator[LeafNode]:
            leaf = _leaf_from(node, location) if location else None
            if leaf is not None:
                yield leaf
                return
            if isinstance(node, dict):
                for key, child in _children(node):
                    yield from walk(child, (*location, key))

        yield from walk(self.root(collection), ())

    def group(self, collection: Collection | str, path: Path | list[str]) -> dict[str, Any] | None:
        """Return the raw group node at an exact path (no shape probes)."""
        node: Any = self.root(Collection.parse(collection))
        for segment in path:
            node = _child(node, segment)
            if node is _MISSING:
                return None
        if isinstance(node, dict):
            wrapped = node.get("$value")
            if isinstance(wrapped, dict):
                return wrapped
            return node
        return None

    def find_group(
        self,
        collection: Collection | str,
        path: Path | list[str],
        mode: ColorMode | str | None = None,
    ) -> tuple[Path, dict[str, Any]] | None:
        """Like group() but tries the shape probes; returns the matched location."""
        collection = Collection.parse(collection)
        for candidate in candidate_paths(collection, tuple(path), str(mode or self.mode)):
            node = self.group(collection, candidate)
            if node is not None:
                return candidate, node
        return None
