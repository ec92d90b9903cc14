"""
Reference resolver.

Resolves any document leaf (literal or reference) to a terminal literal,
applying token overrides, detecting cycles and capping the hop count.

Output naming (variable_name_for) is a separate pure function so the same
resolution logic serves both CSS-variable emission and plain value lookups.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any, Protocol

from .document_index import DocumentIndex, mode_of
from .errors import CyclicReference, ResolutionTooDeep, UnresolvedPath
from .ir import Collection, ColorMode, LiteralValue, Reference
from .references import parse_reference, token_name_for, unwrap_value

DEFAULT_MAX_DEPTH = 32
DEFAULT_PREFIX = "tw"

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_INVALID_RE = re.compile(r"[^a-z0-9-]+")


class OverrideSource(Protocol):
    """Anything that can answer an override lookup by token identity."""

    def get(self, token_name: str) -> Any: ...


# =============================================================================
# Naming
# =============================================================================


def kebab(segment: str) -> str:
    """Kebab-case one path segment: "offsetX" -> "offset-x", "0.5x" -> "0-5x"."""
    text = _CAMEL_RE.sub("-", segment).lower()
    text = _INVALID_RE.sub("-", text)
    return re.sub(r"-+", "-", text).strip("-")


def variable_name_for(
    collection: Collection | str,
    path: Sequence[str],
    prefix: str = DEFAULT_PREFIX,
) -> str:
    """
    Deterministic output variable name for a source path.

    Example:
        variable_name_for("tokens", ("size", "md")) -> "--tw-tokens-size-md"
    """
    collection = Collection.parse(collection)
    parts = [kebab(prefix), collection.value]
    parts.extend(part for part in (kebab(segment) for segment in path) if part)
    return "--" + "-".join(part for part in parts if part)


def path_key(collection: Collection | str, path: Sequence[str]) -> str:
    return f"{Collection.parse(collection).value}:{'.'.join(path)}"


def as_literal(value: Any, collection: Collection, location: Sequence[str]) -> LiteralValue:
    """
    Terminal document value as a literal.

    Lists of scalars (DTCG font-family stacks, cubic-bezier points) are joined
    CSS-style; any other structure cannot become a variable value.

    Raises:
        UnresolvedPath: The value is neither a scalar nor a list of scalars
    """
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, list) and value and all(isinstance(item, (str, int, float)) for item in value):
        return ", ".join(str(item) for item in value)
    raise UnresolvedPath(
        f"Non-literal value at {path_key(collection, location)}: {value!r}",
        collection.value,
        tuple(location),
    )


# =============================================================================
# Resolver
# =============================================================================


class Resolver:
    """
    Recursive-descent resolver over a DocumentIndex and an override source.

    Never mutates documents or overrides; identical inputs always give
    identical outputs.
    """

    def __init__(
        self,
        index: DocumentIndex,
        overrides: OverrideSource | None = None,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        prefix: str = DEFAULT_PREFIX,
    ):
        self.index = index
        self.overrides: OverrideSource = overrides if overrides is not None else {}
        self.max_depth = max_depth
        self.prefix = prefix

    def resolve(
        self,
        collection: Collection | str,
        path: Sequence[str],
        visiting: frozenset[str] = frozenset(),
        *,
        mode: ColorMode | str | None = None,
    ) -> LiteralValue:
        """
        Resolve a document path to its terminal literal.

        Args:
            collection: Document the path lives in
            path: Path segments
            visiting: Path keys already on the current reference chain
            mode: Mode for theme-agnostic brand paths (defaults to the index mode)

        Raises:
            UnresolvedPath: The path (or a path it references) does not exist
            CyclicReference: The reference chain revisits a leaf
            ResolutionTooDeep: The chain exceeds max_depth hops
        """
        collection = Collection.parse(collection)
        path = tuple(path)

        if len(visiting) >= self.max_depth:
            raise ResolutionTooDeep(
                f"Reference chain deeper than {self.max_depth} hops at {path_key(collection, path)}",
                collection.value,
                path,
            )

        leaf = self.index.lookup(collection, path, mode=mode)
        if leaf is None:
            raise UnresolvedPath(
                f"Unresolved path {path_key(collection, path)}", collection.value, path
            )

        ref = parse_reference(leaf.raw_value)
        if ref is None:
            value = unwrap_value(leaf.raw_value)
            if value is None:
                raise UnresolvedPath(
                    f"Empty value at {path_key(collection, leaf.location)}",
                    collection.value,
                    path,
                )
            if collection == Collection.TOKENS:
                override = self.overrides.get(token_name_for(leaf.location))
                if override is not None:
                    return override
            return as_literal(value, collection, leaf.location)

        key = path_key(collection, leaf.location)
        if key in visiting:
            raise CyclicReference(
                f"Cyclic reference at {key}",
                collection.value,
                path,
                chain=sorted(visiting),
            )

        leaf_mode = mode_of(leaf.location) if collection == Collection.BRAND else None
        return self.resolve(
            ref.collection,
            ref.path,
            visiting | {key},
            mode=leaf_mode or mode,
        )

    def resolve_reference(self, ref: Reference, *, mode: ColorMode | str | None = None) -> LiteralValue:
        return self.resolve(ref.collection, ref.path, mode=mode)

    def resolve_raw(self, raw: Any, *, mode: ColorMode | str | None = None) -> Any:
        """Resolve a raw document value: references are followed, literals returned."""
        ref = parse_reference(raw)
        if ref is None:
            return unwrap_value(raw)
        return self.resolve_reference(ref, mode=mode)

    def resolve_or_default(
        self,
        collection: Collection | str,
        path: Sequence[str],
        default: Any = None,
        *,
        mode: ColorMode | str | None = None,
    ) -> Any:
        """Resolve, treating an unresolved path as unset."""
        try:
            return self.resolve(collection, path, mode=mode)
        except UnresolvedPath:
            return default

    def chain(self, collection: Collection | str, path: Sequence[str]) -> list[str]:
        """
        Path keys visited while resolving, origin first.

        Stops early (without raising) at a missing leaf or a repeated key.
        """
        collection = Collection.parse(collection)
        path = tuple(path)
        mode: str | None = None
        hops: list[str] = []
        while len(hops) <= self.max_depth:
            leaf = self.index.lookup(collection, path, mode=mode)
            if leaf is None:
                break
            key = path_key(collection, leaf.location)
            if key in hops:
                hops.append(key)
                break
            hops.append(key)
            ref = parse_reference(leaf.raw_value)
            if ref is None:
                break
            if collection == Collection.BRAND:
                mode = mode_of(leaf.location) or mode
            collection, path = ref.collection, ref.path
        return hops

    def variable_name_for(self, collection: Collection | str, path: Sequence[str]) -> str:
        return variable_name_for(collection, path, self.prefix)
