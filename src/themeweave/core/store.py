"""
Reactive theme store.

Holds the three documents, the override layer, the active mode and the
elevation settings, and keeps a flat projection of output variables in sync
with them. Every mutation ends in one settled resolution pass that recomputes
all outputs, diffs them against the previous projection and notifies
subscribers with the names that actually changed.

One store is created by the application and passed to its collaborators;
there is no module-level instance.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from .contrast import DEFAULT_ON_TONE_CANDIDATES
from .document_index import DocumentIndex
from .errors import (
    CyclicReference,
    MalformedReference,
    ResolutionTooDeep,
    UnresolvedPath,
    VariableNameCollision,
)
from .ir import (
    ChangeEvent,
    Collection,
    ColorMode,
    ElevationSettings,
    LiteralValue,
    OverrideChange,
    ResolvedVariable,
    StoreState,
)
from .overrides import OverrideLayer
from .references import parse_reference
from .resolver import DEFAULT_MAX_DEPTH, DEFAULT_PREFIX, Resolver
from .synthesis import DEFAULT_SURFACES, PlannedOutput, plan_outputs

logger = logging.getLogger(__name__)

ChangeListener = Callable[[ChangeEvent], None]

_ABSENT = object()


class ThemeStore:
    """
    Documents + overrides -> consistent output variables.

    Example:
        store = ThemeStore(tokens=tokens, brand=brand, components=mapping)
        unsubscribe = store.subscribe(lambda event: apply(event.changed_variable_names))
        store.set_override("size/md", 24)
    """

    def __init__(
        self,
        tokens: dict[str, Any] | None = None,
        brand: dict[str, Any] | None = None,
        components: dict[str, Any] | None = None,
        *,
        overrides: OverrideLayer | None = None,
        mode: ColorMode | str = ColorMode.LIGHT,
        elevation: ElevationSettings | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        prefix: str = DEFAULT_PREFIX,
        surfaces: Sequence[str] = DEFAULT_SURFACES,
        on_tone_candidates: Sequence[str] = DEFAULT_ON_TONE_CANDIDATES,
    ):
        self._documents: dict[Collection, dict[str, Any]] = {
            Collection.TOKENS: copy.deepcopy(tokens or {}),
            Collection.BRAND: copy.deepcopy(brand or {}),
            Collection.COMPONENTS: copy.deepcopy(components or {}),
        }
        self._initial = copy.deepcopy(self._documents)
        self.overrides = overrides if overrides is not None else OverrideLayer()
        self.mode = ColorMode(mode)
        self.elevation = elevation or ElevationSettings()
        self.max_depth = max_depth
        self.prefix = prefix
        self.surfaces = tuple(surfaces)
        self.on_tone_candidates = tuple(on_tone_candidates)

        self.state = StoreState.IDLE
        self._values: dict[str, LiteralValue] = {}
        self._sources: dict[str, str] = {}
        self._listeners: list[ChangeListener] = []
        self._batch_depth = 0
        self._pending = False

        self._settle()
        self._remove_override_listener = self.overrides.add_listener(self._on_override_change)

    # =========================================================================
    # Derived views
    # =========================================================================

    def index(self, mode: ColorMode | str | None = None) -> DocumentIndex:
        return DocumentIndex(
            tokens=self._documents[Collection.TOKENS],
            brand=self._documents[Collection.BRAND],
            components=self._documents[Collection.COMPONENTS],
            mode=mode or self.mode,
        )

    def resolver(self, mode: ColorMode | str | None = None) -> Resolver:
        return Resolver(
            self.index(mode),
            self.overrides,
            max_depth=self.max_depth,
            prefix=self.prefix,
        )

    def document(self, kind: Collection | str) -> dict[str, Any]:
        """Deep copy of one source document."""
        return copy.deepcopy(self._documents[Collection.parse(kind)])

    # =========================================================================
    # Reads
    # =========================================================================

    def resolve(self, collection: Collection | str, path: Sequence[str]) -> LiteralValue:
        """Resolve a path against the current documents, overrides and mode."""
        return self.resolver().resolve(collection, path)

    def resolve_text(self, text: str) -> LiteralValue:
        """Resolve a reference string such as "{tokens.size.md}" or "brand.layers.x"."""
        ref = parse_reference(text)
        if ref is None:
            raise MalformedReference(f"Not a reference: {text!r}", raw=text)
        return self.resolver().resolve_reference(ref)

    def value_of(self, name: str) -> LiteralValue | None:
        """Current value of an output variable, or None if it has none."""
        return self._values.get(name)

    def variables(self) -> list[ResolvedVariable]:
        return [
            ResolvedVariable(name=name, value=value, source=self._sources.get(name))
            for name, value in self._values.items()
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    # =========================================================================
    # Mutations
    # =========================================================================

    def set_document(self, kind: Collection | str, document: Mapping[str, Any]) -> None:
        """
        Replace one source document wholesale.

        Raises:
            VariableNameCollision: The new document produces clashing output
                names; the previous document is kept.
        """
        collection = Collection.parse(kind)
        previous = self._documents[collection]
        self._documents[collection] = copy.deepcopy(dict(document))
        try:
            self._settle()
        except VariableNameCollision:
            self._documents[collection] = previous
            raise
        logger.info(f"Replaced {collection} document")

    def set_override(self, token_name: str, value: LiteralValue) -> None:
        self.overrides.set(token_name, value)

    def clear_override(self, token_name: str) -> None:
        self.overrides.delete(token_name)

    def clear_overrides(self, token_names: Sequence[str] | None = None) -> None:
        """Clear several overrides (all of them when None) in one pass."""
        with self.batch():
            if token_names is None:
                self.overrides.clear()
            else:
                for name in token_names:
                    self.overrides.delete(name)

    def set_mode(self, mode: ColorMode | str) -> None:
        self.mode = ColorMode(mode)
        self._settle()

    def set_elevation_settings(self, settings: ElevationSettings) -> None:
        self.elevation = settings
        self._settle()

    def reset(self) -> None:
        """Restore the start-up documents and drop every override."""
        with self.batch():
            self._documents = copy.deepcopy(self._initial)
            self.overrides.clear()
            self._pending = True

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group mutations so subscribers see a single settled pass."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending:
                self._pending = False
                self._settle()

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, callback: ChangeListener) -> Callable[[], None]:
        """Register a change callback; returns a function that unregisters it."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def close(self) -> None:
        """Detach from the override layer."""
        self._remove_override_listener()
        self._listeners.clear()

    def _on_override_change(self, change: OverrideChange) -> None:
        if self._batch_depth:
            self._pending = True
            return
        logger.debug(f"Override change: {change.changed}")
        self._settle()

    # =========================================================================
    # Resolution pass
    # =========================================================================

    def _plan(self) -> dict[str, PlannedOutput]:
        return plan_outputs(
            self.resolver(),
            self.elevation,
            surfaces=self.surfaces,
            candidates=self.on_tone_candidates,
        )

    def _compute(self, planned: dict[str, PlannedOutput]) -> dict[str, LiteralValue]:
        values: dict[str, LiteralValue] = {}
        for name, output in planned.items():
            try:
                values[name] = output.compute()
            except UnresolvedPath as e:
                logger.warning(f"{name}: {e.message}")
            except (CyclicReference, ResolutionTooDeep) as e:
                logger.error(f"{name}: {e.message}")
            else:
                continue
            if name in self._values:
                values[name] = self._values[name]
        return values

    def _settle(self) -> None:
        self.state = StoreState.RESOLVING
        try:
            planned = self._plan()
            values = self._compute(planned)
        finally:
            self.state = StoreState.IDLE

        previous = self._values
        changed = [name for name, value in values.items() if previous.get(name, _ABSENT) != value]
        changed.extend(name for name in previous if name not in values)

        self._values = values
        self._sources = {name: planned[name].source for name in values}
        if changed:
            self._emit(ChangeEvent(changed_variable_names=tuple(changed)))

    def _emit(self, event: ChangeEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

