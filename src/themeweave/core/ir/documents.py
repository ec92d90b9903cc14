"""
IR types for token documents, references and resolved output.

The three source documents (tokens, brand/theme tree, component mapping)
stay plain JSON-like dicts; these models describe what is read out of them
and what the engine produces.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# Terminal values a leaf can resolve to.
LiteralValue = str | int | float | bool

# Wildcard used by override notifications for bulk changes.
WILDCARD = "*"

# =============================================================================
# Enums
# =============================================================================


class Collection(StrEnum):
    """Addressable collections (one per source document)."""

    TOKENS = "tokens"
    BRAND = "brand"
    COMPONENTS = "components"

    @classmethod
    def parse(cls, value: str | Collection) -> Collection:
        """Parse a collection or document kind name, accepting legacy aliases."""
        if isinstance(value, Collection):
            return value
        key = value.strip().lower()
        if key in _COLLECTION_ALIASES:
            return _COLLECTION_ALIASES[key]
        raise ValueError(f"Unknown collection: {value!r}")


_COLLECTION_ALIASES: dict[str, Collection] = {
    "tokens": Collection.TOKENS,
    "token": Collection.TOKENS,
    "brand": Collection.BRAND,
    "theme": Collection.BRAND,
    "components": Collection.COMPONENTS,
    "component": Collection.COMPONENTS,
    "mapping": Collection.COMPONENTS,
    "ui-kit": Collection.COMPONENTS,
    "uikit": Collection.COMPONENTS,
}


class ColorMode(StrEnum):
    """Theme mode used for theme-agnostic brand references."""

    LIGHT = "light"
    DARK = "dark"


class ElevationAxis(StrEnum):
    """Shadow geometry axes."""

    BLUR = "blur"
    SPREAD = "spread"
    OFFSET_X = "offsetX"
    OFFSET_Y = "offsetY"


class StoreState(StrEnum):
    """Reactive store lifecycle states."""

    IDLE = "idle"
    RESOLVING = "resolving"


# =============================================================================
# References and leaves
# =============================================================================


class Reference(BaseModel):
    """A parsed pointer from one document leaf to another location."""

    model_config = ConfigDict(frozen=True)

    collection: Collection
    path: tuple[str, ...] = Field(min_length=1)

    @property
    def dotted(self) -> str:
        return ".".join(self.path)

    def __str__(self) -> str:
        return f"{{{self.collection.value}.{self.dotted}}}"


class LeafNode(BaseModel):
    """A terminal document node: declared type plus raw (unresolved) value."""

    model_config = ConfigDict(frozen=True)

    type: str | None = None
    raw_value: Any = None
    location: tuple[str, ...] = Field(
        default=(), description="Concrete document path that matched the lookup"
    )


class ResolvedVariable(BaseModel):
    """A single output written to the style scope."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str | int | float
    source: str | None = Field(default=None, description="Originating path key")

    def css_value(self) -> str:
        if isinstance(self.value, bool):
            return "1" if self.value else "0"
        if isinstance(self.value, float) and self.value.is_integer():
            return str(int(self.value))
        return str(self.value)


# =============================================================================
# Elevation
# =============================================================================


class ScaleByDefault(BaseModel):
    """Per-axis switches deriving level N from level 0 plus N scale steps."""

    model_config = ConfigDict(frozen=True)

    blur: bool = True
    spread: bool = False
    offset_x: bool = False
    offset_y: bool = False

    def for_axis(self, axis: ElevationAxis) -> bool:
        return {
            ElevationAxis.BLUR: self.blur,
            ElevationAxis.SPREAD: self.spread,
            ElevationAxis.OFFSET_X: self.offset_x,
            ElevationAxis.OFFSET_Y: self.offset_y,
        }[axis]


class ElevationDirection(BaseModel):
    """Offset direction for one elevation level."""

    model_config = ConfigDict(frozen=True)

    x: Literal["left", "right"] = "right"
    y: Literal["up", "down"] = "down"


class ElevationSettings(BaseModel):
    """User-editable elevation state held by the store."""

    model_config = ConfigDict(frozen=True)

    scale_by_default: ScaleByDefault = Field(default_factory=ScaleByDefault)
    directions: dict[int, ElevationDirection] = Field(
        default_factory=dict,
        description="Per-level direction; levels not listed use the document default",
    )


class ElevationSpec(BaseModel):
    """Raw (unresolved) shadow definition for one elevation level."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=0, le=4)
    axes: dict[ElevationAxis, Any] = Field(default_factory=dict)
    color: Any = None
    opacity: Any = None
    direction: ElevationDirection = Field(default_factory=ElevationDirection)


class ElevationLevel(BaseModel):
    """Composed shadow for one level."""

    model_config = ConfigDict(frozen=True)

    level: int
    offset_x: float
    offset_y: float
    blur: float
    spread: float
    shadow_color: str
    axis_tokens: dict[ElevationAxis, str | None] = Field(
        default_factory=dict, description="Token identity used per axis, if any"
    )


# =============================================================================
# Notifications
# =============================================================================


class OverrideChange(BaseModel):
    """Emitted synchronously by the override layer after each mutation."""

    model_config = ConfigDict(frozen=True)

    changed: str

    @property
    def is_bulk(self) -> bool:
        return self.changed == WILDCARD


class ChangeEvent(BaseModel):
    """Emitted by the store after each settled resolution pass."""

    model_config = ConfigDict(frozen=True)

    changed_variable_names: tuple[str, ...] = ()

    def touches(self, name: str) -> bool:
        return name in self.changed_variable_names
