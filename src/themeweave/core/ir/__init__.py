"""
themeweave IR types.

All types are re-exported from this package.
"""

from .documents import (
    WILDCARD,
    ChangeEvent,
    Collection,
    ColorMode,
    ElevationAxis,
    ElevationDirection,
    ElevationLevel,
    ElevationSettings,
    ElevationSpec,
    LeafNode,
    LiteralValue,
    OverrideChange,
    Reference,
    ResolvedVariable,
    ScaleByDefault,
    StoreState,
)

__all__ = [
    "WILDCARD",
    "ChangeEvent",
    "Collection",
    "ColorMode",
    "ElevationAxis",
    "ElevationDirection",
    "ElevationLevel",
    "ElevationSettings",
    "ElevationSpec",
    "LeafNode",
    "LiteralValue",
    "OverrideChange",
    "Reference",
    "ResolvedVariable",
    "ScaleByDefault",
    "StoreState",
]
