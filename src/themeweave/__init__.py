"""
themeweave - design token resolution and CSS-variable synthesis.

Turns a token document, a brand/theme tree and a component mapping, plus user
overrides, into a flat and consistent set of CSS custom properties, and keeps
that projection up to date as individual values are edited.
"""

from __future__ import annotations

from ._version import get_version
from .core import ir
from .core.errors import (
    CyclicReference,
    ResolutionError,
    ThemeweaveError,
    UnresolvedPath,
    VariableNameCollision,
)
from .core.store import ThemeStore

__version__ = get_version()

__all__ = [
    "CyclicReference",
    "ResolutionError",
    "ThemeStore",
    "ThemeweaveError",
    "UnresolvedPath",
    "VariableNameCollision",
    "__version__",
    "ir",
]
