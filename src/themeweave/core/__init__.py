"""
themeweave core: reference parsing, document indexing, resolution, derived
values (elevation, contrast) and the reactive store.
"""

from .errors import (
    ConfigError,
    CyclicReference,
    DocumentError,
    MalformedReference,
    ResolutionError,
    ResolutionTooDeep,
    ThemeweaveError,
    UnresolvedPath,
    VariableNameCollision,
)
from .overrides import OverrideLayer
from .preview import PreviewChannel
from .resolver import Resolver, variable_name_for
from .store import ThemeStore

__all__ = [
    "ConfigError",
    "CyclicReference",
    "DocumentError",
    "MalformedReference",
    "OverrideLayer",
    "PreviewChannel",
    "ResolutionError",
    "ResolutionTooDeep",
    "Resolver",
    "ThemeStore",
    "ThemeweaveError",
    "UnresolvedPath",
    "VariableNameCollision",
    "variable_name_for",
]
