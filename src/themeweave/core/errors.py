"""
Error types for themeweave document loading, reference resolution and synthesis.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path


class ThemeweaveError(Exception):
    """Base exception for all themeweave errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class DocumentError(ThemeweaveError):
    """
    Raised when a source document cannot be loaded.

    Examples:
    - Invalid JSON or YAML
    - Top level is not an object
    - Unknown document kind
    """

    pass


class ConfigError(ThemeweaveError):
    """Raised when themeweave.toml cannot be parsed."""

    pass


class ResolutionError(ThemeweaveError):
    """
    Base class for failures while resolving a single output path.

    Resolution failures are local: the store catches them per output and
    keeps the previous known-good value.
    """

    def __init__(
        self,
        message: str,
        collection: str | None = None,
        path: Sequence[str] = (),
    ):
        self.collection = collection
        self.path = tuple(path)
        super().__init__(message)


class UnresolvedPath(ResolutionError):
    """
    Raised when a reference points nowhere.

    Recoverable: callers treat the value as unset and fall back to a default.
    """

    pass


class CyclicReference(ResolutionError):
    """
    Raised when a reference chain revisits a leaf it has already passed.

    Indicates a malformed document; no fallback value is guessed.
    """

    def __init__(
        self,
        message: str,
        collection: str | None = None,
        path: Sequence[str] = (),
        chain: Sequence[str] = (),
    ):
        self.chain = tuple(chain)
        super().__init__(message, collection, path)


class ResolutionTooDeep(ResolutionError):
    """Raised when a reference chain exceeds the configured hop limit."""

    pass


class MalformedReference(ThemeweaveError):
    """
    Raised only by strict reference validation.

    The default parser degrades ambiguous strings to literals instead.
    """

    def __init__(self, message: str, raw: object = None):
        self.raw = raw
        super().__init__(message)


class VariableNameCollision(ThemeweaveError):
    """
    Raised when two distinct source paths map to the same output variable.

    This is a document authoring error; the store refuses the document.
    """

    def __init__(self, collisions: dict[str, list[str]]):
        self.collisions = collisions
        details = "; ".join(
            f"{name} <- {', '.join(sources)}" for name, sources in sorted(collisions.items())
        )
        super().__init__(f"Output variable name collision: {details}")


@dataclass
class ErrorContext:
    """
    Context information for an error, pointing at a source document.

    Attributes:
        file: Path to the document where the error occurred
        pointer: Optional dotted location inside the document
        snippet: Optional excerpt of the offending content
    """

    file: Path
    pointer: str | None = None
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "Brand.json at themes.light.layers"
        """
        location = str(self.file)
        if self.pointer:
            location += f" at {self.pointer}"
        if self.snippet:
            return f"{location}\n    {self.snippet}"
        return location


def make_document_error(
    message: str,
    file: Path | None = None,
    pointer: str | None = None,
) -> DocumentError:
    """
    Helper to create a DocumentError with optional context.

    Args:
        message: Error description
        file: Optional source document path
        pointer: Optional dotted location inside the document

    Returns:
        DocumentError with context if a file was provided
    """
    if file is not None:
        return DocumentError(message, ErrorContext(file=file, pointer=pointer))
    return DocumentError(message)
