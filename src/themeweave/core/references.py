"""
Reference parsing for document leaf values.

Accepted forms:
- {tokens.size.md}                          token reference
- {brand.themes.light.palettes.core.tone}   brand reference (explicit mode)
- {brand.palettes.core.tone}                brand reference (current mode)
- tokens.size.md                            legacy unbracketed form
- {token.size.md} / {theme.layers...}       legacy collection aliases

Anything that does not match is returned unchanged as a literal. Malformed
bracket syntax is never an error here; strict checking lives in
validate_reference().
"""

from __future__ import annotations

import re
from typing import Any

from .errors import MalformedReference
from .ir import Collection, Reference

_PREFIXES: dict[str, Collection] = {
    "tokens": Collection.TOKENS,
    "token": Collection.TOKENS,
    "brand": Collection.BRAND,
    "theme": Collection.BRAND,
}

# Unbracketed legacy form: no whitespace, no braces, at least one dotted segment.
_LEGACY_RE = re.compile(r"^[A-Za-z]+(?:\.[^\s.{}]+)+$")

# Anything starting with a known collection name followed by a separator.
_LOOKS_LIKE_REF_RE = re.compile(r"^\s*\{?\s*(tokens?|brand|theme)\s*\.", re.IGNORECASE)


def unwrap_value(raw: Any) -> Any:
    """Strip a {"$value": ...} wrapper if present."""
    if isinstance(raw, dict) and "$value" in raw:
        return raw["$value"]
    return raw


def _normalise_inner(inner: str) -> str:
    inner = re.sub(r"\s*\.\s*", ".", inner.strip())
    inner = re.sub(r"\s+", ".", inner)
    inner = re.sub(r"\.+", ".", inner)
    return inner.strip(".")


def _split_reference(inner: str) -> Reference | None:
    parts = inner.split(".")
    collection = _PREFIXES.get(parts[0].lower())
    path = tuple(parts[1:])
    if collection is None or not path:
        return None
    if any(not segment or "{" in segment or "}" in segment for segment in path):
        return None
    return Reference(collection=collection, path=path)


def parse_reference(raw: Any) -> Reference | None:
    """Parse a raw leaf value into a Reference, or None when it is a literal."""
    value = unwrap_value(raw)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if text.startswith("{") or text.endswith("}"):
        if not (text.startswith("{") and text.endswith("}")):
            return None
        inner = text[1:-1]
        if "{" in inner or "}" in inner:
            return None
        inner = _normalise_inner(inner)
        if not inner:
            return None
        return _split_reference(inner)

    if _LEGACY_RE.match(text):
        return _split_reference(text)
    return None


def parse_value(raw: Any) -> Reference | Any:
    """
    Parse a raw document value.

    Returns:
        A Reference when the value is a reference string, otherwise the
        (unwrapped) value unchanged.
    """
    ref = parse_reference(raw)
    if ref is not None:
        return ref
    return unwrap_value(raw)


def is_reference(raw: Any) -> bool:
    return parse_reference(raw) is not None


def token_name_for(path: tuple[str, ...] | list[str]) -> str:
    """Override identity of a token path: ("size", "md") -> "size/md"."""
    return "/".join(path)


def token_path_for(token_name: str) -> tuple[str, ...]:
    """Inverse of token_name_for()."""
    return tuple(part for part in token_name.split("/") if part)


def referenced_token_name(raw: Any) -> str | None:
    """Return the token identity a raw value points at, if it is a token reference."""
    ref = parse_reference(raw)
    if ref is None or ref.collection != Collection.TOKENS:
        return None
    return token_name_for(ref.path)


def format_reference(ref: Reference) -> str:
    return str(ref)


def validate_reference(raw: Any) -> Reference | Any:
    """
    Strict variant of parse_value().

    Raises:
        MalformedReference: If the value looks like a reference but does not parse.
    """
    parsed = parse_value(raw)
    if isinstance(parsed, Reference):
        return parsed
    if isinstance(parsed, str):
        text = parsed.strip()
        if "{" in text or "}" in text or _LOOKS_LIKE_REF_RE.match(text):
            raise MalformedReference(f"Malformed reference: {parsed!r}", raw=raw)
    return parsed
