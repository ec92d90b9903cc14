"""
Override layer: user literals that outrank token document values.

Overrides are a flat token-name -> literal map persisted as JSON under a
single well-known key of a simple key-value store. Every mutation persists
immediately and then synchronously notifies listeners with
OverrideChange(changed=<token name> | "*").
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

from .errors import DocumentError
from .ir import WILDCARD, LiteralValue, OverrideChange

logger = logging.getLogger(__name__)

OVERRIDES_STORAGE_KEY = "token-overrides"

OverrideListener = Callable[[OverrideChange], None]


# =============================================================================
# Key-value stores
# =============================================================================


class KeyValueStore(Protocol):
    """Minimal string key-value persistence."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store, used in tests and when no storage path is configured."""

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """
    All keys kept in one JSON object on disk.

    The file is re-read on every get so separate processes (CLI and a running
    editor) see each other's writes.
    """

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise DocumentError(f"Invalid storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise DocumentError(f"Storage file {self.path} must contain a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


# =============================================================================
# Override layer
# =============================================================================


def _check_literal(token_name: str, value: Any) -> None:
    if not token_name:
        raise ValueError("Override token name must be non-empty")
    if not isinstance(value, (str, int, float, bool)):
        raise TypeError(f"Override for {token_name} must be a literal, got {type(value).__name__}")


def parse_overrides_json(text: str) -> dict[str, LiteralValue]:
    """Parse the persisted override map; raises DocumentError on bad input."""
    try:
        data = json.loads(text) if text else {}
    except json.JSONDecodeError as e:
        raise DocumentError(f"Invalid override JSON: {e}") from e
    if not isinstance(data, dict):
        raise DocumentError("Override JSON must be an object of token name -> literal")
    for name, value in data.items():
        try:
            _check_literal(name, value)
        except (TypeError, ValueError) as e:
            raise DocumentError(str(e)) from e
    return data


class OverrideLayer:
    """Flat token-name -> literal map with immediate persistence."""

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        storage_key: str = OVERRIDES_STORAGE_KEY,
    ):
        self.storage: KeyValueStore = storage if storage is not None else MemoryKeyValueStore()
        self.storage_key = storage_key
        self._listeners: list[OverrideListener] = []
        self._overrides: dict[str, LiteralValue] = self._load()

    def _load(self) -> dict[str, LiteralValue]:
        raw = self.storage.get(self.storage_key)
        if not raw:
            return {}
        try:
            return parse_overrides_json(raw)
        except DocumentError as e:
            logger.warning(f"Ignoring unreadable overrides under '{self.storage_key}': {e}")
            return {}

    def _persist(self) -> None:
        if self._overrides:
            self.storage.set(self.storage_key, self.to_json())
        else:
            self.storage.delete(self.storage_key)

    def _emit(self, changed: str) -> None:
        event = OverrideChange(changed=changed)
        for listener in list(self._listeners):
            listener(event)

    # -- queries -------------------------------------------------------------

    def get(self, token_name: str) -> LiteralValue | None:
        return self._overrides.get(token_name)

    def get_all(self) -> dict[str, LiteralValue]:
        return dict(self._overrides)

    def __contains__(self, token_name: object) -> bool:
        return token_name in self._overrides

    def __len__(self) -> int:
        return len(self._overrides)

    # -- mutations -----------------------------------------------------------

    def set(self, token_name: str, value: LiteralValue) -> None:
        _check_literal(token_name, value)
        self._overrides[token_name] = value
        self._persist()
        logger.debug(f"Override set: {token_name} = {value!r}")
        self._emit(token_name)

    def delete(self, token_name: str) -> None:
        if token_name not in self._overrides:
            return
        del self._overrides[token_name]
        self._persist()
        logger.debug(f"Override cleared: {token_name}")
        self._emit(token_name)

    def set_all(self, overrides: Mapping[str, LiteralValue]) -> None:
        """Bulk replace (e.g. loading a saved set); reports a wildcard change."""
        for name, value in overrides.items():
            _check_literal(name, value)
        self._overrides = dict(overrides)
        self._persist()
        logger.info(f"Loaded {len(self._overrides)} override(s)")
        self._emit(WILDCARD)

    def clear(self) -> None:
        self.set_all({})

    # -- serialization -------------------------------------------------------

    def to_json(self) -> str:
        return json.dumps(self._overrides, sort_keys=True)

    def load_json(self, text: str) -> None:
        self.set_all(parse_overrides_json(text))

    # -- listeners -----------------------------------------------------------

    def add_listener(self, listener: OverrideListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove
