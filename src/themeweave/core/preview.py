"""
Optimistic preview channel with debounced commits.

Rapid edits (dragging a slider) are proposed here first. Each token gets a
pending slot holding the latest value and the time it was last touched.
Preview listeners see every proposal immediately; pump() commits slots that
have been quiet for the debounce window through the store.
While a slot is pending, display_value() keeps showing its value so an
authoritative notification for an older value cannot snap the control back.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from .ir import Collection, LiteralValue
from .references import token_path_for
from .store import ThemeStore

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 150

PreviewListener = Callable[[str, LiteralValue], None]


@dataclass
class PendingSlot:
    """Latest proposed value for one token."""

    value: LiteralValue
    touched_at: float


class PreviewChannel:
    """Debounces proposed override edits in front of a ThemeStore."""

    def __init__(
        self,
        store: ThemeStore,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.debounce_ms = debounce_ms
        self.clock = clock
        self._slots: dict[str, PendingSlot] = {}
        self._listeners: list[PreviewListener] = []

    @property
    def pending(self) -> dict[str, LiteralValue]:
        return {token: slot.value for token, slot in self._slots.items()}

    def propose(self, token_name: str, value: LiteralValue) -> None:
        """Record a pending value and notify preview listeners right away."""
        self._slots[token_name] = PendingSlot(value=value, touched_at=self.clock())
        for listener in list(self._listeners):
            listener(token_name, value)

    def pump(self) -> list[str]:
        """
        Commit every slot quiet for at least the debounce window.

        Returns:
            Token names committed, in proposal order
        """
        now = self.clock()
        window = self.debounce_ms / 1000
        due = [token for token, slot in self._slots.items() if now - slot.touched_at >= window]
        for token in due:
            self._commit(token)
        return due

    def flush(self) -> list[str]:
        """Commit every pending slot regardless of the window."""
        due = list(self._slots)
        for token in due:
            self._commit(token)
        return due

    def cancel(self, token_name: str) -> None:
        """Drop a pending value without committing it."""
        self._slots.pop(token_name, None)

    def _commit(self, token_name: str) -> None:
        slot = self._slots.pop(token_name)
        logger.debug(f"Committing preview {token_name} = {slot.value!r}")
        self.store.set_override(token_name, slot.value)

    def display_value(self, token_name: str) -> LiteralValue:
        """Value a control should show: the pending one until it commits."""
        slot = self._slots.get(token_name)
        if slot is not None:
            return slot.value
        return self.store.resolve(Collection.TOKENS, token_path_for(token_name))

    def add_listener(self, listener: PreviewListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove
