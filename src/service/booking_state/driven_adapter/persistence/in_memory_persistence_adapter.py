"""
In-memory Persistence Adapter

Keeps serialized bytes rather than the lists themselves, so callers never
share live references with the store (same contract as the file adapter).
"""

from typing import Any

import orjson

from src.platform.exception.exceptions import PersistenceError
from src.service.booking_state.app.interface.i_persistence_adapter import (
    IPersistenceAdapter,
    StorageSlot,
)


class InMemoryPersistenceAdapter(IPersistenceAdapter):
    def __init__(self) -> None:
        self._slots: dict[StorageSlot, bytes] = {}

    def save(self, slot: StorageSlot, items: list[dict[str, Any]]) -> None:
        try:
            self._slots[slot] = orjson.dumps(items)
        except TypeError as e:
            raise PersistenceError(f'Cannot serialize {slot.value}: {e}') from e

    def load(self, slot: StorageSlot) -> list[dict[str, Any]]:
        raw = self._slots.get(slot)
        if raw is None:
            return []
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            return []
        return data if isinstance(data, list) else []

    def put_raw(self, slot: StorageSlot, raw: bytes) -> None:
        """Store bytes verbatim (used to simulate a corrupted slot)."""
        self._slots[slot] = raw

    def clear(self) -> None:
        self._slots.clear()
