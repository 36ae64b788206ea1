"""
Persistence Adapter Interface

Durable key/value mirror of the booking state. Each slot holds one serialized
snapshot of a whole collection.
"""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any


class StorageSlot(StrEnum):
    SHOWS = 'booking_shows_data'
    BOOKINGS = 'booking_bookings_data'
    PENDING_WRITES = 'booking_pending_writes'


class IPersistenceAdapter(ABC):
    @abstractmethod
    def save(self, slot: StorageSlot, items: list[dict[str, Any]]) -> None:
        """
        Overwrite the slot with ``items``.

        Raises:
            PersistenceError: the snapshot could not be serialized or written
        """
        pass

    @abstractmethod
    def load(self, slot: StorageSlot) -> list[dict[str, Any]]:
        """Return the slot's items, or [] when absent or corrupt. Never raises."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every slot."""
        pass
