import attrs

from src.service.booking_state.domain.entity import Booking, Show


@attrs.define(frozen=True)
class BookingStateSnapshot:
    """Read-only view handed to the presentation layer after each operation."""

    shows: tuple[Show, ...]
    bookings: tuple[Booking, ...]
    loading: bool
    error: str | None
    initialized: bool
    pending_write_count: int = 0


@attrs.define(frozen=True)
class SyncReport:
    synced: int = 0
    rejected: int = 0
    remaining: int = 0
