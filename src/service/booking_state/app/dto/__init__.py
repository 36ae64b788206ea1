"""Application layer DTOs"""

from src.service.booking_state.app.dto.pending_write import PendingWrite, PendingWriteKind
from src.service.booking_state.app.dto.state_snapshot import BookingStateSnapshot, SyncReport
from src.service.booking_state.app.dto.wire_schema import (
    BookingResponse,
    CreateBookingRequest,
    CreateShowRequest,
    ListEnvelope,
    ShowResponse,
)

__all__ = [
    'BookingResponse',
    'BookingStateSnapshot',
    'CreateBookingRequest',
    'CreateShowRequest',
    'ListEnvelope',
    'PendingWrite',
    'PendingWriteKind',
    'ShowResponse',
    'SyncReport',
]
