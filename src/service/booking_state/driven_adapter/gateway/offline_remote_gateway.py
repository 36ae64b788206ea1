"""
Offline Remote Gateway

Stands in for the booking service when no BOOKING_API_URL is configured:
every call fails as "unavailable", so the manager runs purely on its local
mirror and queues writes for a later sync.
"""

from src.platform.exception.exceptions import GatewayError
from src.service.booking_state.app.dto.wire_schema import (
    BookingResponse,
    CreateBookingRequest,
    CreateShowRequest,
    ShowResponse,
)
from src.service.booking_state.app.interface.i_remote_gateway import IRemoteGateway


_OFFLINE_MESSAGE = 'Booking service is not configured (offline mode)'


class OfflineRemoteGateway(IRemoteGateway):
    async def list_shows(self) -> list[ShowResponse]:
        raise GatewayError(_OFFLINE_MESSAGE)

    async def create_show(self, *, request: CreateShowRequest) -> ShowResponse:
        raise GatewayError(_OFFLINE_MESSAGE)

    async def list_bookings(self) -> list[BookingResponse]:
        raise GatewayError(_OFFLINE_MESSAGE)

    async def create_booking(self, *, request: CreateBookingRequest) -> BookingResponse:
        raise GatewayError(_OFFLINE_MESSAGE)

    async def health_check(self) -> bool:
        return False
