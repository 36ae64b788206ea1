"""
Remote Gateway Interface

Contract to the remote booking service. Implementations parse every answer
into the wire schemas and raise GatewayError for anything else: transport
failures, non-2xx answers, undecodable or schema-invalid bodies.
"""

from abc import ABC, abstractmethod

from src.service.booking_state.app.dto.wire_schema import (
    BookingResponse,
    CreateBookingRequest,
    CreateShowRequest,
    ShowResponse,
)


class IRemoteGateway(ABC):
    @abstractmethod
    async def list_shows(self) -> list[ShowResponse]:
        """
        Raises:
            GatewayError: service unavailable or answer unusable
        """
        pass

    @abstractmethod
    async def create_show(self, *, request: CreateShowRequest) -> ShowResponse:
        pass

    @abstractmethod
    async def list_bookings(self) -> list[BookingResponse]:
        pass

    @abstractmethod
    async def create_booking(self, *, request: CreateBookingRequest) -> BookingResponse:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """True when the service answers its health endpoint with 2xx. Never raises."""
        pass

    async def aclose(self) -> None:
        """Release network resources, if any."""
        return None
