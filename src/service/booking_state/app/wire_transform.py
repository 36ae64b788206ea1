"""
Wire <-> domain transforms.

The service omits ``booked_seats`` and ``type`` for fresh shows; they default
to ``[]`` and ``"show"`` so a show read back from the wire is always complete.
"""

from collections.abc import Sequence
from datetime import datetime

from src.service.booking_state.app.dto.wire_schema import (
    BookingResponse,
    CreateBookingRequest,
    CreateShowRequest,
    ShowResponse,
)
from src.service.booking_state.domain.entity import Booking, Show
from src.service.booking_state.domain.enum import ShowType


def transform_show_response(api_show: ShowResponse) -> Show:
    return Show(
        id=api_show.id,
        name=api_show.name,
        start_time=api_show.start_time,
        total_seats=api_show.total_seats,
        booked_seats=api_show.booked_seats,
        price=api_show.price,
        type=api_show.type,
    )


def transform_show_to_response(show: Show) -> ShowResponse:
    return ShowResponse(
        id=show.id,
        name=show.name,
        start_time=show.start_time,
        total_seats=show.total_seats,
        booked_seats=list(show.booked_seats),
        price=show.price,
        type=show.type,
    )


def transform_booking_response(api_booking: BookingResponse) -> Booking:
    return Booking(
        id=api_booking.id,
        show_id=api_booking.show_id,
        user_id=api_booking.user_id,
        seats=api_booking.seats,
        status=api_booking.status,
        total_amount=api_booking.total_amount,
        created_at=api_booking.created_at,
    )


def transform_show_to_request(
    *,
    name: str,
    start_time: datetime | str,
    total_seats: int,
    price: float,
    type: ShowType | str = ShowType.SHOW,
) -> CreateShowRequest:
    return CreateShowRequest(
        name=name,
        start_time=start_time,
        total_seats=total_seats,
        price=price,
        type=type or ShowType.SHOW,
    )


def transform_booking_to_request(
    *, show_id: str, seats: Sequence[int], user_id: str
) -> CreateBookingRequest:
    return CreateBookingRequest(show_id=show_id, user_id=user_id, seats=list(seats))
