from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

import attrs
import uuid_utils

from src.platform.logging.loguru_io import Logger
from src.service.booking_state.domain.entity.show_entity import Show
from src.service.booking_state.domain.enum.booking_status import BookingStatus
from src.service.booking_state.domain.value_object import to_iso_z, to_utc


LOCAL_BOOKING_ID_PREFIX = 'booking_'


def _validate_seats(instance: object, attribute: attrs.Attribute, value: tuple) -> None:
    if not value:
        raise ValueError('Booking seats cannot be empty')
    if len(set(value)) != len(value):
        raise ValueError('Booking seats contains duplicates')


def _to_seat_tuple(value: Iterable[int]) -> tuple[int, ...]:
    return tuple(int(seat) for seat in value)


def new_booking_id() -> str:
    return f'{LOCAL_BOOKING_ID_PREFIX}{uuid_utils.uuid7()}'


@attrs.define(frozen=True)
class Booking:
    id: str
    show_id: str
    user_id: str
    seats: tuple[int, ...] = attrs.field(converter=_to_seat_tuple, validator=_validate_seats)
    status: BookingStatus = attrs.field(default=BookingStatus.CONFIRMED, converter=BookingStatus)
    total_amount: float = attrs.field(default=0.0, converter=float)
    created_at: datetime = attrs.field(
        factory=lambda: datetime.now(timezone.utc), converter=to_utc
    )

    @classmethod
    @Logger.io
    def create(cls, *, show: Show, seats: Iterable[int], user_id: str) -> 'Booking':
        """
        Price is captured now; later price changes on the show do not touch
        existing bookings.
        """
        seats = tuple(seats)
        return cls(
            id=new_booking_id(),
            show_id=show.id,
            user_id=user_id,
            seats=seats,
            status=BookingStatus.CONFIRMED,
            total_amount=len(seats) * show.price,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def is_local_only(self) -> bool:
        return self.id.startswith(LOCAL_BOOKING_ID_PREFIX)

    def repoint_show(self, show_id: str) -> 'Booking':
        return attrs.evolve(self, show_id=show_id)

    def to_storage(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'show_id': self.show_id,
            'user_id': self.user_id,
            'seats': list(self.seats),
            'status': self.status.value,
            'total_amount': self.total_amount,
            'created_at': to_iso_z(self.created_at),
        }

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> 'Booking':
        return cls(
            id=data['id'],
            show_id=data['show_id'],
            user_id=data['user_id'],
            seats=data['seats'],
            status=data['status'],
            total_amount=data['total_amount'],
            created_at=data['created_at'],
        )
