from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

import attrs
import uuid_utils

from src.platform.exception.exceptions import ConflictError, DomainError
from src.service.booking_state.domain.enum.show_type import ShowType
from src.service.booking_state.domain.value_object import to_iso_z, to_utc


LOCAL_SHOW_ID_PREFIX = 'show_'


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Show {attribute.name} cannot be empty')


def _validate_positive(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value <= 0:
        raise ValueError(f'Show {attribute.name} must be greater than 0')


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value: float) -> None:
    if value < 0:
        raise ValueError(f'Show {attribute.name} cannot be negative')


def _validate_booked_seats(instance: 'Show', attribute: attrs.Attribute, value: tuple) -> None:
    if len(set(value)) != len(value):
        raise ValueError('Show booked_seats contains duplicates')
    out_of_range = [seat for seat in value if not 1 <= seat <= instance.total_seats]
    if out_of_range:
        raise ValueError(
            f'Show booked_seats {out_of_range} outside 1..{instance.total_seats}'
        )


def _to_seat_tuple(value: Iterable[int] | None) -> tuple[int, ...]:
    return tuple(int(seat) for seat in value or ())


def new_show_id() -> str:
    # uuid7 is time ordered, so locally generated ids sort by creation
    return f'{LOCAL_SHOW_ID_PREFIX}{uuid_utils.uuid7()}'


@attrs.define(frozen=True)
class Show:
    """
    A bookable event (theater show or bus trip).

    ``booked_seats`` only ever grows: there is no cancellation flow, so every
    change goes through ``reserve`` or ``merge_booked_seats``.
    """

    id: str = attrs.field(validator=_validate_non_empty_string)
    name: str = attrs.field(validator=_validate_non_empty_string)
    start_time: datetime = attrs.field(converter=to_utc)
    total_seats: int = attrs.field(converter=int, validator=_validate_positive)
    price: float = attrs.field(converter=float, validator=_validate_non_negative)
    booked_seats: tuple[int, ...] = attrs.field(
        factory=tuple, converter=_to_seat_tuple, validator=_validate_booked_seats
    )
    type: ShowType = attrs.field(default=ShowType.SHOW, converter=ShowType)

    @classmethod
    def create(
        cls,
        *,
        name: str,
        start_time: datetime | str,
        total_seats: int,
        price: float,
        type: ShowType | str = ShowType.SHOW,
    ) -> 'Show':
        return cls(
            id=new_show_id(),
            name=name,
            start_time=start_time,
            total_seats=total_seats,
            price=price,
            booked_seats=(),
            type=type or ShowType.SHOW,
        )

    @property
    def available_seat_count(self) -> int:
        return self.total_seats - len(self.booked_seats)

    @property
    def is_local_only(self) -> bool:
        return self.id.startswith(LOCAL_SHOW_ID_PREFIX)

    def is_seat_booked(self, seat: int) -> bool:
        return seat in self.booked_seats

    def find_unavailable(self, seats: Iterable[int]) -> list[int]:
        """Requested seats that are already booked, in request order."""
        booked = set(self.booked_seats)
        return [seat for seat in seats if seat in booked]

    def validate_seat_request(self, seats: Sequence[int]) -> None:
        """
        Raises:
            DomainError: empty request, duplicate or out-of-range seat numbers
            ConflictError: one or more seats are already booked
        """
        if not seats:
            raise DomainError('No seats selected')
        if len(set(seats)) != len(seats):
            raise DomainError('Each seat can only be selected once')
        out_of_range = [seat for seat in seats if not 1 <= seat <= self.total_seats]
        if out_of_range:
            raise DomainError(
                f'Seats {", ".join(map(str, out_of_range))} do not exist on this show'
            )
        unavailable = self.find_unavailable(seats)
        if unavailable:
            raise ConflictError(f'Seats {", ".join(map(str, unavailable))} are already booked')

    def reserve(self, seats: Sequence[int]) -> 'Show':
        self.validate_seat_request(seats)
        return attrs.evolve(self, booked_seats=(*self.booked_seats, *seats))

    def merge_booked_seats(self, seats: Iterable[int]) -> 'Show':
        """Union without conflict checks, for seats the remote already confirmed."""
        booked = set(self.booked_seats)
        extra = [seat for seat in dict.fromkeys(seats) if seat not in booked]
        if not extra:
            return self
        return attrs.evolve(self, booked_seats=(*self.booked_seats, *extra))

    def to_storage(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'start_time': to_iso_z(self.start_time),
            'total_seats': self.total_seats,
            'booked_seats': list(self.booked_seats),
            'price': self.price,
            'type': self.type.value,
        }

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> 'Show':
        return cls(
            id=data['id'],
            name=data['name'],
            start_time=data['start_time'],
            total_seats=data['total_seats'],
            price=data['price'],
            booked_seats=data.get('booked_seats') or (),
            type=data.get('type') or ShowType.SHOW,
        )
