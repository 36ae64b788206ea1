"""
Wire schemas of the remote booking service.

Field names are the service's (snake_case, except the booking request which
the service reads in camelCase). Every payload the gateway receives is parsed
into one of these models before it is transformed into a domain entity.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    PositiveInt,
    field_serializer,
    field_validator,
    model_validator,
)

from src.service.booking_state.domain.enum import BookingStatus, ShowType
from src.service.booking_state.domain.value_object import to_iso_z, to_utc


class _WireModel(BaseModel):
    # ids may come back as integers from some backends
    model_config = ConfigDict(coerce_numbers_to_str=True, extra='ignore')


class ShowResponse(_WireModel):
    id: str
    name: str
    start_time: datetime
    total_seats: PositiveInt
    booked_seats: list[int] = Field(default_factory=list)
    price: NonNegativeFloat
    type: ShowType = ShowType.SHOW

    @field_validator('start_time', mode='after')
    @classmethod
    def normalize_start_time(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_validator('booked_seats', mode='before')
    @classmethod
    def default_booked_seats(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator('type', mode='before')
    @classmethod
    def default_type(cls, v: Any) -> Any:
        return ShowType.SHOW if v is None else v

    @model_validator(mode='after')
    def check_booked_seats(self) -> 'ShowResponse':
        if len(set(self.booked_seats)) != len(self.booked_seats):
            raise ValueError('booked_seats contains duplicates')
        if any(not 1 <= seat <= self.total_seats for seat in self.booked_seats):
            raise ValueError(f'booked_seats outside 1..{self.total_seats}')
        return self


class BookingResponse(_WireModel):
    id: str
    show_id: str
    user_id: str
    seats: list[int] = Field(min_length=1)
    status: BookingStatus
    total_amount: NonNegativeFloat
    created_at: datetime

    @field_validator('created_at', mode='after')
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return to_utc(v)


class CreateShowRequest(_WireModel):
    name: str
    start_time: datetime
    total_seats: int
    price: float
    type: ShowType = ShowType.SHOW

    @field_serializer('start_time')
    def serialize_start_time(self, v: datetime) -> str:
        return to_iso_z(v)


class CreateBookingRequest(_WireModel):
    model_config = ConfigDict(populate_by_name=True)

    show_id: str = Field(alias='showId')
    user_id: str = Field(alias='userId')
    seats: list[int]


_ItemT = TypeVar('_ItemT', bound=BaseModel)


class ListEnvelope(BaseModel, Generic[_ItemT]):
    """``{"data": [...]}`` wrapper the admin list endpoints answer with."""

    data: list[_ItemT] = Field(default_factory=list)
