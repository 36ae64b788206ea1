from collections.abc import Iterable

import attrs

from src.service.booking_state.domain.entity.booking_entity import Booking
from src.service.booking_state.domain.entity.show_entity import Show
from src.service.booking_state.domain.enum import BookingStatus, ShowType


@attrs.define(frozen=True)
class DashboardSummary:
    """Headline numbers of the admin dashboard."""

    show_count: int
    trip_count: int
    confirmed_booking_count: int
    total_revenue: float

    @classmethod
    def build(cls, *, shows: Iterable[Show], bookings: Iterable[Booking]) -> 'DashboardSummary':
        shows = list(shows)
        # Only confirmed bookings count as sales
        confirmed = [b for b in bookings if b.status == BookingStatus.CONFIRMED]
        return cls(
            show_count=sum(1 for s in shows if s.type == ShowType.SHOW),
            trip_count=sum(1 for s in shows if s.type == ShowType.TRIP),
            confirmed_booking_count=len(confirmed),
            total_revenue=sum(b.total_amount for b in confirmed),
        )
