import pytest

from src.service.booking_state.domain.dashboard_summary import DashboardSummary
from src.service.booking_state.domain.entity import Booking, Show


@pytest.mark.unit
class TestDashboardSummary:
    def test_build__empty_collections(self) -> None:
        summary = DashboardSummary.build(shows=[], bookings=[])

        assert summary == DashboardSummary(
            show_count=0, trip_count=0, confirmed_booking_count=0, total_revenue=0
        )

    def test_build__separates_event_types_and_ignores_unconfirmed(self) -> None:
        start = '2030-06-01T19:30:00Z'
        shows = [
            Show(id='s1', name='Hamlet', start_time=start, total_seats=5, price=10),
            Show(id='s2', name='Macbeth', start_time=start, total_seats=5, price=10),
            Show(id='t1', name='Bus', start_time=start, total_seats=5, price=10, type='trip'),
        ]
        bookings = [
            Booking(id='b1', show_id='s1', user_id='u', seats=[1], total_amount=10),
            Booking(id='b2', show_id='t1', user_id='u', seats=[1, 2], total_amount=20),
            Booking(id='b3', show_id='s2', user_id='u', seats=[3], status='failed', total_amount=10),
            Booking(id='b4', show_id='s2', user_id='u', seats=[4], status='pending', total_amount=10),
        ]

        summary = DashboardSummary.build(shows=shows, bookings=bookings)

        assert summary.show_count == 2
        assert summary.trip_count == 1
        assert summary.confirmed_booking_count == 2
        assert summary.total_revenue == 30
