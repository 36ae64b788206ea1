"""
Unit tests for the side-effect free queries and the small maintenance
operations of BookingStateManager.
"""

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from src.platform.exception.exceptions import PersistenceError
from src.service.booking_state.app.booking_state_manager import (
    CLEAR_FAILED_MESSAGE,
    BookingStateManager,
)
from src.service.booking_state.app.dto import BookingStateSnapshot
from src.service.booking_state.app.interface import StorageSlot
from src.service.booking_state.driven_adapter.persistence.in_memory_persistence_adapter import (
    InMemoryPersistenceAdapter,
)


@pytest.fixture
async def loaded_manager(
    manager: BookingStateManager,
    mock_gateway: AsyncMock,
    make_show_response: Any,
    make_booking_response: Any,
) -> BookingStateManager:
    mock_gateway.list_shows.return_value = [
        make_show_response(id='s1', booked_seats=[1, 2, 3]),
        make_show_response(id='t1', type='trip', price=20),
    ]
    mock_gateway.list_bookings.return_value = [
        make_booking_response(id='b1', show_id='s1', user_id='alice', seats=[1, 2]),
        make_booking_response(
            id='b2', show_id='s1', user_id='bob', seats=[3], total_amount=15.5
        ),
        make_booking_response(
            id='b3', show_id='gone', user_id='alice', seats=[4], status='failed', total_amount=9
        ),
    ]
    await manager.initialize()
    return manager


@pytest.mark.unit
class TestQueries:
    @pytest.mark.asyncio
    async def test_get_show__known_and_unknown_id(self, loaded_manager: BookingStateManager) -> None:
        assert loaded_manager.get_show('t1').name == 'Hamlet'
        assert loaded_manager.get_show('missing') is None

    @pytest.mark.asyncio
    async def test_get_bookings_by_user__in_insertion_order(
        self, loaded_manager: BookingStateManager
    ) -> None:
        bookings = loaded_manager.get_bookings_by_user('alice')

        assert [booking.id for booking in bookings] == ['b1', 'b3']

    @pytest.mark.asyncio
    async def test_get_bookings_by_show__dangling_and_unknown_references(
        self, loaded_manager: BookingStateManager
    ) -> None:
        assert [b.id for b in loaded_manager.get_bookings_by_show('s1')] == ['b1', 'b2']
        assert [b.id for b in loaded_manager.get_bookings_by_show('gone')] == ['b3']
        assert loaded_manager.get_bookings_by_show('never-existed') == []

    @pytest.mark.asyncio
    async def test_snapshot__is_an_immutable_view(self, loaded_manager: BookingStateManager) -> None:
        snapshot = loaded_manager.snapshot()

        assert isinstance(snapshot, BookingStateSnapshot)
        assert isinstance(snapshot.shows, tuple)
        assert len(snapshot.bookings) == 3
        assert snapshot.initialized is True
        assert snapshot.loading is False
        assert snapshot.pending_write_count == 0

    @pytest.mark.asyncio
    async def test_clear_error(self, manager: BookingStateManager) -> None:
        await manager.create_booking(show_id='nope', seats=[1], user_id='alice')
        assert manager.error is not None

        manager.clear_error()

        assert manager.error is None

    @pytest.mark.asyncio
    async def test_dashboard_summary__counts_confirmed_revenue_only(
        self, loaded_manager: BookingStateManager
    ) -> None:
        summary = loaded_manager.dashboard_summary()

        assert summary.show_count == 1
        assert summary.trip_count == 1
        assert summary.confirmed_booking_count == 2
        assert summary.total_revenue == 31.0 + 15.5


@pytest.mark.unit
class TestMaintenance:
    @pytest.mark.asyncio
    async def test_check_api_status__reflects_health_check(
        self, manager: BookingStateManager, mock_gateway: AsyncMock
    ) -> None:
        assert await manager.check_api_status() is True

        mock_gateway.health_check.return_value = False
        assert await manager.check_api_status() is False

    @pytest.mark.asyncio
    async def test_check_api_status__never_raises(
        self, manager: BookingStateManager, mock_gateway: AsyncMock
    ) -> None:
        mock_gateway.health_check.side_effect = RuntimeError('socket closed')

        assert await manager.check_api_status() is False

    @pytest.mark.asyncio
    async def test_clear_local_data__wipes_storage_keeps_memory(
        self, loaded_manager: BookingStateManager, persistence: InMemoryPersistenceAdapter
    ) -> None:
        result = loaded_manager.clear_local_data()

        assert result is True
        assert persistence.load(StorageSlot.SHOWS) == []
        assert persistence.load(StorageSlot.BOOKINGS) == []
        assert len(loaded_manager.shows) == 2

    def test_clear_local_data__storage_failure__reports_error(
        self, manager: BookingStateManager, persistence: InMemoryPersistenceAdapter
    ) -> None:
        with patch.object(persistence, 'clear', side_effect=PersistenceError('read-only')):
            result = manager.clear_local_data()

        assert result is False
        assert manager.error == CLEAR_FAILED_MESSAGE
