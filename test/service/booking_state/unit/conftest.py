"""
Unit test fixtures for the booking state core.

The gateway is an AsyncMock bound to IRemoteGateway and answers with empty
lists by default; persistence is the real in-memory adapter so every test
can inspect what was mirrored.
"""

from datetime import datetime, timezone
from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import GatewayError
from src.service.booking_state.app.booking_state_manager import BookingStateManager
from src.service.booking_state.app.dto import BookingResponse, ShowResponse
from src.service.booking_state.app.interface import IRemoteGateway
from src.service.booking_state.driven_adapter.persistence.in_memory_persistence_adapter import (
    InMemoryPersistenceAdapter,
)
from src.service.booking_state.domain.entity import Show


FUTURE_START = datetime(2030, 6, 1, 19, 30, tzinfo=timezone.utc)


def build_show_response(**overrides: Any) -> ShowResponse:
    data: dict[str, Any] = {
        'id': 'srv-show-1',
        'name': 'Hamlet',
        'start_time': '2030-06-01T19:30:00Z',
        'total_seats': 10,
        'booked_seats': [],
        'price': 15.5,
        'type': 'show',
    }
    data.update(overrides)
    return ShowResponse.model_validate(data)


def build_booking_response(**overrides: Any) -> BookingResponse:
    data: dict[str, Any] = {
        'id': 'srv-booking-1',
        'show_id': 'srv-show-1',
        'user_id': 'user-1',
        'seats': [1, 2],
        'status': 'confirmed',
        'total_amount': 31.0,
        'created_at': '2030-05-01T10:00:00Z',
    }
    data.update(overrides)
    return BookingResponse.model_validate(data)


def build_show(**overrides: Any) -> Show:
    data: dict[str, Any] = {
        'id': 'srv-show-1',
        'name': 'Hamlet',
        'start_time': FUTURE_START,
        'total_seats': 10,
        'booked_seats': (),
        'price': 15.5,
    }
    data.update(overrides)
    return Show(**data)


@pytest.fixture
def mock_gateway() -> AsyncMock:
    """Mock remote gateway (reachable, empty service)"""
    gateway = AsyncMock(spec=IRemoteGateway)
    gateway.list_shows.return_value = []
    gateway.list_bookings.return_value = []
    gateway.health_check.return_value = True
    return gateway


@pytest.fixture
def unavailable_gateway(mock_gateway: AsyncMock) -> AsyncMock:
    """Mock remote gateway where every call fails as unreachable"""
    down = GatewayError('connection refused')
    mock_gateway.list_shows.side_effect = down
    mock_gateway.list_bookings.side_effect = down
    mock_gateway.create_show.side_effect = down
    mock_gateway.create_booking.side_effect = down
    mock_gateway.health_check.return_value = False
    return mock_gateway


@pytest.fixture
def persistence() -> InMemoryPersistenceAdapter:
    return InMemoryPersistenceAdapter()


@pytest.fixture
def manager(
    mock_gateway: AsyncMock, persistence: InMemoryPersistenceAdapter
) -> BookingStateManager:
    """BookingStateManager with mocked gateway and no retry back-off"""
    return BookingStateManager(
        gateway=mock_gateway,
        persistence=persistence,
        max_retries=3,
        retry_delay=0,
    )


@pytest.fixture
def make_show_response() -> Any:
    return build_show_response


@pytest.fixture
def make_booking_response() -> Any:
    return build_booking_response


@pytest.fixture
def make_show() -> Any:
    return build_show
