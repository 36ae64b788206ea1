from datetime import datetime, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.booking_state.domain.show_validation import validate_new_show


NOW = datetime(2030, 1, 1, tzinfo=timezone.utc)


def _valid(**overrides) -> dict:
    data = {
        'name': 'Hamlet',
        'start_time': '2030-06-01T19:30',
        'total_seats': 10,
        'price': 15.5,
        'type': 'show',
        'now': NOW,
    }
    data.update(overrides)
    return data


@pytest.mark.unit
class TestValidateNewShow:
    def test_valid_input__passes(self) -> None:
        validate_new_show(**_valid())

    @pytest.mark.parametrize(
        'overrides,message',
        [
            ({'name': ''}, 'Please fill in all required fields'),
            ({'start_time': None}, 'Please fill in all required fields'),
            ({'total_seats': 0}, 'Total seats must be greater than 0'),
            ({'price': -0.5}, 'Price cannot be negative'),
            ({'type': 'concert'}, 'Unknown event type: concert'),
            ({'start_time': 'next friday'}, 'Start time is not a valid date'),
            ({'start_time': '2029-12-31T23:59:00Z'}, 'Start time must be in the future'),
        ],
    )
    def test_invalid_input__form_message(self, overrides: dict, message: str) -> None:
        with pytest.raises(DomainError) as exc_info:
            validate_new_show(**_valid(**overrides))

        assert exc_info.value.message == message
        assert exc_info.value.status_code == 400
