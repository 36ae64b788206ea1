"""
Form-level checks for a new show/trip.

These are the admin form's rules. The booking state manager trusts its
callers and does not run them itself.
"""

from datetime import datetime, timezone

from src.platform.exception.exceptions import DomainError
from src.service.booking_state.domain.enum.show_type import ShowType
from src.service.booking_state.domain.value_object import to_utc


def validate_new_show(
    *,
    name: str | None,
    start_time: datetime | str | None,
    total_seats: int,
    price: float,
    type: ShowType | str = ShowType.SHOW,
    now: datetime | None = None,
) -> None:
    """
    Raises:
        DomainError: with the message the admin form shows to the user
    """
    if not name or not name.strip() or not start_time:
        raise DomainError('Please fill in all required fields')
    if total_seats <= 0:
        raise DomainError('Total seats must be greater than 0')
    if price < 0:
        raise DomainError('Price cannot be negative')
    try:
        ShowType(type)
    except ValueError:
        raise DomainError(f'Unknown event type: {type}')
    try:
        start = to_utc(start_time)
    except (TypeError, ValueError):
        raise DomainError('Start time is not a valid date')
    if start < (now or datetime.now(timezone.utc)):
        raise DomainError('Start time must be in the future')
