"""Timestamp normalization shared by entities, wire schemas and storage."""

from datetime import datetime, timezone


def to_utc(value: datetime | str) -> datetime:
    """
    Coerce an ISO-8601 string or datetime into an aware UTC datetime.

    Naive values are taken to already be UTC (the form inputs of the admin
    dashboard carry no offset).
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip())
    if not isinstance(value, datetime):
        raise TypeError(f'Expected datetime or ISO-8601 string, got {type(value).__name__}')
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_z(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing 'Z', the form the booking service expects."""
    return to_utc(value).isoformat().replace('+00:00', 'Z')
