"""
Booking Status Enum - Domain Value Object

Local commits always produce CONFIRMED. PENDING and FAILED are only ever
adopted from the remote service's own answer during reconciliation.
"""

from enum import StrEnum


class BookingStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'
