"""Booking State Domain Enums"""

from src.service.booking_state.domain.enum.booking_status import BookingStatus
from src.service.booking_state.domain.enum.show_type import ShowType

__all__ = ['BookingStatus', 'ShowType']
