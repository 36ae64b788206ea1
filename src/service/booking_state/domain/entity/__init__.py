from src.service.booking_state.domain.entity.booking_entity import Booking
from src.service.booking_state.domain.entity.show_entity import Show

__all__ = ['Booking', 'Show']
