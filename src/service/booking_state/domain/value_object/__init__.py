from src.service.booking_state.domain.value_object.timestamp import to_iso_z, to_utc

__all__ = ['to_iso_z', 'to_utc']
