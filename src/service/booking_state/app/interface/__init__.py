from src.service.booking_state.app.interface.i_persistence_adapter import (
    IPersistenceAdapter,
    StorageSlot,
)
from src.service.booking_state.app.interface.i_remote_gateway import IRemoteGateway

__all__ = ['IPersistenceAdapter', 'IRemoteGateway', 'StorageSlot']
