"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/providers/selector.html
"""

from anyio.abc import TaskGroup
from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.logging.loguru_io import Logger
from src.service.booking_state.app.booking_state_manager import BookingStateManager
from src.service.booking_state.app.interface import IRemoteGateway
from src.service.booking_state.driven_adapter.gateway.httpx_remote_gateway import (
    HttpxRemoteGateway,
)
from src.service.booking_state.driven_adapter.gateway.offline_remote_gateway import (
    OfflineRemoteGateway,
)
from src.service.booking_state.driven_adapter.persistence.in_memory_persistence_adapter import (
    InMemoryPersistenceAdapter,
)
from src.service.booking_state.driven_adapter.persistence.json_file_persistence_adapter import (
    JsonFilePersistenceAdapter,
)


def build_remote_gateway(settings: Settings) -> IRemoteGateway:
    if settings.is_offline:
        return OfflineRemoteGateway()
    return HttpxRemoteGateway(
        base_url=settings.BOOKING_API_URL,
        timeout=settings.BOOKING_API_TIMEOUT,
    )


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Remote booking service (offline stand-in when no URL is configured)
    remote_gateway = providers.Singleton(build_remote_gateway, settings=config_service)

    # Local mirror, chosen by STORAGE_BACKEND
    persistence_adapter = providers.Selector(
        config_service.provided.STORAGE_BACKEND,
        file=providers.Singleton(
            JsonFilePersistenceAdapter,
            storage_dir=config_service.provided.STORAGE_DIR,
        ),
        memory=providers.Singleton(InMemoryPersistenceAdapter),
    )

    # Single owner of shows/bookings state (one per process)
    booking_state_manager = providers.Singleton(
        BookingStateManager,
        gateway=remote_gateway,
        persistence=persistence_adapter,
        max_retries=config_service.provided.BOOKING_API_MAX_RETRIES,
        retry_delay=config_service.provided.BOOKING_API_RETRY_DELAY,
    )


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()


def start_pending_sync(task_group: TaskGroup, di_container: Container = container) -> bool:
    """
    Start background replay of pending writes in ``task_group``, every
    PENDING_SYNC_INTERVAL seconds. A non-positive interval turns it off.

        async with anyio.create_task_group() as tg:
            start_pending_sync(tg)
            ...
    """
    interval = di_container.config_service().PENDING_SYNC_INTERVAL
    if interval <= 0:
        Logger.base.info('⏸️ [SYNC] Background sync disabled')
        return False
    task_group.start_soon(di_container.booking_state_manager().run_periodic_sync, interval)
    Logger.base.info(f'🔁 [SYNC] Background sync every {interval}s')
    return True
