"""
Booking State Manager

Single owner of the in-memory ``shows`` and ``bookings`` collections. Every
mutation goes through here and is mirrored to the persistence adapter; the
remote gateway is tried first and, when it is unreachable, the write is
committed locally and queued as a pending write for a later sync.

Concurrency:
- All mutating operations run under one anyio.Lock (single writer), so two
  bookings for the same seats can never both pass the availability check.
- Seat availability is checked again at commit time, right before mutating,
  against whatever the collections hold after the remote call returned.
- Collections are swapped only after every slot was persisted, in one step
  with no await in between.
- Sync runs under its own anyio.Lock, so a pending write is replayed by one
  sync at a time. The remote call itself happens outside the write lock; a
  refresh landing meanwhile may already hold the remote row, and applying the
  result then folds the local row into it.

No exception crosses the public boundary: failures become ``error`` plus a
False return value.
"""

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, TypeVar

import anyio
import attrs

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    GatewayError,
    NotFoundError,
    PersistenceError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.retry.retry_operation import retry_operation
from src.service.booking_state.app.dto import (
    BookingResponse,
    BookingStateSnapshot,
    CreateBookingRequest,
    CreateShowRequest,
    PendingWrite,
    PendingWriteKind,
    ShowResponse,
    SyncReport,
)
from src.service.booking_state.app.interface import (
    IPersistenceAdapter,
    IRemoteGateway,
    StorageSlot,
)
from src.service.booking_state.app.wire_transform import (
    transform_booking_response,
    transform_booking_to_request,
    transform_show_response,
    transform_show_to_request,
)
from src.service.booking_state.domain.dashboard_summary import DashboardSummary
from src.service.booking_state.domain.entity import Booking, Show
from src.service.booking_state.domain.enum import BookingStatus, ShowType


API_UNAVAILABLE_MESSAGE = 'API not available. Data will be stored locally.'
LOAD_FAILED_MESSAGE = 'Failed to load data. Using local storage.'
ADD_SHOW_FAILED_MESSAGE = 'Failed to add show. Please try again.'
SHOW_NOT_FOUND_MESSAGE = 'Show not found'
BOOKING_FAILED_MESSAGE = 'Booking failed. Please try again.'
REFRESH_FAILED_MESSAGE = 'Failed to refresh data from server'
CLEAR_FAILED_MESSAGE = 'Failed to clear local data.'

_EntityT = TypeVar('_EntityT', Show, Booking, PendingWrite)


class BookingStateManager:
    def __init__(
        self,
        *,
        gateway: IRemoteGateway,
        persistence: IPersistenceAdapter,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ) -> None:
        self.gateway = gateway
        self.persistence = persistence
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self._shows: list[Show] = []
        self._bookings: list[Booking] = []
        self._pending_writes: list[PendingWrite] = []
        self._loading = False
        self._error: str | None = None
        self._initialized = False
        self._write_lock = anyio.Lock()
        self._sync_lock = anyio.Lock()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def shows(self) -> tuple[Show, ...]:
        return tuple(self._shows)

    @property
    def bookings(self) -> tuple[Booking, ...]:
        return tuple(self._bookings)

    @property
    def pending_writes(self) -> tuple[PendingWrite, ...]:
        return tuple(self._pending_writes)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def initialized(self) -> bool:
        return self._initialized

    def snapshot(self) -> BookingStateSnapshot:
        return BookingStateSnapshot(
            shows=self.shows,
            bookings=self.bookings,
            loading=self._loading,
            error=self._error,
            initialized=self._initialized,
            pending_write_count=len(self._pending_writes),
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    @Logger.io
    async def initialize(self) -> None:
        """
        Seed from the local mirror, then let the remote replace it.

        Runs once per manager; later calls (also concurrent ones) return
        without touching state or the gateway.
        """
        if self._initialized:
            return

        async with self._write_lock:
            if self._initialized:
                return

            self._loading = True
            try:
                saved_shows = self._load_slot(StorageSlot.SHOWS, Show.from_storage)
                saved_bookings = self._load_slot(StorageSlot.BOOKINGS, Booking.from_storage)
                self._pending_writes = self._load_slot(
                    StorageSlot.PENDING_WRITES, PendingWrite.from_storage
                )

                if saved_shows:
                    self._shows = saved_shows
                if saved_bookings:
                    self._bookings = saved_bookings

                try:
                    shows_from_api = await self.gateway.list_shows()
                    if shows_from_api:
                        self._commit(shows=self._remote_shows_with_pending(shows_from_api))

                    bookings_from_api = await self.gateway.list_bookings()
                    if bookings_from_api:
                        self._commit(
                            bookings=self._remote_bookings_with_pending(bookings_from_api)
                        )
                except GatewayError as e:
                    Logger.base.info(f'📴 [BOOKING-STATE] API not available, using local data: {e}')
                    if not saved_shows and not saved_bookings:
                        self._error = API_UNAVAILABLE_MESSAGE

                Logger.base.info(
                    f'✅ [BOOKING-STATE] Initialized with {len(self._shows)} show(s), '
                    f'{len(self._bookings)} booking(s), '
                    f'{len(self._pending_writes)} pending write(s)'
                )
            except Exception as e:
                Logger.base.exception(f'❌ [BOOKING-STATE] Failed to load initial data: {e}')
                self._error = LOAD_FAILED_MESSAGE
            finally:
                self._loading = False
                self._initialized = True

    @Logger.io
    async def add_show(
        self,
        *,
        name: str,
        start_time: datetime | str,
        total_seats: int,
        price: float,
        type: ShowType | str = ShowType.SHOW,
    ) -> bool:
        """
        Create a show or trip.

        True means the event is in ``shows`` and persisted, whether or not the
        remote accepted it; a local-only event carries a ``show_`` id and a
        pending write.
        """
        await self.initialize()

        async with self._write_lock:
            self._loading = True
            self._error = None
            try:
                new_show = Show.create(
                    name=name,
                    start_time=start_time,
                    total_seats=total_seats,
                    price=price,
                    type=type,
                )
                request = transform_show_to_request(
                    name=new_show.name,
                    start_time=new_show.start_time,
                    total_seats=new_show.total_seats,
                    price=new_show.price,
                    type=new_show.type,
                )

                pending: PendingWrite | None = None
                try:
                    response = await self.gateway.create_show(request=request)
                    show = transform_show_response(response)
                except GatewayError as e:
                    Logger.base.info(
                        f'📴 [BOOKING-STATE] Create show API failed, using local storage: {e}'
                    )
                    show = new_show
                    pending = PendingWrite(
                        kind=PendingWriteKind.SHOW,
                        local_id=show.id,
                        payload=request.model_dump(mode='json'),
                    )

                self._commit(
                    shows=[*self._shows, show],
                    pending_writes=[*self._pending_writes, pending] if pending else None,
                )
                Logger.base.info(f'🎭 [BOOKING-STATE] Added {show.type} {show.id} "{show.name}"')
                return True
            except PersistenceError as e:
                Logger.base.error(f'❌ [BOOKING-STATE] Failed to add show: {e}')
                self._error = ADD_SHOW_FAILED_MESSAGE
                return False
            except DomainError as e:
                self._error = e.message
                return False
            except ValueError as e:
                self._error = str(e)
                return False
            except Exception as e:
                Logger.base.exception(f'❌ [BOOKING-STATE] Failed to add show: {e}')
                self._error = ADD_SHOW_FAILED_MESSAGE
                return False
            finally:
                self._loading = False

    @Logger.io
    async def create_booking(self, *, show_id: str, seats: Sequence[int], user_id: str) -> bool:
        """
        Book ``seats`` on a show for ``user_id``.

        Fails without touching state when the show is unknown or any seat is
        already taken; ``error`` then names the reason (and the seats).
        """
        await self.initialize()

        async with self._write_lock:
            self._loading = True
            self._error = None
            try:
                seats = [int(seat) for seat in seats]
                show = self._require_show(show_id)
                show.validate_seat_request(seats)

                booking = Booking.create(show=show, seats=seats, user_id=user_id)
                request = transform_booking_to_request(
                    show_id=show_id, seats=seats, user_id=user_id
                )

                pending: PendingWrite | None = None
                try:
                    response = await self.gateway.create_booking(request=request)
                    booking = transform_booking_response(response)
                except GatewayError as e:
                    Logger.base.info(
                        f'📴 [BOOKING-STATE] Booking API failed, using local storage: {e}'
                    )
                    pending = PendingWrite(
                        kind=PendingWriteKind.BOOKING,
                        local_id=booking.id,
                        payload=request.model_dump(mode='json', by_alias=True),
                    )

                # Re-check against the current collections right before mutating
                updated_show = self._require_show(show_id).reserve(seats)
                self._commit(
                    shows=_replace_by_id(self._shows, show_id, updated_show),
                    bookings=[*self._bookings, booking],
                    pending_writes=[*self._pending_writes, pending] if pending else None,
                )
                Logger.base.info(
                    f'🎫 [BOOKING-STATE] Booked seats {seats} on {show_id} '
                    f'for {user_id} ({booking.id})'
                )
                return True
            except PersistenceError as e:
                Logger.base.error(f'❌ [BOOKING-STATE] Booking failed: {e}')
                self._error = BOOKING_FAILED_MESSAGE
                return False
            except (NotFoundError, ConflictError, DomainError) as e:
                Logger.base.info(f'🚫 [BOOKING-STATE] Booking rejected: {e.message}')
                self._error = e.message
                return False
            except ValueError as e:
                self._error = str(e)
                return False
            except Exception as e:
                Logger.base.exception(f'❌ [BOOKING-STATE] Booking failed: {e}')
                self._error = BOOKING_FAILED_MESSAGE
                return False
            finally:
                self._loading = False

    @Logger.io
    async def refresh_shows(self) -> None:
        """
        Re-pull shows then bookings; each fetched list replaces the collection.

        Locally committed writes that are still pending stay on top of the
        remote data until they are synced.
        """
        await self.initialize()

        async with self._write_lock:
            self._loading = True
            self._error = None
            try:
                shows_from_api = await self.gateway.list_shows()
                self._commit(shows=self._remote_shows_with_pending(shows_from_api))

                bookings_from_api = await self.gateway.list_bookings()
                self._commit(bookings=self._remote_bookings_with_pending(bookings_from_api))
                Logger.base.info(
                    f'🔄 [BOOKING-STATE] Refreshed {len(self._shows)} show(s), '
                    f'{len(self._bookings)} booking(s)'
                )
            except GatewayError as e:
                Logger.base.info(f'📴 [BOOKING-STATE] Refresh failed, keeping local data: {e}')
                if not self._shows:
                    self._error = REFRESH_FAILED_MESSAGE
            except Exception as e:
                Logger.base.exception(f'❌ [BOOKING-STATE] Refresh failed: {e}')
                if not self._shows:
                    self._error = REFRESH_FAILED_MESSAGE
            finally:
                self._loading = False

    @Logger.io
    async def sync_pending_writes(self) -> SyncReport:
        """
        Replay locally committed writes against the remote, oldest first.

        Stops at the first write the remote cannot take right now so that a
        booking is never replayed before the show it points at. A sync started
        while another is running waits for it and then finds the queue drained.
        """
        await self.initialize()

        async with self._sync_lock:
            synced, rejected = await self._drain_pending_writes()

        report = SyncReport(synced=synced, rejected=rejected, remaining=len(self._pending_writes))
        if synced or rejected:
            Logger.base.info(f'🔁 [SYNC] {report}')
        return report

    async def run_periodic_sync(self, interval: float) -> None:
        """Sync pending writes every ``interval`` seconds; run it inside a task group."""
        while True:
            await anyio.sleep(interval)
            if self._pending_writes:
                await self.sync_pending_writes()

    async def _drain_pending_writes(self) -> tuple[int, int]:
        synced = rejected = 0
        while True:
            async with self._write_lock:
                write = self._pending_writes[0] if self._pending_writes else None
            if write is None:
                break

            try:
                response = await retry_operation(
                    lambda: self._replay(write),
                    max_retries=self.max_retries,
                    delay=self.retry_delay,
                    should_retry=lambda e: isinstance(e, GatewayError) and not e.is_rejection,
                )
            except GatewayError as e:
                if not e.is_rejection:
                    Logger.base.info(f'📴 [SYNC] Remote still unavailable: {e}')
                    break
                Logger.base.warning(
                    f'⚠️ [SYNC] Remote rejected {write.kind} {write.local_id}, dropping it: {e}'
                )
                if write.kind == PendingWriteKind.BOOKING:
                    # Local row keeps its status and seats until a refresh replaces it
                    Logger.base.warning(
                        f'⚠️ [SYNC] Booking {write.local_id} stays confirmed locally '
                        f'and is no longer reconciled with the remote'
                    )
                try:
                    async with self._write_lock:
                        self._commit(pending_writes=_drop_by_id(self._pending_writes, write.id))
                except PersistenceError as pe:
                    Logger.base.error(f'❌ [SYNC] Cannot update pending writes: {pe}')
                    break
                rejected += 1
                continue
            except Exception as e:
                Logger.base.exception(f'❌ [SYNC] Unexpected failure replaying {write.id}: {e}')
                break

            try:
                async with self._write_lock:
                    applied = self._apply_synced(write, response)
            except Exception as e:
                Logger.base.exception(f'❌ [SYNC] Cannot apply synced {write.kind}: {e}')
                break
            if applied:
                synced += 1
        return synced, rejected

    # ------------------------------------------------------------------
    # Derived queries
    # ------------------------------------------------------------------
    def get_show(self, id: str) -> Show | None:
        return next((show for show in self._shows if show.id == id), None)

    def get_bookings_by_user(self, user_id: str) -> list[Booking]:
        return [booking for booking in self._bookings if booking.user_id == user_id]

    def get_bookings_by_show(self, show_id: str) -> list[Booking]:
        return [booking for booking in self._bookings if booking.show_id == show_id]

    def clear_error(self) -> None:
        self._error = None

    def dashboard_summary(self) -> DashboardSummary:
        return DashboardSummary.build(shows=self._shows, bookings=self._bookings)

    async def check_api_status(self) -> bool:
        try:
            return await self.gateway.health_check()
        except Exception as e:
            Logger.base.debug(f'🌐 [BOOKING-STATE] Health check raised: {e}')
            return False

    @Logger.io
    def clear_local_data(self) -> bool:
        """
        Wipe the local mirror, including writes not yet synced. The in-memory
        collections stay as they are until the next refresh.
        """
        try:
            self.persistence.clear()
        except PersistenceError as e:
            Logger.base.error(f'❌ [BOOKING-STATE] {e}')
            self._error = CLEAR_FAILED_MESSAGE
            return False
        self._pending_writes = []
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _require_show(self, show_id: str) -> Show:
        show = self.get_show(show_id)
        if show is None:
            raise NotFoundError(SHOW_NOT_FOUND_MESSAGE)
        return show

    def _load_slot(
        self, slot: StorageSlot, from_storage: Callable[[dict[str, Any]], _EntityT]
    ) -> list[_EntityT]:
        items = self.persistence.load(slot)
        try:
            return [from_storage(item) for item in items]
        except (KeyError, TypeError, ValueError) as e:
            Logger.base.warning(f'⚠️ [BOOKING-STATE] Corrupt {slot.value}, treating as empty: {e}')
            return []

    def _commit(
        self,
        *,
        shows: list[Show] | None = None,
        bookings: list[Booking] | None = None,
        pending_writes: list[PendingWrite] | None = None,
    ) -> None:
        """
        Persist the given collections, then swap them in.

        If a later slot fails to save, the slots already written are restored
        so the mirror never holds a booking without its seats (or vice versa).
        """
        writes: list[tuple[StorageSlot, list[dict[str, Any]], list[dict[str, Any]]]] = []
        if bookings is not None:
            writes.append(
                (
                    StorageSlot.BOOKINGS,
                    [b.to_storage() for b in bookings],
                    [b.to_storage() for b in self._bookings],
                )
            )
        if shows is not None:
            writes.append(
                (
                    StorageSlot.SHOWS,
                    [s.to_storage() for s in shows],
                    [s.to_storage() for s in self._shows],
                )
            )
        if pending_writes is not None:
            writes.append(
                (
                    StorageSlot.PENDING_WRITES,
                    [w.to_storage() for w in pending_writes],
                    [w.to_storage() for w in self._pending_writes],
                )
            )

        written: list[tuple[StorageSlot, list[dict[str, Any]]]] = []
        try:
            for slot, new_items, old_items in writes:
                self.persistence.save(slot, new_items)
                written.append((slot, old_items))
        except PersistenceError:
            for slot, old_items in reversed(written):
                try:
                    self.persistence.save(slot, old_items)
                except PersistenceError as e:
                    Logger.base.error(f'❌ [BOOKING-STATE] Cannot restore {slot.value}: {e}')
            raise

        if bookings is not None:
            self._bookings = list(bookings)
        if shows is not None:
            self._shows = list(shows)
        if pending_writes is not None:
            self._pending_writes = list(pending_writes)

    def _pending_ids(self, kind: PendingWriteKind) -> set[str]:
        return {write.local_id for write in self._pending_writes if write.kind == kind}

    def _remote_shows_with_pending(self, shows_from_api: list[ShowResponse]) -> list[Show]:
        shows = [transform_show_response(api_show) for api_show in shows_from_api]
        remote_ids = {show.id for show in shows}
        pending_show_ids = self._pending_ids(PendingWriteKind.SHOW)
        shows += [
            show
            for show in self._shows
            if show.id in pending_show_ids and show.id not in remote_ids
        ]

        pending_booking_ids = self._pending_ids(PendingWriteKind.BOOKING)
        for booking in self._bookings:
            if booking.id in pending_booking_ids:
                shows = [
                    show.merge_booked_seats(booking.seats) if show.id == booking.show_id else show
                    for show in shows
                ]
        return shows

    def _remote_bookings_with_pending(
        self, bookings_from_api: list[BookingResponse]
    ) -> list[Booking]:
        bookings = [transform_booking_response(api_booking) for api_booking in bookings_from_api]
        remote_ids = {booking.id for booking in bookings}
        pending_booking_ids = self._pending_ids(PendingWriteKind.BOOKING)
        bookings += [
            booking
            for booking in self._bookings
            if booking.id in pending_booking_ids and booking.id not in remote_ids
        ]
        return bookings

    async def _replay(self, write: PendingWrite) -> ShowResponse | BookingResponse:
        if write.kind == PendingWriteKind.SHOW:
            return await self.gateway.create_show(
                request=CreateShowRequest.model_validate(write.payload)
            )
        return await self.gateway.create_booking(
            request=CreateBookingRequest.model_validate(write.payload)
        )

    def _apply_synced(self, write: PendingWrite, response: ShowResponse | BookingResponse) -> bool:
        """
        Swap the local row of a replayed write for the remote one.

        The remote row may already be present when a refresh adopted it while
        the write was in flight; the local row is then folded into it instead
        of producing a second row with the same id. Returns False when the
        write left the queue in the meantime and nothing was applied.
        """
        if all(w.id != write.id for w in self._pending_writes):
            Logger.base.info(f'⏭️ [SYNC] {write.kind} {write.local_id} no longer pending, skipping')
            return False
        remaining = _drop_by_id(self._pending_writes, write.id)

        if isinstance(response, ShowResponse):
            remote_show = transform_show_response(response)
            for known in (self.get_show(write.local_id), self.get_show(remote_show.id)):
                if known is not None:
                    remote_show = remote_show.merge_booked_seats(known.booked_seats)
            shows = _collapse_into(self._shows, {write.local_id, remote_show.id}, remote_show)

            # Everything that pointed at the local id now points at the remote one
            bookings = [
                booking.repoint_show(remote_show.id) if booking.show_id == write.local_id else booking
                for booking in self._bookings
            ]
            remaining = [
                attrs.evolve(w, payload={**w.payload, 'showId': remote_show.id})
                if w.kind == PendingWriteKind.BOOKING and w.payload.get('showId') == write.local_id
                else w
                for w in remaining
            ]
            self._commit(shows=shows, bookings=bookings, pending_writes=remaining)
            Logger.base.info(f'🔁 [SYNC] Show {write.local_id} is now {remote_show.id}')
            return True

        remote_booking = transform_booking_response(response)
        bookings = _collapse_into(
            self._bookings, {write.local_id, remote_booking.id}, remote_booking
        )

        shows = self._shows
        if remote_booking.status != BookingStatus.FAILED:
            shows = [
                show.merge_booked_seats(remote_booking.seats)
                if show.id == remote_booking.show_id
                else show
                for show in self._shows
            ]
        self._commit(shows=shows, bookings=bookings, pending_writes=remaining)
        Logger.base.info(
            f'🔁 [SYNC] Booking {write.local_id} is now {remote_booking.id} '
            f'({remote_booking.status})'
        )
        return True


def _replace_by_id(items: list[_EntityT], id: str, replacement: _EntityT) -> list[_EntityT]:
    return [replacement if item.id == id else item for item in items]


def _collapse_into(items: list[_EntityT], ids: set[str], replacement: _EntityT) -> list[_EntityT]:
    """Replace every item whose id is in ``ids`` by one ``replacement``, at the first position."""
    collapsed: list[_EntityT] = []
    placed = False
    for item in items:
        if item.id not in ids:
            collapsed.append(item)
        elif not placed:
            collapsed.append(replacement)
            placed = True
    if not placed:
        collapsed.append(replacement)
    return collapsed


def _drop_by_id(items: list[_EntityT], id: str) -> list[_EntityT]:
    return [item for item in items if item.id != id]
