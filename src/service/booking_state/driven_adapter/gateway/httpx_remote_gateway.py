"""
HTTP Remote Gateway (httpx)

Endpoints of the booking service:
- GET  /admin/shows     -> {"data": [ShowResponse]}
- POST /admin/shows     -> ShowResponse
- GET  /admin/bookings  -> {"data": [BookingResponse]}
- POST /bookings        -> BookingResponse
- GET  /health          -> any 2xx

Every failure is turned into GatewayError here, so nothing httpx- or
pydantic-specific escapes to the booking state manager.
"""

from typing import Any, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError

from src.platform.exception.exceptions import GatewayError
from src.platform.logging.loguru_io import Logger
from src.service.booking_state.app.dto.wire_schema import (
    BookingResponse,
    CreateBookingRequest,
    CreateShowRequest,
    ListEnvelope,
    ShowResponse,
)
from src.service.booking_state.app.interface.i_remote_gateway import IRemoteGateway


SHOWS_PATH = '/admin/shows'
BOOKINGS_LIST_PATH = '/admin/bookings'
BOOKINGS_CREATE_PATH = '/bookings'
HEALTH_PATH = '/health'

_ModelT = TypeVar('_ModelT', bound=BaseModel)


class HttpxRemoteGateway(IRemoteGateway):
    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={'Content-Type': 'application/json'},
            transport=transport,
        )

    async def _request(self, method: str, path: str, *, body: dict | None = None) -> Any:
        try:
            response = await self._client.request(
                method,
                path,
                content=orjson.dumps(body) if body is not None else None,
            )
        except httpx.HTTPError as e:
            raise GatewayError(f'{method} {path} failed: {type(e).__name__}: {e}') from e

        if not response.is_success:
            Logger.base.warning(
                f'🌐 [GATEWAY] {method} {path} -> {response.status_code}: {response.text[:200]}'
            )
            raise GatewayError(
                f'{method} {path} answered {response.status_code}',
                remote_status=response.status_code,
            )

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise GatewayError(f'{method} {path} returned a non-JSON body') from e

    @staticmethod
    def _parse(model: type[_ModelT], payload: Any, *, context: str) -> _ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise GatewayError(
                f'{context} returned an unexpected payload: {e.error_count()} error(s)'
            ) from e

    def _parse_list(self, model: type[_ModelT], payload: Any, *, context: str) -> list[_ModelT]:
        # The admin endpoints wrap lists in {"data": [...]}; accept a bare list too
        if isinstance(payload, list):
            payload = {'data': payload}
        return self._parse(ListEnvelope[model], payload, context=context).data  # type: ignore[valid-type]

    @Logger.io
    async def list_shows(self) -> list[ShowResponse]:
        payload = await self._request('GET', SHOWS_PATH)
        return self._parse_list(ShowResponse, payload, context=f'GET {SHOWS_PATH}')

    @Logger.io
    async def create_show(self, *, request: CreateShowRequest) -> ShowResponse:
        payload = await self._request('POST', SHOWS_PATH, body=request.model_dump(mode='json'))
        return self._parse(ShowResponse, payload, context=f'POST {SHOWS_PATH}')

    @Logger.io
    async def list_bookings(self) -> list[BookingResponse]:
        payload = await self._request('GET', BOOKINGS_LIST_PATH)
        return self._parse_list(BookingResponse, payload, context=f'GET {BOOKINGS_LIST_PATH}')

    @Logger.io
    async def create_booking(self, *, request: CreateBookingRequest) -> BookingResponse:
        payload = await self._request(
            'POST', BOOKINGS_CREATE_PATH, body=request.model_dump(mode='json', by_alias=True)
        )
        return self._parse(BookingResponse, payload, context=f'POST {BOOKINGS_CREATE_PATH}')

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(HEALTH_PATH)
        except httpx.HTTPError as e:
            Logger.base.debug(f'🌐 [GATEWAY] Health check failed: {e}')
            return False
        return response.is_success

    async def aclose(self) -> None:
        await self._client.aclose()
