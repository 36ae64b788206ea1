from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

import attrs
import uuid_utils

from src.service.booking_state.domain.value_object import to_iso_z, to_utc


class PendingWriteKind(StrEnum):
    SHOW = 'show'
    BOOKING = 'booking'


@attrs.define(frozen=True)
class PendingWrite:
    """
    A create that was committed locally while the booking service was
    unreachable. ``payload`` is the request body to replay as-is.
    """

    kind: PendingWriteKind = attrs.field(converter=PendingWriteKind)
    local_id: str
    payload: dict[str, Any]
    id: str = attrs.field(factory=lambda: str(uuid_utils.uuid7()))
    enqueued_at: datetime = attrs.field(
        factory=lambda: datetime.now(timezone.utc), converter=to_utc
    )

    def to_storage(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'kind': self.kind.value,
            'local_id': self.local_id,
            'payload': self.payload,
            'enqueued_at': to_iso_z(self.enqueued_at),
        }

    @classmethod
    def from_storage(cls, data: dict[str, Any]) -> 'PendingWrite':
        return cls(
            id=data['id'],
            kind=data['kind'],
            local_id=data['local_id'],
            payload=dict(data['payload']),
            enqueued_at=data['enqueued_at'],
        )
