"""
JSON File Persistence Adapter

One ``<slot>.json`` file per slot under the storage directory. Writes go to a
temporary file first and are swapped in with ``os.replace`` so a crash never
leaves a half-written snapshot behind.
"""

import os
from pathlib import Path
from typing import Any

import orjson

from src.platform.exception.exceptions import PersistenceError
from src.platform.logging.loguru_io import Logger
from src.service.booking_state.app.interface.i_persistence_adapter import (
    IPersistenceAdapter,
    StorageSlot,
)


class JsonFilePersistenceAdapter(IPersistenceAdapter):
    def __init__(self, *, storage_dir: Path | str) -> None:
        self.storage_dir = Path(storage_dir)

    def _slot_path(self, slot: StorageSlot) -> Path:
        return self.storage_dir / f'{slot.value}.json'

    def save(self, slot: StorageSlot, items: list[dict[str, Any]]) -> None:
        path = self._slot_path(slot)
        tmp_path = path.with_suffix('.json.tmp')
        try:
            data = orjson.dumps(items)
        except TypeError as e:
            raise PersistenceError(f'Cannot serialize {slot.value}: {e}') from e

        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            raise PersistenceError(f'Cannot write {path}: {e}') from e

        Logger.base.debug(f'💾 [STORAGE] Saved {len(items)} item(s) to {slot.value}')

    def load(self, slot: StorageSlot) -> list[dict[str, Any]]:
        path = self._slot_path(slot)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            Logger.base.warning(f'⚠️ [STORAGE] Cannot read {path}, treating as empty: {e}')
            return []

        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            Logger.base.warning(f'⚠️ [STORAGE] Corrupt {slot.value}, treating as empty: {e}')
            return []

        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            Logger.base.warning(f'⚠️ [STORAGE] Unexpected shape in {slot.value}, treating as empty')
            return []
        return data

    def clear(self) -> None:
        for slot in StorageSlot:
            try:
                self._slot_path(slot).unlink(missing_ok=True)
            except OSError as e:
                raise PersistenceError(f'Cannot remove {slot.value}: {e}') from e
        Logger.base.info(f'🧹 [STORAGE] Cleared local data in {self.storage_dir}')
