"""
Unit tests for the JSON file and in-memory persistence adapters
"""

from pathlib import Path

import orjson
import pytest

from src.platform.exception.exceptions import PersistenceError
from src.service.booking_state.app.interface import StorageSlot
from src.service.booking_state.driven_adapter.persistence.in_memory_persistence_adapter import (
    InMemoryPersistenceAdapter,
)
from src.service.booking_state.driven_adapter.persistence.json_file_persistence_adapter import (
    JsonFilePersistenceAdapter,
)


ITEMS = [{'id': 'a', 'seats': [1, 2]}, {'id': 'b', 'seats': [3]}]


@pytest.fixture
def file_adapter(tmp_path: Path) -> JsonFilePersistenceAdapter:
    return JsonFilePersistenceAdapter(storage_dir=tmp_path / 'storage')


@pytest.mark.unit
class TestJsonFilePersistenceAdapter:
    def test_save_then_load__one_file_per_slot(
        self, file_adapter: JsonFilePersistenceAdapter, tmp_path: Path
    ) -> None:
        file_adapter.save(StorageSlot.SHOWS, ITEMS)

        assert file_adapter.load(StorageSlot.SHOWS) == ITEMS
        assert file_adapter.load(StorageSlot.BOOKINGS) == []
        path = tmp_path / 'storage' / 'booking_shows_data.json'
        assert orjson.loads(path.read_bytes()) == ITEMS
        assert not path.with_suffix('.json.tmp').exists()

    def test_save__overwrites_previous_snapshot(
        self, file_adapter: JsonFilePersistenceAdapter
    ) -> None:
        file_adapter.save(StorageSlot.BOOKINGS, ITEMS)
        file_adapter.save(StorageSlot.BOOKINGS, [])

        assert file_adapter.load(StorageSlot.BOOKINGS) == []

    @pytest.mark.parametrize('raw', [b'{broken', b'{"data": 1}', b'[1, 2]'])
    def test_load__corrupt_or_unexpected_content__empty(
        self, file_adapter: JsonFilePersistenceAdapter, tmp_path: Path, raw: bytes
    ) -> None:
        storage_dir = tmp_path / 'storage'
        storage_dir.mkdir()
        (storage_dir / 'booking_shows_data.json').write_bytes(raw)

        assert file_adapter.load(StorageSlot.SHOWS) == []

    def test_save__unserializable_items__persistence_error(
        self, file_adapter: JsonFilePersistenceAdapter
    ) -> None:
        with pytest.raises(PersistenceError):
            file_adapter.save(StorageSlot.SHOWS, [{'id': object()}])

    def test_save__unwritable_location__persistence_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / 'not_a_dir'
        blocker.write_text('file in the way')
        adapter = JsonFilePersistenceAdapter(storage_dir=blocker / 'storage')

        with pytest.raises(PersistenceError):
            adapter.save(StorageSlot.SHOWS, ITEMS)

    def test_clear__removes_every_slot(self, file_adapter: JsonFilePersistenceAdapter) -> None:
        for slot in StorageSlot:
            file_adapter.save(slot, ITEMS)

        file_adapter.clear()

        assert all(file_adapter.load(slot) == [] for slot in StorageSlot)

    def test_clear__nothing_stored__no_error(self, file_adapter: JsonFilePersistenceAdapter) -> None:
        file_adapter.clear()


@pytest.mark.unit
class TestInMemoryPersistenceAdapter:
    def test_save_then_load__returns_copies(self) -> None:
        adapter = InMemoryPersistenceAdapter()
        adapter.save(StorageSlot.SHOWS, ITEMS)

        loaded = adapter.load(StorageSlot.SHOWS)
        loaded[0]['id'] = 'mutated'

        assert adapter.load(StorageSlot.SHOWS) == ITEMS

    def test_load__corrupt_slot__empty(self) -> None:
        adapter = InMemoryPersistenceAdapter()
        adapter.put_raw(StorageSlot.PENDING_WRITES, b'not json')

        assert adapter.load(StorageSlot.PENDING_WRITES) == []

    def test_clear(self) -> None:
        adapter = InMemoryPersistenceAdapter()
        adapter.save(StorageSlot.SHOWS, ITEMS)

        adapter.clear()

        assert adapter.load(StorageSlot.SHOWS) == []
