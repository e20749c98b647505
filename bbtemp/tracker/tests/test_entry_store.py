"""Tests for the persisted Entry Store."""

from __future__ import annotations

import logging
from datetime import timedelta
from pathlib import Path

from bbtemp.storage.codec import encode_entries
from bbtemp.storage.kv import FileKeyValueStore, InMemoryKeyValueStore
from bbtemp.tracker.entry_store import DEFAULT_STORAGE_KEY, EntryStore
from bbtemp.tracker.tests.conftest import TEST_DATE, at, make_entry


class TestLoad:
    def test_empty_slot_loads_empty(self, store: EntryStore) -> None:
        assert store.load() == ()
        assert len(store) == 0

    def test_corrupt_slot_loads_empty(self, caplog) -> None:
        kv = InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: b"{not json"})
        store = EntryStore(kv)
        with caplog.at_level(logging.WARNING, logger="bbtemp.storage.codec"):
            assert store.load() == ()
        assert "Discarding" in caplog.text

    def test_load_sorts_newest_first(self, kv: InMemoryKeyValueStore) -> None:
        writer = EntryStore(kv)
        writer.add_or_replace(at(TEST_DATE - timedelta(days=2)), 36.3, False)
        writer.add_or_replace(at(TEST_DATE), 36.5, False)
        writer.add_or_replace(at(TEST_DATE - timedelta(days=1)), 36.4, False)

        reader = EntryStore(kv)
        days = [e.day for e in reader.load()]
        assert days == [TEST_DATE, TEST_DATE - timedelta(days=1), TEST_DATE - timedelta(days=2)]

    def test_same_day_duplicates_collapse_to_latest(self, caplog) -> None:
        early = make_entry(TEST_DATE, 36.3, hour=7)
        late = make_entry(TEST_DATE, 36.6, period=True, hour=9)
        other = make_entry(TEST_DATE - timedelta(days=1), 36.4)
        kv = InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: encode_entries([early, other, late])})
        store = EntryStore(kv)

        with caplog.at_level(logging.WARNING, logger="bbtemp.tracker.entry_store"):
            loaded = store.load()
        assert loaded == (late, other)
        assert store.entry_for_date(TEST_DATE) == late
        assert "Dropped 1 duplicate" in caplog.text

    def test_out_of_range_dates_load_empty(self) -> None:
        blob = b'[{"date": 1e20, "temperature": 36.4}]'
        store = EntryStore(InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: blob}))
        assert store.load() == ()


class TestWrites:
    def test_add_persists_immediately(self, kv: InMemoryKeyValueStore, store: EntryStore) -> None:
        entry = store.add_or_replace(at(TEST_DATE), 36.55, True)
        assert DEFAULT_STORAGE_KEY in kv

        reloaded = EntryStore(kv)
        reloaded.load()
        assert reloaded.entries == (entry,)

    def test_add_then_lookup(self, store: EntryStore) -> None:
        store.add_or_replace(at(TEST_DATE), 36.2, False)
        store.add_or_replace(at(TEST_DATE, 21), 36.8, True)
        found = store.entry_for_date(TEST_DATE)
        assert found is not None
        assert (found.temperature, found.is_period_day) == (36.8, True)
        assert len(store) == 1

    def test_delete_reports_removal(self, store: EntryStore) -> None:
        store.add_or_replace(at(TEST_DATE), 36.2, False)
        assert store.delete_for_date(TEST_DATE) is True
        assert store.delete_for_date(TEST_DATE) is False
        assert store.entries == ()

    def test_delete_persists(self, kv: InMemoryKeyValueStore, store: EntryStore) -> None:
        store.add_or_replace(at(TEST_DATE), 36.2, False)
        store.add_or_replace(at(TEST_DATE - timedelta(days=1)), 36.3, False)
        store.delete_for_date(TEST_DATE)

        reloaded = EntryStore(kv)
        assert [e.day for e in reloaded.load()] == [TEST_DATE - timedelta(days=1)]

    def test_entries_in_range(self, store: EntryStore) -> None:
        for offset in range(5):
            store.add_or_replace(at(TEST_DATE - timedelta(days=offset)), 36.4, False)
        found = store.entries_in_range(TEST_DATE - timedelta(days=3), TEST_DATE - timedelta(days=1))
        assert len(found) == 3


class TestCustomKey:
    def test_separate_keys_are_independent(self, kv: InMemoryKeyValueStore) -> None:
        a = EntryStore(kv, key="alice")
        b = EntryStore(kv, key="bob")
        a.add_or_replace(at(TEST_DATE), 36.4, False)
        assert b.load() == ()
        assert a.key == "alice"

    def test_file_backend_round_trip(self, tmp_path: Path) -> None:
        store = EntryStore(FileKeyValueStore(tmp_path))
        entry = store.add_or_replace(at(TEST_DATE), 36.45, False)

        reloaded = EntryStore(FileKeyValueStore(tmp_path))
        assert reloaded.load() == (entry,)
        assert (tmp_path / f"{DEFAULT_STORAGE_KEY}.json").exists()
