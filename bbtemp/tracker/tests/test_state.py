"""Tests for the observable TrackerState container."""

from __future__ import annotations

from datetime import timedelta

import pytest

from bbtemp.storage.codec import encode_entries
from bbtemp.storage.kv import InMemoryKeyValueStore
from bbtemp.tracker.config_loader import TrackerConfig, _validate_and_build
from bbtemp.tracker.entry_store import DEFAULT_STORAGE_KEY, EntryStore
from bbtemp.tracker.navigator import default_range
from bbtemp.tracker.state import TrackerSnapshot, TrackerState
from bbtemp.tracker.tests.conftest import TEST_DATE, at, make_series


@pytest.fixture
def state(store: EntryStore, tracker_config: TrackerConfig, clock) -> TrackerState:
    return TrackerState(store, config=tracker_config, clock=clock)


@pytest.fixture
def received(state: TrackerState) -> list[TrackerSnapshot]:
    snapshots: list[TrackerSnapshot] = []
    state.subscribe(snapshots.append)
    return snapshots


class TestSubscriptions:
    def test_add_notifies_with_new_snapshot(
        self, state: TrackerState, received: list[TrackerSnapshot]
    ) -> None:
        state.add_or_replace(at(TEST_DATE), 36.5, False)
        assert len(received) == 1
        assert received[0].entries == state.snapshot.entries
        assert len(received[0].entries) == 1

    def test_unsubscribe_stops_notifications(self, state: TrackerState) -> None:
        calls: list[TrackerSnapshot] = []
        unsubscribe = state.subscribe(calls.append)
        state.add_or_replace(at(TEST_DATE), 36.5, False)
        unsubscribe()
        unsubscribe()
        state.add_or_replace(at(TEST_DATE - timedelta(days=1)), 36.4, False)
        assert len(calls) == 1

    def test_noop_delete_does_not_notify(
        self, state: TrackerState, received: list[TrackerSnapshot]
    ) -> None:
        assert state.delete_for_date(TEST_DATE) is False
        assert received == []

    def test_zero_shift_does_not_notify(
        self, state: TrackerState, received: list[TrackerSnapshot]
    ) -> None:
        state.shift_range(0)
        assert received == []

    def test_snapshots_are_immutable_history(self, state: TrackerState) -> None:
        before = state.snapshot
        state.add_or_replace(at(TEST_DATE), 36.5, False)
        assert before.entries == ()
        assert state.snapshot is not before


class TestNavigation:
    def test_initial_window(self, state: TrackerState) -> None:
        assert state.snapshot.visible_range == default_range(TEST_DATE)

    def test_shift_past_tomorrow_resets(
        self, state: TrackerState, received: list[TrackerSnapshot]
    ) -> None:
        state.shift_range(-7)
        state.shift_range(14)
        assert state.snapshot.visible_range == default_range(TEST_DATE)
        assert len(received) == 2

    def test_drag_shifts_after_threshold(self, state: TrackerState) -> None:
        state.drag(10)
        assert state.snapshot.visible_range == default_range(TEST_DATE)
        state.drag(45)
        assert state.snapshot.visible_range.end == TEST_DATE + timedelta(days=1) - timedelta(days=2)
        state.end_drag()

    def test_entries_in_visible_range(self, state: TrackerState) -> None:
        for offset in range(20):
            state.add_or_replace(at(TEST_DATE - timedelta(days=offset)), 36.4, False)
        visible = state.entries_in_visible_range()
        assert {e.day for e in visible} == {TEST_DATE - timedelta(days=d) for d in range(8)}


class TestQueries:
    def test_load_existing_data(self, clock, tracker_config: TrackerConfig) -> None:
        series = make_series(TEST_DATE - timedelta(days=9), ".PPP......")
        kv = InMemoryKeyValueStore({DEFAULT_STORAGE_KEY: encode_entries(series)})
        state = TrackerState(EntryStore(kv), config=tracker_config, clock=clock)
        state.load()

        info = state.last_period_info()
        assert info.start_date.date() == TEST_DATE - timedelta(days=8)
        assert info.duration_days == 3
        assert info.days_since_start == 8
        assert len(state.period_ranges()) == 1
        assert state.past_months() == [TEST_DATE.replace(day=1)]

    def test_period_ranges_use_configured_pad(self, store: EntryStore, clock) -> None:
        config = _validate_and_build({"cycle": {"luteal_pad_days": 2}})
        state = TrackerState(store, config=config, clock=clock)
        state.add_or_replace(at(TEST_DATE - timedelta(days=5)), 36.3, True)
        state.add_or_replace(at(TEST_DATE - timedelta(days=4)), 36.3, False)
        (window,) = state.period_ranges()
        assert window.end.date() == TEST_DATE - timedelta(days=3)
        assert window.total_days == 3

    def test_entry_for_date(self, state: TrackerState) -> None:
        state.add_or_replace(at(TEST_DATE, 6), 36.7, True)
        entry = state.entry_for_date(TEST_DATE)
        assert entry is not None
        assert entry.is_period_day
