"""Shared fixtures and entry builders for tracker tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from bbtemp.storage.kv import InMemoryKeyValueStore
from bbtemp.tracker import config_loader
from bbtemp.tracker.config_loader import TrackerConfig, _validate_and_build, load_tracker_config
from bbtemp.tracker.entry_store import EntryStore
from bbtemp.tracker.models import TemperatureEntry

# Fixed "today" for every date-relative assertion (a Monday)
TEST_DATE = date(2026, 2, 23)

# Monday 2 Feb 2026, used for weekday-named scenarios
MONDAY = date(2026, 2, 2)


def at(day: date, hour: int = 7, minute: int = 0) -> datetime:
    """A reading time on ``day`` (morning by default, as BBT is taken)."""
    return datetime.combine(day, time(hour, minute))


def make_entry(
    day: date, temperature: float = 36.4, period: bool = False, hour: int = 7
) -> TemperatureEntry:
    return TemperatureEntry(date=at(day, hour), temperature=temperature, is_period_day=period)


def make_series(
    start: date, flags: str, temperature: float = 36.4
) -> list[TemperatureEntry]:
    """One entry per day from ``start``; ``flags`` is a string of 'P' (period) / '.' (not)."""
    return [
        make_entry(start + timedelta(days=i), temperature, period=(flag == "P"))
        for i, flag in enumerate(flags)
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def tracker_config() -> TrackerConfig:
    """Load the bundled tracker config."""
    return load_tracker_config()


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv: InMemoryKeyValueStore) -> EntryStore:
    return EntryStore(kv)


@pytest.fixture
def clock():
    return lambda: TEST_DATE


@pytest.fixture
def use_tracker_config():
    """Swap the cached tracker config for one built from a raw mapping."""
    saved = config_loader._config

    def _use(raw: dict) -> TrackerConfig:
        config_loader._config = _validate_and_build(raw)
        return config_loader._config

    yield _use
    config_loader._config = saved
