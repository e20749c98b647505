"""Fixtures for export tests."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from bbtemp.tracker.config_loader import TrackerConfig, load_tracker_config
from bbtemp.tracker.models import TemperatureEntry
from bbtemp.tracker.tests.conftest import make_entry

REPORT_TODAY = date(2026, 2, 23)


@pytest.fixture
def tracker_config() -> TrackerConfig:
    return load_tracker_config()


@pytest.fixture
def two_cycles() -> list[TemperatureEntry]:
    """Two months of readings: periods starting 1 Jan and 29 Jan, with a luteal rise in each."""
    entries = []
    start = date(2026, 1, 1)
    for i in range(54):
        day = start + timedelta(days=i)
        cycle_day = i % 28
        temp = 36.30 if cycle_day < 14 else 36.75
        entries.append(make_entry(day, temp, period=cycle_day < 4))
    return entries
