"""Tests for sustained temperature rise detection."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from bbtemp.tracker.config_loader import TrackerConfig
from bbtemp.tracker.models import TemperatureEntry
from bbtemp.tracker.temp_shift import TemperatureShiftDetector
from bbtemp.tracker.tests.conftest import make_entry

CYCLE_START = date(2026, 2, 1)


def build_biphasic(shift_day: int = 14, length: int = 24) -> list[TemperatureEntry]:
    """Low follicular temps, then a +0.4°C luteal plateau from ``shift_day``."""
    entries = []
    for i in range(length):
        day = CYCLE_START + timedelta(days=i)
        if i < shift_day:
            temp = 36.30 if i % 2 == 0 else 36.35
        else:
            temp = 36.75
        entries.append(make_entry(day, temp, period=i < 4))
    return entries


class TestTemperatureShiftDetector:
    def test_detects_biphasic_shift(self, tracker_config: TrackerConfig) -> None:
        result = TemperatureShiftDetector(tracker_config).detect(build_biphasic(), CYCLE_START)
        assert result.shift_detected
        assert result.shift_start_date == CYCLE_START + timedelta(days=14)
        assert result.estimated_ovulation_date == CYCLE_START + timedelta(days=13)
        assert result.baseline == pytest.approx(36.325, abs=0.001)
        assert result.coverline == pytest.approx(36.525, abs=0.001)
        assert result.temp_shift_c == pytest.approx(0.425, abs=0.001)
        assert result.confirmation_days == 10

    def test_flat_temperatures_not_detected(self, tracker_config: TrackerConfig) -> None:
        entries = [make_entry(CYCLE_START + timedelta(days=i), 36.4) for i in range(20)]
        result = TemperatureShiftDetector(tracker_config).detect(entries)
        assert not result.shift_detected
        assert result.coverline == pytest.approx(36.6)

    def test_insufficient_data(self, tracker_config: TrackerConfig) -> None:
        entries = [make_entry(CYCLE_START + timedelta(days=i), 36.4) for i in range(5)]
        result = TemperatureShiftDetector(tracker_config).detect(entries)
        assert not result.shift_detected
        assert "Insufficient data" in result.notes

    def test_single_spike_not_confirmed(self, tracker_config: TrackerConfig) -> None:
        entries = [
            make_entry(CYCLE_START + timedelta(days=i), 37.0 if i == 10 else 36.4)
            for i in range(20)
        ]
        result = TemperatureShiftDetector(tracker_config).detect(entries)
        assert not result.shift_detected

    def test_readings_before_cycle_start_ignored(self, tracker_config: TrackerConfig) -> None:
        previous_luteal = [
            make_entry(CYCLE_START - timedelta(days=i), 36.9) for i in range(1, 8)
        ]
        entries = previous_luteal + build_biphasic()
        result = TemperatureShiftDetector(tracker_config).detect(entries, CYCLE_START)
        assert result.shift_start_date == CYCLE_START + timedelta(days=14)

    def test_confidence_in_range(self, tracker_config: TrackerConfig) -> None:
        result = TemperatureShiftDetector(tracker_config).detect(build_biphasic(), CYCLE_START)
        assert 0.0 <= result.confidence <= 1.0
        assert result.confidence > 0.5
