"""Sustained basal temperature rise detection.

After ovulation, resting temperature rises by roughly 0.2–0.5°C and stays up
until the next period.  This module looks for that rise inside one cycle's
readings so the chart can draw a coverline and the report can note the
estimated ovulation day.

Algorithm:
1. Baseline: mean of the first ``baseline_days`` readings of the cycle.
2. Threshold: baseline + max(``threshold_c``, 2 × baseline std dev).  The
   threshold value is the coverline.
3. A shift is confirmed by ``confirmation_days`` consecutive readings after
   the baseline period at or above the coverline.
4. Ovulation is estimated as the day before the first elevated reading.

The result is informational only.  It is never used to derive period runs or
cycle windows.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta

from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config
from bbtemp.tracker.entries import sort_ascending
from bbtemp.tracker.models import TemperatureEntry

logger = logging.getLogger("bbtemp.tracker.temp_shift")


@dataclass
class ShiftResult:
    """Result of temperature shift detection for one cycle.

    Attributes:
        shift_detected:           Whether a sustained rise was confirmed.
        estimated_ovulation_date: Day before the first elevated reading.
        shift_start_date:         First elevated reading's day.
        baseline:                 Mean of the pre-shift readings (°C).
        coverline:                Threshold the elevated readings cleared (°C).
        post_shift_mean:          Mean of readings from the shift onward (°C).
        temp_shift_c:             post_shift_mean - baseline.
        confirmation_days:        Consecutive elevated readings observed.
        confidence:               0.0–1.0 confidence in the detection.
        notes:                    Human-readable explanation.
    """

    shift_detected: bool
    estimated_ovulation_date: date | None = None
    shift_start_date: date | None = None
    baseline: float | None = None
    coverline: float | None = None
    post_shift_mean: float | None = None
    temp_shift_c: float | None = None
    confirmation_days: int = 0
    confidence: float = 0.0
    notes: str = ""


class TemperatureShiftDetector:
    """Detect a sustained post-ovulatory temperature rise.

    Usage::

        detector = TemperatureShiftDetector()
        result = detector.detect(entries_for_window(entries, window))
        if result.shift_detected:
            print(result.estimated_ovulation_date, result.coverline)
    """

    def __init__(self, config: TrackerConfig | None = None) -> None:
        self._config = config or get_tracker_config()

    def detect(
        self,
        entries: Iterable[TemperatureEntry],
        cycle_start: date | None = None,
    ) -> ShiftResult:
        """Look for a confirmed temperature shift.

        Args:
            entries:     Readings for one cycle, any order.
            cycle_start: First day of the cycle.  Readings before it are ignored.

        Returns:
            ShiftResult with detection details.
        """
        ts = self._config.temperature_shift
        readings = [
            e for e in sort_ascending(entries)
            if cycle_start is None or e.day >= cycle_start
        ]

        needed = ts.baseline_days + ts.confirmation_days
        if len(readings) < needed:
            return ShiftResult(
                shift_detected=False,
                notes=f"Insufficient data: {len(readings)} readings (need {needed}+)",
            )

        baseline_temps = [e.temperature for e in readings[: ts.baseline_days]]
        baseline = statistics.mean(baseline_temps)
        baseline_std = statistics.stdev(baseline_temps)
        coverline = baseline + max(ts.threshold_c, baseline_std * 2)

        logger.debug(
            "Shift detection: baseline=%.3f°C, std=%.3f, coverline=%.3f°C",
            baseline, baseline_std, coverline,
        )

        candidates = readings[ts.baseline_days:]
        consecutive = 0
        first_idx = -1
        for i, reading in enumerate(candidates):
            if reading.temperature >= coverline:
                if consecutive == 0:
                    first_idx = i
                consecutive += 1
                if consecutive >= ts.confirmation_days:
                    break
            else:
                consecutive = 0
                first_idx = -1

        if consecutive < ts.confirmation_days:
            return ShiftResult(
                shift_detected=False,
                baseline=round(baseline, 3),
                coverline=round(coverline, 3),
                notes=(
                    f"No sustained temperature rise "
                    f"(coverline: {coverline:.2f}°C, baseline: {baseline:.2f}°C)"
                ),
            )

        shift_start = candidates[first_idx].day
        post_shift = [e.temperature for e in candidates[first_idx:]]
        post_shift_mean = statistics.mean(post_shift)
        temp_shift = post_shift_mean - baseline

        magnitude_score = min(max(temp_shift, 0.0) / 0.5, 1.0)
        elevated_run = _elevated_run_length(candidates[first_idx:], coverline)
        duration_score = min(elevated_run / (ts.confirmation_days * 2), 1.0)
        confidence = round(magnitude_score * 0.6 + duration_score * 0.4, 2)

        estimated_ovulation = shift_start - timedelta(days=1)
        logger.info(
            "Temperature shift on %s (+%.2f°C, confidence=%.2f)",
            shift_start, temp_shift, confidence,
        )

        return ShiftResult(
            shift_detected=True,
            estimated_ovulation_date=estimated_ovulation,
            shift_start_date=shift_start,
            baseline=round(baseline, 3),
            coverline=round(coverline, 3),
            post_shift_mean=round(post_shift_mean, 3),
            temp_shift_c=round(temp_shift, 3),
            confirmation_days=elevated_run,
            confidence=confidence,
            notes=(
                f"Temperature rose +{temp_shift:.2f}°C above baseline "
                f"({baseline:.2f}°C), held for {elevated_run} readings"
            ),
        )


def _elevated_run_length(readings: list[TemperatureEntry], coverline: float) -> int:
    count = 0
    for reading in readings:
        if reading.temperature < coverline:
            break
        count += 1
    return count
