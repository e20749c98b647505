"""Cycle Analyzer: period runs and cycle windows from the entry collection.

Both queries are pure functions of the entries they are given and are
re-derived on every call.

``last_period_info`` looks only at the most recent run and requires the
run's days to be calendar-consecutive.  ``period_ranges`` groups every run
in the history and treats all period-flagged entries between two
non-period entries as one run, even when days are missing in between.  A
user who skips logging a day mid-period still gets one cycle window, while
the "last period" summary reports only the unbroken tail of the run.
"""

from __future__ import annotations

import logging
import statistics
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from bbtemp.tracker.config_loader import get_tracker_config
from bbtemp.tracker.entries import entries_in_range, sort_ascending
from bbtemp.tracker.models import CycleWindow, PeriodInfo, TemperatureEntry

logger = logging.getLogger("bbtemp.tracker.cycles")


def last_period_info(
    entries: Iterable[TemperatureEntry],
    today: date | None = None,
) -> PeriodInfo:
    """Summarize the most recent run of consecutive period days.

    Entries are scanned newest first.  The first period day found opens the
    run; each period day exactly one calendar day before the previous one
    extends it backwards.  The scan stops at the first non-period entry after
    the run opened, or at a period day that leaves a gap, so an older run is
    never merged into or substituted for the newest one.

    Args:
        entries: Any collection of entries, in any order.
        today:   Reference day for ``days_since_start`` (defaults to today).

    Returns:
        PeriodInfo; ``(None, 0, 0)`` when no period day was logged.
    """
    run: list[datetime] = []

    for entry in reversed(sort_ascending(entries)):
        if not entry.is_period_day:
            if run:
                break
            continue
        if run and entry.day != run[-1].date() - timedelta(days=1):
            break
        run.append(entry.date)

    if not run:
        return PeriodInfo()

    start = run[-1]
    reference = today or date.today()
    return PeriodInfo(
        start_date=start,
        duration_days=len(run),
        days_since_start=(reference - start.date()).days,
    )


def _close_window(run: Sequence[datetime], pad_days: int) -> CycleWindow:
    start = run[0]
    end = run[-1] + timedelta(days=pad_days)
    return CycleWindow(
        start=start,
        end=end,
        period_days=len(run),
        total_days=(end.date() - start.date()).days + 1,
    )


def period_ranges(
    entries: Iterable[TemperatureEntry],
    pad_days: int | None = None,
) -> list[CycleWindow]:
    """Group the history into cycle windows, most recent first.

    Entries are scanned oldest first.  A period day opens a run when none is
    open and joins the open run otherwise.  The next non-period entry closes
    the run, as does the end of the history.  Each closed run becomes a
    window from its first period day to its last period day plus
    ``pad_days``.

    Args:
        entries:  Any collection of entries, in any order.
        pad_days: Days appended after the last period day.  Defaults to
                  ``cycle.luteal_pad_days`` from the tracker config.

    Returns:
        Cycle windows ordered newest first.
    """
    if pad_days is None:
        pad_days = get_tracker_config().cycle.luteal_pad_days
    windows: list[CycleWindow] = []
    run: list[datetime] = []

    for entry in sort_ascending(entries):
        if entry.is_period_day:
            run.append(entry.date)
        elif run:
            windows.append(_close_window(run, pad_days))
            run = []

    if run:
        windows.append(_close_window(run, pad_days))

    logger.debug("Derived %d cycle window(s)", len(windows))
    windows.reverse()
    return windows


def entries_for_window(
    entries: Iterable[TemperatureEntry], window: CycleWindow
) -> list[TemperatureEntry]:
    """Entries inside the window, both ends included."""
    return entries_in_range(entries, window.start, window.end)


def average_temperature(entries: Iterable[TemperatureEntry]) -> float | None:
    """Mean temperature, or None for an empty sequence."""
    temps = [e.temperature for e in entries]
    if not temps:
        return None
    return round(statistics.mean(temps), 2)
