"""Pure operations over an entry collection snapshot.

Every function takes a sequence of ``TemperatureEntry`` and returns a new
tuple or a lookup result; none of them mutate their input.  The write
operations keep the one-entry-per-day invariant by removing any same-day
entry before appending.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from bbtemp.tracker.models import TemperatureEntry, as_day

logger = logging.getLogger("bbtemp.tracker.entries")

Entries = tuple[TemperatureEntry, ...]


def sort_descending(entries: Iterable[TemperatureEntry]) -> Entries:
    """Newest first, the display order."""
    return tuple(sorted(entries, key=lambda e: e.date, reverse=True))


def sort_ascending(entries: Iterable[TemperatureEntry]) -> Entries:
    """Oldest first, the analysis order."""
    return tuple(sorted(entries, key=lambda e: e.date))


def unique_by_day(entries: Iterable[TemperatureEntry]) -> Entries:
    """Keep one entry per calendar day, newest first.

    When a day holds several entries the one logged latest in the day wins,
    matching what a later ``add_or_replace`` for that day would leave behind.
    """
    latest: dict[date, TemperatureEntry] = {}
    for entry in sort_ascending(entries):
        latest[entry.day] = entry
    return sort_descending(latest.values())


def add_or_replace(
    entries: Sequence[TemperatureEntry],
    when: datetime,
    temperature: float,
    is_period_day: bool,
) -> Entries:
    """Write a reading for ``when``'s calendar day.

    Any existing entry for that day is dropped first, so the result holds
    exactly one entry for the day.  The returned collection is sorted
    newest first.
    """
    entry = TemperatureEntry(date=when, temperature=temperature, is_period_day=is_period_day)
    return put_entry(entries, entry)


def put_entry(entries: Sequence[TemperatureEntry], entry: TemperatureEntry) -> Entries:
    """Insert a prepared entry, dropping whatever was logged on its day."""
    kept = [e for e in entries if not e.same_day(entry.date)]
    logger.debug(
        "%s entry for %s (%.2f°C, period=%s)",
        "Replaced" if len(kept) != len(entries) else "Added",
        entry.day,
        entry.temperature,
        entry.is_period_day,
    )
    kept.append(entry)
    return sort_descending(kept)


def entry_for_date(
    entries: Iterable[TemperatureEntry], when: date | datetime
) -> TemperatureEntry | None:
    """Return the entry logged on ``when``'s calendar day, if any."""
    day = as_day(when)
    return next((e for e in entries if e.day == day), None)


def delete_for_date(entries: Sequence[TemperatureEntry], when: date | datetime) -> Entries:
    """Drop the entry for ``when``'s calendar day.  Absent days are a no-op."""
    return tuple(e for e in entries if not e.same_day(when))


def entries_in_range(
    entries: Iterable[TemperatureEntry],
    start: date | datetime,
    end: date | datetime,
) -> list[TemperatureEntry]:
    """Entries whose calendar day lies in ``[start, end]``, in storage order."""
    first, last = as_day(start), as_day(end)
    return [e for e in entries if first <= e.day <= last]


def _months_before(day: date, months: int) -> date:
    # Clamp to the last valid day of the target month (Mar 31 - 1 month = Feb 28/29)
    year, month = divmod(day.month - 1 - months, 12)
    year += day.year
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def entries_since(
    entries: Iterable[TemperatureEntry],
    months: int = 1,
    today: date | None = None,
) -> list[TemperatureEntry]:
    """Entries logged on or after the same day ``months`` months ago."""
    cutoff = _months_before(today or date.today(), months)
    return [e for e in entries if e.day >= cutoff]
