"""Month grouping for the history view and the PDF report."""

from __future__ import annotations

import calendar
from collections.abc import Iterable
from datetime import date, datetime

from bbtemp.tracker.entries import entries_in_range
from bbtemp.tracker.models import TemperatureEntry, as_day


def start_of_month(value: date | datetime) -> date:
    return as_day(value).replace(day=1)


def end_of_month(value: date | datetime) -> date:
    day = as_day(value)
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def next_month(value: date | datetime) -> date:
    first = start_of_month(value)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def past_months(
    entries: Iterable[TemperatureEntry],
    today: date | None = None,
) -> list[date]:
    """First day of every month from the oldest entry through today, newest first.

    Returns an empty list when there are no entries.
    """
    days = [e.day for e in entries]
    if not days:
        return []

    reference = today or date.today()
    months: list[date] = []
    current = start_of_month(min(days))
    while current <= reference:
        months.append(current)
        current = next_month(current)
    months.reverse()
    return months


def entries_for_month(
    entries: Iterable[TemperatureEntry], month: date | datetime
) -> list[TemperatureEntry]:
    return entries_in_range(entries, start_of_month(month), end_of_month(month))
