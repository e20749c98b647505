"""Core value types for the BBT tracker.

``TemperatureEntry`` is the only stored type.  ``VisibleRange``,
``PeriodInfo`` and ``CycleWindow`` are derived on demand and never persisted.
All of them are frozen: a changed value is a new object.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from uuid import UUID, uuid4


def as_day(value: date | datetime) -> date:
    """Return the calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def naive_local(value: datetime) -> datetime:
    """Convert an offset-aware datetime to naive local time.

    Naive values are returned unchanged.  Entries compare against naive local
    days, so every stored or written date goes through this.

    Raises:
        ValueError: If the local time falls outside the representable range.
    """
    if not isinstance(value, datetime) or value.tzinfo is None:
        return value
    try:
        return value.astimezone().replace(tzinfo=None)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"date {value.isoformat()} is out of range: {exc}") from exc


@dataclass(frozen=True)
class TemperatureEntry:
    """One daily temperature reading.

    Attributes:
        date:          When the reading was logged, as naive local time.
                       Semantically a day; the time of day is kept but
                       ignored for "same entry" checks.
        temperature:   Degrees Celsius.  The model accepts any value; the entry
                       form constrains input.
        is_period_day: True if the user flagged this day as a period day.
        id:            Opaque identifier assigned at creation.
    """

    date: datetime
    temperature: float
    is_period_day: bool = False
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        # Offset-aware dates are stored as naive local time
        object.__setattr__(self, "date", naive_local(self.date))

    @property
    def day(self) -> date:
        return self.date.date()

    def same_day(self, other: date | datetime) -> bool:
        return self.day == as_day(other)


@dataclass(frozen=True)
class VisibleRange:
    """Inclusive window of calendar days shown on the main chart."""

    start: date
    end: date

    @property
    def days(self) -> int:
        """Number of calendar days in the window, both ends included."""
        return (self.end - self.start).days + 1

    def contains(self, value: date | datetime) -> bool:
        return self.start <= as_day(value) <= self.end

    def shifted(self, by_days: int) -> VisibleRange:
        delta = timedelta(days=by_days)
        return VisibleRange(start=self.start + delta, end=self.end + delta)


@dataclass(frozen=True)
class PeriodInfo:
    """Summary of the most recent period run.

    Attributes:
        start_date:       First day of the run, or None if no period day exists.
        duration_days:    Number of period days in the run.
        days_since_start: Calendar days from the run start to today.
    """

    start_date: datetime | None = None
    duration_days: int = 0
    days_since_start: int = 0

    @property
    def has_period(self) -> bool:
        return self.start_date is not None


@dataclass(frozen=True)
class CycleWindow:
    """A period run extended by the luteal pad, the grouping unit for one cycle.

    Attributes:
        start:       First period day of the run.
        end:         Last period day plus the pad.
        period_days: Number of period-flagged entries in the run.
        total_days:  Calendar days from ``start`` to ``end``, both included.
    """

    start: datetime
    end: datetime
    period_days: int
    total_days: int

    def contains(self, value: date | datetime) -> bool:
        return self.start.date() <= as_day(value) <= self.end.date()
