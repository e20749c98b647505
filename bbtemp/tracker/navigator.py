"""Range Navigator: the visible date window of the main chart.

The window always ends no later than tomorrow.  Shifting forward past that
point does not stop at the boundary: the whole window snaps back to the
default window ending tomorrow.  There is no lower bound, so the window can
be paged arbitrarily far into the past.

Drag gestures are mapped to whole-day shifts by ``DragAccumulator``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta

from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config
from bbtemp.tracker.models import VisibleRange, as_day

logger = logging.getLogger("bbtemp.tracker.navigator")


def tomorrow_of(today: date) -> date:
    return today + timedelta(days=1)


def default_range(today: date, window_days: int | None = None) -> VisibleRange:
    """The window ending tomorrow and starting ``window_days`` days earlier.

    ``window_days`` defaults to ``navigation.default_window_days`` from the
    tracker config.
    """
    if window_days is None:
        window_days = get_tracker_config().navigation.default_window_days
    end = tomorrow_of(today)
    return VisibleRange(start=end - timedelta(days=window_days), end=end)


def shift_range(
    current: VisibleRange,
    by_days: int,
    today: date,
    window_days: int | None = None,
) -> VisibleRange:
    """Translate both ends of the window by ``by_days`` calendar days.

    If the translated end falls after tomorrow, the result is the default
    window instead of a partially clamped one.
    """
    moved = current.shifted(by_days)
    if moved.end > tomorrow_of(today):
        logger.debug("Shift by %+d passes tomorrow; resetting window", by_days)
        return default_range(today, window_days)
    return moved


class RangeNavigator:
    """Holds the current visible window.

    Args:
        config: Tracker config; supplies the default window size.
        clock:  Returns today's date.  Defaults to ``date.today``.
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._config = config or get_tracker_config()
        self._clock = clock
        self._range = default_range(self._clock(), self.window_days)

    @property
    def window_days(self) -> int:
        return self._config.navigation.default_window_days

    @property
    def visible_range(self) -> VisibleRange:
        return self._range

    def shift(self, by_days: int) -> VisibleRange:
        self._range = shift_range(self._range, by_days, self._clock(), self.window_days)
        return self._range

    def reset(self) -> VisibleRange:
        self._range = default_range(self._clock(), self.window_days)
        return self._range

    def contains(self, when: date | datetime) -> bool:
        return self._range.contains(as_day(when))


class DragAccumulator:
    """Turn a continuous horizontal drag into whole-day window shifts.

    The drag translation is measured from where the gesture started.  A
    shift is emitted once the distance moved since the last emitted shift
    reaches ``threshold``; its size is the number of whole thresholds
    covered, truncated toward zero.  Dragging right reveals earlier days, so
    the returned shift is negative for positive translations.
    """

    def __init__(self, threshold: float = 20.0) -> None:
        if threshold <= 0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        self.threshold = threshold
        self._anchor = 0.0

    def update(self, translation: float) -> int:
        """Feed the current gesture translation; return the day shift to apply."""
        delta = translation - self._anchor
        if abs(delta) < self.threshold:
            return 0
        steps = int(delta / self.threshold)
        self._anchor = translation
        return -steps

    def end(self) -> None:
        """Gesture finished; the next translation is measured from zero."""
        self._anchor = 0.0
