"""Observable tracker state.

``TrackerState`` is the single place the presentation layer talks to.  It
holds an immutable ``TrackerSnapshot`` (entries + visible range), routes every
mutation through the Entry Store and the Range Navigator, and notifies
subscribers with the new snapshot after each change.  Queries run the
analyzer against the current snapshot on every call.

Usage::

    state = TrackerState(EntryStore(kv), RangeNavigator())
    unsubscribe = state.subscribe(lambda snap: redraw(snap))
    state.load()
    state.add_or_replace(datetime.now(), 36.6, is_period_day=True)
    info = state.last_period_info()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime

from bbtemp.tracker import cycles, history
from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config
from bbtemp.tracker.entries import Entries, entries_in_range
from bbtemp.tracker.entry_store import EntryStore
from bbtemp.tracker.models import CycleWindow, PeriodInfo, TemperatureEntry, VisibleRange
from bbtemp.tracker.navigator import DragAccumulator, RangeNavigator

logger = logging.getLogger("bbtemp.tracker.state")

Subscriber = Callable[["TrackerSnapshot"], None]


@dataclass(frozen=True)
class TrackerSnapshot:
    """Everything the views render from, at one point in time."""

    entries: Entries
    visible_range: VisibleRange


class TrackerState:
    """State container with subscribe/notify semantics.

    Args:
        store:     Entry Store bound to a key-value slot.
        navigator: Range Navigator for the main chart.
        config:    Tracker config (pad days, drag threshold).
        clock:     Returns today's date; shared with the analyzer queries.
    """

    def __init__(
        self,
        store: EntryStore,
        navigator: RangeNavigator | None = None,
        config: TrackerConfig | None = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._config = config or get_tracker_config()
        self._clock = clock
        self._store = store
        self._navigator = navigator or RangeNavigator(self._config, clock=clock)
        self._drag = DragAccumulator(self._config.navigation.drag_threshold)
        self._subscribers: list[Subscriber] = []
        self._snapshot = self._take_snapshot()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> TrackerSnapshot:
        return self._snapshot

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for snapshot changes.

        Returns:
            A function that removes the subscription.  Calling it twice is harmless.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _take_snapshot(self) -> TrackerSnapshot:
        return TrackerSnapshot(
            entries=self._store.entries,
            visible_range=self._navigator.visible_range,
        )

    def _publish(self) -> None:
        snapshot = self._take_snapshot()
        if snapshot == self._snapshot:
            return
        self._snapshot = snapshot
        for callback in list(self._subscribers):
            callback(snapshot)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def load(self) -> TrackerSnapshot:
        self._store.load()
        self._publish()
        logger.info(
            "Tracker loaded with %d entries, showing %s..%s",
            len(self._snapshot.entries),
            self._snapshot.visible_range.start,
            self._snapshot.visible_range.end,
        )
        return self._snapshot

    def add_or_replace(
        self, when: datetime, temperature: float, is_period_day: bool
    ) -> TemperatureEntry:
        entry = self._store.add_or_replace(when, temperature, is_period_day)
        self._publish()
        return entry

    def delete_for_date(self, when: date | datetime) -> bool:
        removed = self._store.delete_for_date(when)
        self._publish()
        return removed

    def shift_range(self, by_days: int) -> VisibleRange:
        visible = self._navigator.shift(by_days)
        self._publish()
        return visible

    def reset_range(self) -> VisibleRange:
        visible = self._navigator.reset()
        self._publish()
        return visible

    def drag(self, translation: float) -> VisibleRange:
        """Feed a drag translation; shifts the window once per threshold crossed."""
        days = self._drag.update(translation)
        if days:
            return self.shift_range(days)
        return self._snapshot.visible_range

    def end_drag(self) -> None:
        self._drag.end()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def entry_for_date(self, when: date | datetime) -> TemperatureEntry | None:
        return self._store.entry_for_date(when)

    def entries_in_visible_range(self) -> list[TemperatureEntry]:
        visible = self._snapshot.visible_range
        return entries_in_range(self._snapshot.entries, visible.start, visible.end)

    def last_period_info(self) -> PeriodInfo:
        return cycles.last_period_info(self._snapshot.entries, today=self._clock())

    def period_ranges(self) -> list[CycleWindow]:
        return cycles.period_ranges(
            self._snapshot.entries, pad_days=self._config.cycle.luteal_pad_days
        )

    def past_months(self) -> list[date]:
        return history.past_months(self._snapshot.entries, today=self._clock())
