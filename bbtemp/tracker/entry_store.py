"""Entry Store: owns the entry collection and its persistence.

The store keeps an immutable snapshot (a tuple sorted newest first) and
replaces it on every write.  Writes go straight through to the key-value
slot; there is no batching and no dirty tracking.

A missing or unreadable slot loads as an empty collection.  That is the
only recovery path: nothing is retried and nothing is surfaced to the user.
"""

from __future__ import annotations

import logging
from datetime import date, datetime

from bbtemp.storage.codec import decode_entries, encode_entries
from bbtemp.storage.kv import KeyValueStore
from bbtemp.tracker import entries as ops
from bbtemp.tracker.models import TemperatureEntry

logger = logging.getLogger("bbtemp.tracker.entry_store")

DEFAULT_STORAGE_KEY = "temperatureEntries"


class EntryStore:
    """Persisted collection of daily temperature entries.

    Usage::

        store = EntryStore(FileKeyValueStore(Path("~/.bbtemp")))
        store.load()
        store.add_or_replace(datetime.now(), 36.55, is_period_day=False)
        store.entry_for_date(date.today())
    """

    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._kv = kv
        self._key = key
        self._entries: ops.Entries = ()

    @property
    def entries(self) -> ops.Entries:
        """Current snapshot, newest first."""
        return self._entries

    @property
    def key(self) -> str:
        return self._key

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> ops.Entries:
        """Replace the snapshot with the persisted collection."""
        blob = self._kv.get(self._key)
        if blob is None:
            logger.info("No stored entries under %r; starting empty", self._key)
        decoded = decode_entries(blob)
        self._entries = ops.unique_by_day(decoded)
        if len(self._entries) != len(decoded):
            logger.warning(
                "Dropped %d duplicate same-day entries from %r",
                len(decoded) - len(self._entries),
                self._key,
            )
        logger.debug("Loaded %d entries from %r", len(self._entries), self._key)
        return self._entries

    def save(self) -> None:
        """Write the full snapshot to the key-value slot."""
        self._kv.set(self._key, encode_entries(self._entries))
        logger.debug("Saved %d entries to %r", len(self._entries), self._key)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_or_replace(
        self, when: datetime, temperature: float, is_period_day: bool
    ) -> TemperatureEntry:
        """Write the reading for ``when``'s day, replacing any existing one.

        Returns:
            The newly created entry.
        """
        entry = TemperatureEntry(date=when, temperature=temperature, is_period_day=is_period_day)
        self._entries = ops.put_entry(self._entries, entry)
        self.save()
        logger.info("Recorded %.2f°C for %s (period=%s)", temperature, entry.day, is_period_day)
        return entry

    def delete_for_date(self, when: date | datetime) -> bool:
        """Remove the entry for ``when``'s day.

        Returns:
            True if an entry was removed, False if the day had none.
        """
        remaining = ops.delete_for_date(self._entries, when)
        removed = len(remaining) != len(self._entries)
        self._entries = remaining
        self.save()
        if removed:
            logger.info("Deleted entry for %s", when)
        return removed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def entry_for_date(self, when: date | datetime) -> TemperatureEntry | None:
        return ops.entry_for_date(self._entries, when)

    def entries_in_range(
        self, start: date | datetime, end: date | datetime
    ) -> list[TemperatureEntry]:
        return ops.entries_in_range(self._entries, start, end)
