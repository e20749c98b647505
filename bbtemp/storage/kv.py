"""Key-value persistence for BBTemp.

The tracker keeps its whole entry collection in one named slot.  Two
backends implement the ``KeyValueStore`` protocol:

- ``InMemoryKeyValueStore`` for tests and throwaway sessions.
- ``FileKeyValueStore`` which keeps one ``<key>.json`` file per slot under a
  base directory.  Writes go to a temporary file first and are swapped in
  with ``os.replace`` so a crash never leaves a half-written slot.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger("bbtemp.storage.kv")

_VALID_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal slot-based persistence contract."""

    def get(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or None if the slot is empty."""
        ...

    def set(self, key: str, value: bytes) -> None:
        """Replace the contents of the slot."""
        ...


class InMemoryKeyValueStore:
    """Dict-backed store.  Contents vanish with the instance."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._slots: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self._slots.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._slots[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._slots.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._slots


class FileKeyValueStore:
    """One JSON file per slot under ``base_dir``."""

    def __init__(self, base_dir: Path) -> None:
        self.base = Path(base_dir).expanduser()

    def path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        self.base.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=self.base, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(value)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d bytes to %s", len(value), path)

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)

    def __contains__(self, key: str) -> bool:
        return self.path_for(key).exists()
