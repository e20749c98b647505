"""CSV export of the entry collection."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TextIO

from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config
from bbtemp.tracker.entries import sort_descending
from bbtemp.tracker.models import TemperatureEntry

logger = logging.getLogger("bbtemp.export.csv")

CSV_HEADER = ("Date", "Temperature (°C)", "Period Day")


def csv_rows(
    entries: Iterable[TemperatureEntry],
    date_format: str = "%Y-%m-%d",
) -> list[tuple[str, str, str]]:
    """Formatted rows, newest first, without the header."""
    return [
        (
            entry.date.strftime(date_format),
            f"{entry.temperature:.2f}",
            "Yes" if entry.is_period_day else "No",
        )
        for entry in sort_descending(entries)
    ]


def write_csv(
    entries: Iterable[TemperatureEntry],
    fh: TextIO,
    config: TrackerConfig | None = None,
) -> int:
    """Write the header and one row per entry to an open text stream.

    Returns:
        Number of data rows written.
    """
    cfg = config or get_tracker_config()
    rows = csv_rows(entries, cfg.export.csv_date_format)
    writer = csv.writer(fh, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(rows)
    return len(rows)


def entries_to_csv(
    entries: Iterable[TemperatureEntry], config: TrackerConfig | None = None
) -> str:
    buffer = io.StringIO()
    write_csv(entries, buffer, config)
    return buffer.getvalue()


def export_csv(
    entries: Iterable[TemperatureEntry],
    path: Path,
    config: TrackerConfig | None = None,
) -> Path:
    """Write a CSV file, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as fh:
        count = write_csv(entries, fh, config)
    logger.info("Exported %d entries to %s", count, path)
    return path
