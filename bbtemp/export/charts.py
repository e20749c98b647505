"""Temperature chart rendering with matplotlib.

Charts are drawn on a bare ``Figure`` (no pyplot state) and returned as PNG
bytes, so they can be rendered from any thread and embedded in the PDF
report without touching the filesystem.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta

import matplotlib.dates as mdates
from matplotlib.figure import Figure

from bbtemp.tracker.entries import entries_in_range, sort_ascending
from bbtemp.tracker.models import TemperatureEntry

logger = logging.getLogger("bbtemp.export.charts")

LINE_COLOR = "#4e73df"
PERIOD_COLOR = "#d9534f"
COVERLINE_COLOR = "#f0ad4e"
TODAY_COLOR = "#e8e8e8"

# Y axis never narrower than this many degrees
_MIN_SPAN_C = 0.6
_HALF_DAY = timedelta(hours=12)


def render_temperature_chart(
    entries: Iterable[TemperatureEntry],
    start: date,
    end: date,
    title: str | None = None,
    coverline: float | None = None,
    today: date | None = None,
    size: tuple[float, float] = (7.5, 3.2),
    dpi: int = 120,
) -> bytes:
    """Render readings between ``start`` and ``end`` as a PNG line chart.

    Period days are drawn as red markers; other days as blue.  When
    ``coverline`` is given a dashed horizontal line marks it.  ``today`` (if
    inside the window) gets a shaded column.

    Args:
        entries:   Any entries; only those inside the window are drawn.
        start:     First day on the x axis.
        end:       Last day on the x axis.
        title:     Optional chart title.
        coverline: Temperature threshold line in °C.
        today:     Day to highlight.
        size:      Figure size in inches.
        dpi:       Output resolution.

    Returns:
        PNG image bytes.
    """
    visible = sort_ascending(entries_in_range(entries, start, end))
    days = [_at(e.day) for e in visible]
    temps = [e.temperature for e in visible]

    fig = Figure(figsize=size, dpi=dpi)
    ax = fig.add_subplot(1, 1, 1)

    if today is not None and start <= today <= end:
        ax.axvspan(_at(today) - _HALF_DAY, _at(today) + _HALF_DAY, color=TODAY_COLOR, zorder=0)

    if visible:
        ax.plot(days, temps, color=LINE_COLOR, linewidth=1.5, zorder=2)
        normal = [(_at(e.day), e.temperature) for e in visible if not e.is_period_day]
        period = [(_at(e.day), e.temperature) for e in visible if e.is_period_day]
        if normal:
            ax.scatter(*zip(*normal), color=LINE_COLOR, s=22, zorder=3, label="Temperature")
        if period:
            ax.scatter(*zip(*period), color=PERIOD_COLOR, s=30, zorder=4, label="Period day")
    else:
        ax.text(
            0.5, 0.5, "No readings", transform=ax.transAxes,
            ha="center", va="center", color="#888888",
        )

    if coverline is not None:
        ax.axhline(coverline, color=COVERLINE_COLOR, linestyle="--", linewidth=1, label="Coverline")

    low, high = _y_limits(temps + ([coverline] if coverline is not None else []))
    ax.set_ylim(low, high)
    ax.set_xlim(_at(start) - _HALF_DAY, _at(end) + _HALF_DAY)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%d"))
    ax.xaxis.set_major_locator(mdates.DayLocator(interval=max(1, ((end - start).days + 1) // 15)))
    ax.set_ylabel("°C")
    ax.grid(True, axis="y", linewidth=0.3)
    if title:
        ax.set_title(title, fontsize=10)
    if visible or coverline is not None:
        ax.legend(loc="upper left", fontsize=7, frameon=False)
    fig.tight_layout()

    buffer = io.BytesIO()
    fig.savefig(buffer, format="png")
    logger.debug("Rendered chart %s..%s with %d readings", start, end, len(visible))
    return buffer.getvalue()


def _y_limits(values: list[float]) -> tuple[float, float]:
    if not values:
        return 36.0, 37.0
    low, high = min(values), max(values)
    span = high - low
    if span < _MIN_SPAN_C:
        pad = (_MIN_SPAN_C - span) / 2
        low, high = low - pad, high + pad
    return round(low - 0.1, 1), round(high + 0.1, 1)


def _at(day: date) -> datetime:
    return datetime.combine(day, time.min)
