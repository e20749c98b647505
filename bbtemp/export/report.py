"""PDF report export.

Layout:
1. Title and the date range covered (oldest to newest entry).
2. Table of every entry, newest first.
3. Table of cycle windows (start, period days, cycle length, mean temperature).
4. One chart per month, newest month first, with the coverline drawn when a
   sustained temperature rise is detected in that month.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Sequence
from datetime import date
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Image, KeepTogether, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from bbtemp.export.charts import render_temperature_chart
from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config
from bbtemp.tracker.cycles import average_temperature, entries_for_window, period_ranges
from bbtemp.tracker.entries import sort_descending
from bbtemp.tracker.history import end_of_month, entries_for_month, past_months
from bbtemp.tracker.models import TemperatureEntry
from bbtemp.tracker.temp_shift import TemperatureShiftDetector

logger = logging.getLogger("bbtemp.export.report")

HEADER_COLOR = colors.HexColor("#4e73df")
STRIPE_COLOR = colors.HexColor("#f8f9fc")
PERIOD_TEXT_COLOR = colors.HexColor("#d9534f")

_TABLE_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("ALIGN", (0, 0), (-1, -1), "CENTER"),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("GRID", (0, 0), (-1, -1), 0.3, colors.grey),
    ("TOPPADDING", (0, 0), (-1, -1), 3),
    ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
]


def _striped(data: list[list[str]], widths: list[float]) -> Table:
    table = Table(data, colWidths=widths, repeatRows=1, hAlign="CENTER")
    style = list(_TABLE_STYLE)
    for row in range(2, len(data), 2):
        style.append(("BACKGROUND", (0, row), (-1, row), STRIPE_COLOR))
    table.setStyle(TableStyle(style))
    return table


class ReportBuilder:
    """Assemble the PDF report for an entry collection.

    Usage::

        pdf_bytes = ReportBuilder().build(state.snapshot.entries)
        ReportBuilder().write(entries, Path("bbt-report.pdf"))
    """

    def __init__(self, config: TrackerConfig | None = None) -> None:
        self._config = config or get_tracker_config()
        self._detector = TemperatureShiftDetector(self._config)
        self._styles = getSampleStyleSheet()

    def build(
        self,
        entries: Iterable[TemperatureEntry],
        months: Sequence[date] | None = None,
        today: date | None = None,
    ) -> bytes:
        """Render the report and return the PDF bytes.

        Args:
            entries: Full entry collection.
            months:  First days of the months to chart.  Defaults to every
                     month from the oldest entry through ``today``.
            today:   Reference day (defaults to today).
        """
        reference = today or date.today()
        ordered = sort_descending(entries)
        if months is None:
            months = past_months(ordered, today=reference)

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=1.8 * cm,
            rightMargin=1.8 * cm,
            topMargin=1.8 * cm,
            bottomMargin=1.5 * cm,
            title=self._config.export.report_title,
        )
        width = doc.width

        story: list = []
        story.extend(self._header(ordered, reference))
        story.extend(self._entry_table(ordered, width))
        story.extend(self._cycle_table(ordered, width))
        story.extend(self._month_charts(ordered, months, width, reference))
        doc.build(story)

        logger.info(
            "Built report: %d entries, %d month chart(s), %d bytes",
            len(ordered), len(months), buffer.tell(),
        )
        return buffer.getvalue()

    def write(
        self,
        entries: Iterable[TemperatureEntry],
        path: Path,
        months: Sequence[date] | None = None,
        today: date | None = None,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.build(entries, months=months, today=today))
        return path

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _header(self, ordered: Sequence[TemperatureEntry], today: date) -> list:
        styles = self._styles
        flow: list = [Paragraph(self._config.export.report_title, styles["Title"])]
        if ordered:
            first, last = ordered[-1].day, ordered[0].day
            span = f"{first:%d %B %Y} – {last:%d %B %Y}"
        else:
            span = "No entries recorded"
        flow.append(Paragraph(span, styles["Heading3"]))
        flow.append(Paragraph(f"Generated {today:%d %B %Y}", styles["Normal"]))
        flow.append(Spacer(1, 0.5 * cm))
        return flow

    def _entry_table(self, ordered: Sequence[TemperatureEntry], width: float) -> list:
        if not ordered:
            return []
        date_format = self._config.export.csv_date_format
        data = [["Date", "Temperature (°C)", "Period Day"]]
        period_rows = []
        for row, entry in enumerate(ordered, start=1):
            data.append([
                entry.date.strftime(date_format),
                f"{entry.temperature:.2f}",
                "Yes" if entry.is_period_day else "",
            ])
            if entry.is_period_day:
                period_rows.append(row)

        table = _striped(data, [width * 0.4, width * 0.35, width * 0.25])
        table.setStyle(TableStyle(
            [("TEXTCOLOR", (2, r), (2, r), PERIOD_TEXT_COLOR) for r in period_rows]
        ))
        return [Paragraph("Entries", self._styles["Heading2"]), table, Spacer(1, 0.5 * cm)]

    def _cycle_table(self, ordered: Sequence[TemperatureEntry], width: float) -> list:
        windows = period_ranges(ordered, pad_days=self._config.cycle.luteal_pad_days)
        if not windows:
            return []
        data = [["Start", "Period Days", "Cycle Length", "Mean °C"]]
        for window in windows:
            mean = average_temperature(entries_for_window(ordered, window))
            data.append([
                f"{window.start:%d %b %Y}",
                str(window.period_days),
                f"{window.total_days} days",
                f"{mean:.2f}" if mean is not None else "–",
            ])
        table = _striped(data, [width * 0.3, width * 0.2, width * 0.25, width * 0.25])
        return [Paragraph("Periods", self._styles["Heading2"]), table, Spacer(1, 0.5 * cm)]

    def _month_charts(
        self,
        ordered: Sequence[TemperatureEntry],
        months: Sequence[date],
        width: float,
        today: date,
    ) -> list:
        if not months:
            return []
        windows = period_ranges(ordered, pad_days=self._config.cycle.luteal_pad_days)
        flow: list = [Paragraph("Monthly Charts", self._styles["Heading2"])]
        for month in months:
            month_end = end_of_month(month)
            month_entries = entries_for_month(ordered, month)
            coverline = None
            note = None
            starts = sorted(w.start.date() for w in windows if month <= w.start.date() <= month_end)
            if starts:
                result = self._detector.detect(month_entries, cycle_start=starts[0])
                if result.shift_detected:
                    coverline = result.coverline
                    note = (
                        f"Temperature rise from {result.shift_start_date:%d %b}; "
                        f"estimated ovulation {result.estimated_ovulation_date:%d %b}."
                    )
            png = render_temperature_chart(
                month_entries,
                month,
                month_end,
                coverline=coverline,
                today=today,
            )
            chart_height = width * 3.2 / 7.5
            block = [
                Paragraph(f"{month:%B %Y}", self._styles["Heading3"]),
                Image(io.BytesIO(png), width=width, height=chart_height),
            ]
            if note:
                block.append(Paragraph(note, self._styles["Italic"]))
            block.append(Spacer(1, 0.4 * cm))
            flow.append(KeepTogether(block))
        return flow
