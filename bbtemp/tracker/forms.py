"""Entry form helpers: temperature text parsing and picker values.

Invalid input never reaches the Entry Store.  ``parse_temperature`` returns
None for anything that is not a plain decimal number and the form keeps its
save action disabled until it gets a float back.
"""

from __future__ import annotations

import re

from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config

_TEMPERATURE = re.compile(r"^\s*([+-]?\d+(?:[.,]\d+)?)\s*(?:°\s*C?|C)?\s*$", re.IGNORECASE)


def parse_temperature(text: str | None) -> float | None:
    """Parse user-typed temperature text.

    Accepts ``"36.55"``, ``"36,55"`` and an optional ``°C`` suffix.

    Returns:
        The temperature in °C, or None if the text does not parse.
    """
    if text is None:
        return None
    match = _TEMPERATURE.match(text)
    if not match:
        return None
    return float(match.group(1).replace(",", "."))


def temperature_choices(config: TrackerConfig | None = None) -> list[float]:
    """Picker values from ``input.min_c`` to ``input.max_c`` in ``input.step_c`` steps."""
    cfg = (config or get_tracker_config()).input
    count = int(round((cfg.max_c - cfg.min_c) / cfg.step_c))
    return [round(cfg.min_c + i * cfg.step_c, 2) for i in range(count + 1)]


def default_temperature(config: TrackerConfig | None = None) -> float:
    return (config or get_tracker_config()).input.default_c
