"""BBT tracking core.

Modules:
    models        — TemperatureEntry, VisibleRange, PeriodInfo, CycleWindow
    entries       — Pure add/replace, lookup, delete and range operations
    entry_store   — Persisted entry collection
    navigator     — Visible date window with clamp-by-reset paging
    cycles        — Period runs and cycle windows
    temp_shift    — Sustained temperature rise detection
    history       — Month grouping
    forms         — Temperature input parsing
    state         — Observable TrackerState
    config_loader — Load/validate/hot-reload tracker_config.yaml
"""

from bbtemp.tracker.config_loader import TrackerConfig, get_tracker_config
from bbtemp.tracker.cycles import last_period_info, period_ranges
from bbtemp.tracker.models import CycleWindow, PeriodInfo, TemperatureEntry, VisibleRange
from bbtemp.tracker.navigator import DragAccumulator, RangeNavigator

__all__ = [
    "TemperatureEntry",
    "VisibleRange",
    "PeriodInfo",
    "CycleWindow",
    "RangeNavigator",
    "DragAccumulator",
    "last_period_info",
    "period_ranges",
    "TrackerConfig",
    "get_tracker_config",
]
