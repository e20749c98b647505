"""Load, validate, and hot-reload the BBTemp tracker configuration.

The config lives in ``tracker_config.yaml`` alongside this module.  It is
loaded once on first use and cached.  Call ``reload_tracker_config()`` to
re-read it from disk.

Usage::

    from bbtemp.tracker.config_loader import get_tracker_config

    config = get_tracker_config()
    pad = config.cycle.luteal_pad_days            # 5
    window = config.navigation.default_window_days  # 8
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger("bbtemp.tracker.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "tracker_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass
class NavigationConfig:
    """Visible-range navigation settings."""

    default_window_days: int = 8
    drag_threshold: float = 20.0


@dataclass
class CycleConfig:
    """Cycle window derivation settings."""

    luteal_pad_days: int = 5


@dataclass
class TemperatureShiftConfig:
    """Sustained temperature rise detection settings."""

    threshold_c: float = 0.2
    confirmation_days: int = 3
    baseline_days: int = 6


@dataclass
class InputConfig:
    """Temperature picker bounds used by the entry form."""

    min_c: float = 35.0
    max_c: float = 38.0
    step_c: float = 0.05
    default_c: float = 36.5


@dataclass
class ExportConfig:
    """CSV and PDF export settings."""

    csv_date_format: str = "%Y-%m-%d"
    report_title: str = "Basal Body Temperature Report"


@dataclass
class TrackerConfig:
    """Complete, validated tracker configuration.

    Attributes:
        version:           Config schema version string.
        navigation:        Visible-range window and drag settings.
        cycle:             Cycle window padding.
        temperature_shift: Thermal shift detection thresholds.
        input:             Entry form picker bounds.
        export:            CSV/PDF formatting.
    """

    version: str
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    cycle: CycleConfig = field(default_factory=CycleConfig)
    temperature_shift: TemperatureShiftConfig = field(default_factory=TemperatureShiftConfig)
    input: InputConfig = field(default_factory=InputConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    _raw: dict = field(default_factory=dict, repr=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when tracker_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Tracker config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return raw


def _validate_and_build(raw: dict) -> TrackerConfig:
    """Validate the raw YAML dict and construct a TrackerConfig.

    Missing sections and keys fall back to defaults.  Every problem found is
    collected and reported together.

    Raises:
        ConfigValidationError: If any value has the wrong type or range.
    """
    errors: list[str] = []

    def _section(name: str) -> dict:
        value = raw.get(name) or {}
        if not isinstance(value, dict):
            errors.append(f"'{name}' must be a mapping")
            return {}
        return value

    def _number(section: dict, key: str, default, cast, path: str, minimum=None):
        value = section.get(key, default)
        try:
            number = cast(value)
        except (TypeError, ValueError):
            errors.append(f"{path}.{key} must be a number, got {value!r}")
            return default
        if minimum is not None and number < minimum:
            errors.append(f"{path}.{key} = {number} is below the minimum {minimum}")
        return number

    version = str(raw.get("version", "1.0"))

    # ── Navigation ──
    nav_raw = _section("navigation")
    navigation = NavigationConfig(
        default_window_days=_number(nav_raw, "default_window_days", 8, int, "navigation", 1),
        drag_threshold=_number(nav_raw, "drag_threshold", 20.0, float, "navigation", 1.0),
    )

    # ── Cycle ──
    cycle_raw = _section("cycle")
    cycle = CycleConfig(
        luteal_pad_days=_number(cycle_raw, "luteal_pad_days", 5, int, "cycle", 0),
    )

    # ── Temperature shift ──
    ts_raw = _section("temperature_shift")
    temperature_shift = TemperatureShiftConfig(
        threshold_c=_number(ts_raw, "threshold_c", 0.2, float, "temperature_shift", 0.0),
        confirmation_days=_number(ts_raw, "confirmation_days", 3, int, "temperature_shift", 1),
        baseline_days=_number(ts_raw, "baseline_days", 6, int, "temperature_shift", 2),
    )

    # ── Input ──
    in_raw = _section("input")
    input_cfg = InputConfig(
        min_c=_number(in_raw, "min_c", 35.0, float, "input"),
        max_c=_number(in_raw, "max_c", 38.0, float, "input"),
        step_c=_number(in_raw, "step_c", 0.05, float, "input"),
        default_c=_number(in_raw, "default_c", 36.5, float, "input"),
    )
    if input_cfg.step_c <= 0:
        errors.append(f"input.step_c must be positive, got {input_cfg.step_c}")
    if input_cfg.min_c >= input_cfg.max_c:
        errors.append(
            f"input.min_c ({input_cfg.min_c}) must be below input.max_c ({input_cfg.max_c})"
        )
    elif not (input_cfg.min_c <= input_cfg.default_c <= input_cfg.max_c):
        errors.append(
            f"input.default_c ({input_cfg.default_c}) is outside "
            f"[{input_cfg.min_c}, {input_cfg.max_c}]"
        )

    # ── Export ──
    ex_raw = _section("export")
    export = ExportConfig(
        csv_date_format=str(ex_raw.get("csv_date_format", "%Y-%m-%d")),
        report_title=str(ex_raw.get("report_title", "Basal Body Temperature Report")),
    )

    if errors:
        raise ConfigValidationError(
            f"tracker_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return TrackerConfig(
        version=version,
        navigation=navigation,
        cycle=cycle,
        temperature_shift=temperature_shift,
        input=input_cfg,
        export=export,
        _raw=raw,
    )


def load_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Load and validate the tracker config from disk.

    Args:
        path: Override path to YAML. Uses the bundled tracker_config.yaml by default.

    Returns:
        Validated TrackerConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded tracker config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Global singleton with hot-reload support
# ---------------------------------------------------------------------------

_config: TrackerConfig | None = None
_config_lock = threading.Lock()


def get_tracker_config() -> TrackerConfig:
    """Return the global TrackerConfig singleton, loading it on first call."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_tracker_config()
    return _config


def reload_tracker_config(path: Path | None = None) -> TrackerConfig:
    """Reload the tracker config from disk and replace the global singleton.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_tracker_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded tracker config: %s → %s", old_version, new_config.version)
    return new_config
