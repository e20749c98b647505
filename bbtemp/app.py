"""BBTemp composition root.

Wires settings, storage and the tracker state together for a UI or script::

    from bbtemp.app import create_tracker

    state = create_tracker()
    state.subscribe(render)
    state.add_or_replace(datetime.now(), 36.45, is_period_day=False)
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import date

from bbtemp.config import Settings, get_settings
from bbtemp.storage.kv import FileKeyValueStore, KeyValueStore
from bbtemp.tracker.config_loader import get_tracker_config, reload_tracker_config
from bbtemp.tracker.entry_store import EntryStore
from bbtemp.tracker.navigator import RangeNavigator
from bbtemp.tracker.state import TrackerState

logger = logging.getLogger("bbtemp")


def configure_logging(settings: Settings | None = None) -> None:
    s = settings or get_settings()
    level = logging.DEBUG if s.debug else getattr(logging, s.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def create_tracker(
    settings: Settings | None = None,
    kv: KeyValueStore | None = None,
    clock: Callable[[], date] = date.today,
) -> TrackerState:
    """Build a loaded ``TrackerState``.

    Args:
        settings: App settings; defaults to the environment-derived singleton.
        kv:       Storage backend; defaults to files under ``settings.data_dir``.
        clock:    Source of today's date.
    """
    s = settings or get_settings()
    configure_logging(s)

    if s.tracker_config_path is not None:
        config = reload_tracker_config(s.tracker_config_path)
    else:
        config = get_tracker_config()

    backend = kv if kv is not None else FileKeyValueStore(s.data_dir)
    store = EntryStore(backend, key=s.storage_key)
    state = TrackerState(
        store,
        RangeNavigator(config, clock=clock),
        config=config,
        clock=clock,
    )
    state.load()
    logger.info("%s v%s ready", s.app_name, s.app_version)
    return state
