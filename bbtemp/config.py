"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """All configuration is loaded from ``BBTEMP_*`` environment variables (or .env file)."""

    # --- App ---
    app_name: str = "BBTemp"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # --- Storage ---
    data_dir: Path = Path("~/.bbtemp")
    storage_key: str = "temperatureEntries"

    # --- Tracker ---
    tracker_config_path: Path | None = None  # overrides the bundled tracker_config.yaml

    model_config = SettingsConfigDict(
        env_prefix="BBTEMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
