"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (GIT_UPDATER__CACHE__TTL_HOURS=6)
  2. git-updater.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("git-updater")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "options.db")


def _find_config_file() -> str | None:
    """Return the path of the first git-updater.yaml found, or None."""
    candidates = [
        Path("git-updater.yaml"),
        Path(platformdirs.user_config_dir("git-updater")) / "git-updater.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    ttl_hours: int = 12
    key_prefix: str = "ghu-"
    default_slug: str = "ghu"
    purge_batch_limit: int = 1000
    db_path: str = _DEFAULT_DB_PATH
    # Multisite installs keep options in sitemeta instead of options.
    multisite: bool = False


class CronSettings(BaseModel):
    overdue_hours: int = 24


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: GIT_UPDATER__CACHE__TTL_HOURS=6
        env_prefix="GIT_UPDATER__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings = CacheSettings()
    cron: CronSettings = CronSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
        )
