"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables  (ISLAMICDATA__CDN__BASE_URL=https://...)
  3. islamicdata.yaml       (searched in cwd, then the platform config dir)
  4. Hardcoded defaults

The config file is optional — all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("islamicdata")

# Loading priorities based on common reading patterns
ESSENTIAL_CHAPTERS = [1, 67, 112, 113, 114]  # Fatihah, Mulk, Ikhlas, Falaq, Nas
POPULAR_CHAPTERS = [18, 19, 20, 36, 48, 55, 56, 62, 78, 97]


def _find_config_file() -> str | None:
    """Return the path of the first islamicdata.yaml found, or None."""
    candidates = [
        Path("islamicdata.yaml"),
        Path(platformdirs.user_config_dir("islamicdata")) / "islamicdata.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CdnSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = "https://cdn.jsdelivr.net/gh/islamic-data/islamic-data@main"
    timeout_seconds: float = 30.0
    max_redirects: int = 3
    user_agent: str = "islamicdata/0.1"

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must use http or https scheme")
        return v.rstrip("/")

    @field_validator("max_redirects")
    @classmethod
    def validate_max_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_redirects must be >= 0")
        return v


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # Defaults to <data_dir>/cache.db, filled in by Settings
    db_path: str | None = None
    namespace: str = "islamic-data-"
    metadata_ttl_hours: int = 24
    index_ttl_hours: int = 24 * 7
    content_ttl_hours: int = 24 * 30
    # When False the persistent store is only consulted as a network fallback
    offline_first: bool = True

    def ttl_hours(self, resource_class: str) -> int:
        """TTL for a resource class (``metadata``, ``index`` or ``content``)."""
        return {
            "metadata": self.metadata_ttl_hours,
            "index": self.index_ttl_hours,
            "content": self.content_ttl_hours,
        }[resource_class]


class PreloadSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    essential: list[int] = ESSENTIAL_CHAPTERS
    popular: list[int] = POPULAR_CHAPTERS
    popular_delay_seconds: float = 2.0


class SearchSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    limit: int = 50


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: ISLAMICDATA__CACHE__DB_PATH=/tmp/c.db
        env_prefix="ISLAMICDATA__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    data_dir: str = _DEFAULT_DATA_DIR
    cdn: CdnSettings = CdnSettings()
    cache: CacheSettings = CacheSettings()
    preload: PreloadSettings = PreloadSettings()
    search: SearchSettings = SearchSettings()
    logging: LoggingSettings = LoggingSettings()

    @model_validator(mode="after")
    def default_db_path(self) -> Settings:
        if self.cache.db_path is None:
            db_path = str(Path(self.data_dir).expanduser() / "cache.db")
            self.cache = self.cache.model_copy(update={"db_path": db_path})
        return self

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
            # dotenv and file secrets intentionally excluded
        )
