"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (SPECXREF__GITHUB__TOKEN=ghp_...)
  2. specxref.yaml          (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults. The project
being built (its ``specs.json``) is separate and lives in models/specs.py.
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

_DEFAULT_CACHE_ROOT = platformdirs.user_cache_dir("specxref")
_DEFAULT_CACHE_DIR = str(Path(_DEFAULT_CACHE_ROOT) / "github-cache")


def _find_config_file() -> str | None:
    """Return the path of the first specxref.yaml found, or None."""
    candidates = [
        Path("specxref.yaml"),
        Path(platformdirs.user_config_dir("specxref")) / "specxref.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class GitHubSettings(BaseModel):
    token: str | None = None
    api_url: str = "https://api.github.com"
    raw_url: str = "https://raw.githubusercontent.com"
    default_branch: str = "main"
    timeout_seconds: float = 30.0


class CacheSettings(BaseModel):
    dir: str = _DEFAULT_CACHE_DIR
    # 0 makes every index entry stale on read
    index_ttl_hours: float = 24


class OutputSettings(BaseModel):
    dir: str = "output"
    specs_file: str = "specs.json"


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: SPECXREF__CACHE__INDEX_TTL_HOURS=1
        env_prefix="SPECXREF__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    github: GitHubSettings = GitHubSettings()
    cache: CacheSettings = CacheSettings()
    output: OutputSettings = OutputSettings()
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
