"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (VCPKG_README__SERVER__TRANSPORT=http)
  2. vcpkg-readme.yaml      (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults. The GitHub
token additionally falls back to the conventional ``GITHUB_TOKEN`` variable.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_CONFIG_FILE_NAME = "vcpkg-readme.yaml"


def _find_config_file() -> str | None:
    """Return the path of the first vcpkg-readme.yaml found, or None."""
    candidates = [
        Path(_CONFIG_FILE_NAME),
        Path(platformdirs.user_config_dir("vcpkg-readme")) / _CONFIG_FILE_NAME,
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


def _github_token_from_env() -> str | None:
    return os.environ.get("GITHUB_TOKEN") or None


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080


class GitHubSettings(BaseModel):
    api_url: str = "https://api.github.com"
    token: str | None = Field(default_factory=_github_token_from_env)
    timeout_seconds: float = 30.0
    user_agent: str = "vcpkg-readme-mcp-server"


class CacheSettings(BaseModel):
    max_size_bytes: int = 104_857_600  # 100 MB
    ttl_seconds: int = 3600
    search_ttl_seconds: int = 1800
    cleanup_interval_seconds: int = 300


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: VCPKG_README__CACHE__TTL_SECONDS=600
        env_prefix="VCPKG_README__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    github: GitHubSettings = Field(default_factory=GitHubSettings)
    cache: CacheSettings = CacheSettings()
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
            # dotenv and file secrets intentionally excluded
        )
