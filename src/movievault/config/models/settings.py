"""MovieVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from movievault.config.models.api_settings import RetrySettings, TMDBSettings
from movievault.config.models.app_settings import LoggingSettings
from movievault.config.models.cache_settings import CacheSettings


def _expand(value: Any) -> Any:
    """Expand ``${VAR}`` references and a leading ``~`` in string values."""
    if isinstance(value, str):
        expanded = os.path.expandvars(value)
        if expanded.startswith("~"):
            expanded = os.path.expanduser(expanded)
        return expanded
    if isinstance(value, dict):
        return {key: _expand(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand(item) for item in value]
    return value


class Settings(BaseSettings):
    """Settings facade for every configuration domain.

    Environment variables use the ``MOVIEVAULT_`` prefix and ``__`` as
    nested delimiter, e.g. ``MOVIEVAULT_CACHE__TTL_DAYS=7``.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOVIEVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    tmdb: TMDBSettings = Field(default_factory=TMDBSettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        String values may reference environment variables as ``${VAR}``
        and start with ``~``.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        return cls(**_expand(raw_config))


__all__ = ["Settings"]
