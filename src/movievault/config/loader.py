"""Settings loader and singleton manager.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Thread-safe singleton access to the Settings instance
"""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path

from dotenv import load_dotenv

from movievault.config.models.settings import Settings
from movievault.shared.errors import ErrorCode, ErrorContext, SecurityError, create_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/config.toml")
CONFIG_PATH_ENV = "MOVIEVAULT_CONFIG_FILE"
API_KEY_ENV = "TMDB_API_KEY"


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking so repeated reads take no lock.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Return the global settings instance, loading it on first use."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    _load_env_file()
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from disk and environment."""
        with self._lock:
            _load_env_file()
            self._instance = load_settings(config_path)

        return self._instance


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load a .env file into the process environment if it exists.

    Variables already set in the environment win over the file.
    """
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)


def _resolve_config_path(config_path: str | Path | None) -> Path | None:
    if config_path is not None:
        return Path(config_path)
    from_env = os.getenv(CONFIG_PATH_ENV)
    if from_env:
        return Path(from_env)
    if DEFAULT_CONFIG_PATH.exists():
        return DEFAULT_CONFIG_PATH
    return None


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Build Settings from an optional TOML file plus environment overrides.

    The TOML file is taken from ``config_path``, then ``MOVIEVAULT_CONFIG_FILE``,
    then ``config/config.toml`` when present. An empty ``tmdb.api_key`` is
    filled from ``TMDB_API_KEY``.

    Raises:
        ApplicationError: If the file is missing or holds invalid values
    """
    path = _resolve_config_path(config_path)

    try:
        settings = Settings.from_toml_file(path) if path is not None else Settings()
    except FileNotFoundError as e:
        raise create_config_error(
            f"Configuration file not found: {path}",
            config_key=CONFIG_PATH_ENV,
            operation="load_settings",
            original_error=e,
        ) from e
    except ValueError as e:
        # pydantic.ValidationError and toml.TomlDecodeError are ValueErrors
        raise create_config_error(
            f"Invalid configuration: {e}",
            operation="load_settings",
            original_error=e,
        ) from e

    if not settings.tmdb.api_key:
        fallback_key = os.getenv(API_KEY_ENV, "")
        if fallback_key:
            settings.tmdb.api_key = fallback_key

    logger.debug("Settings loaded: %r", settings.tmdb)
    return settings


def require_api_key(settings: Settings) -> str:
    """Return the configured TMDB API key.

    Raises:
        SecurityError: If no API key is configured
    """
    api_key = settings.tmdb.api_key.strip()
    if not api_key:
        raise SecurityError(
            code=ErrorCode.MISSING_CONFIG,
            message=(
                f"TMDB API key is not configured. Set {API_KEY_ENV} or "
                "MOVIEVAULT_TMDB__API_KEY, or tmdb.api_key in the config file."
            ),
            context=ErrorContext(
                operation="require_api_key",
                additional_data={"env_var": API_KEY_ENV},
            ),
        )
    return api_key


_settings_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _settings_loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance."""
    return _settings_loader.reload_config(config_path)


__all__ = [
    "SettingsLoader",
    "get_config",
    "load_settings",
    "reload_config",
    "require_api_key",
]
