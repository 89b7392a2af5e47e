"""Configuration package for MovieVault."""

from .loader import get_config, load_settings, reload_config, require_api_key
from .models import CacheSettings, LoggingSettings, RetrySettings, Settings, TMDBSettings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "RetrySettings",
    "Settings",
    "TMDBSettings",
    "get_config",
    "load_settings",
    "reload_config",
    "require_api_key",
]
