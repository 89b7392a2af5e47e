"""Configuration models."""

from .api_settings import RetrySettings, TMDBSettings
from .app_settings import LoggingSettings
from .cache_settings import CacheSettings
from .settings import Settings

__all__ = [
    "CacheSettings",
    "LoggingSettings",
    "RetrySettings",
    "Settings",
    "TMDBSettings",
]
