"""Cache configuration model."""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, Field

from movievault.shared.constants import Cache


class CacheSettings(BaseModel):
    """Response cache configuration.

    ``enabled=False`` makes the client run without any cache.
    """

    enabled: bool = Field(default=True, description="Enable response caching")
    path: str = Field(
        default=Cache.DEFAULT_PATH,
        min_length=1,
        description="SQLite database file",
    )
    ttl_days: int = Field(
        default=Cache.DEFAULT_TTL_DAYS,
        gt=0,
        description="Time-to-live of cached responses in days",
    )

    @property
    def ttl(self) -> timedelta:
        return timedelta(days=self.ttl_days)


__all__ = ["CacheSettings"]
