"""Cache entry and statistics dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from movievault.shared.types.base import BaseDataclass


@dataclass
class CacheEntry(BaseDataclass):
    """Single cached API response.

    Attributes:
        key: Cache key, e.g. ``tmdb:movie:27205``
        payload: Raw serialized response body
        cached_at: When the entry was written (UTC)
        expires_at: When the entry stops being served (UTC)
    """

    key: str
    payload: bytes
    cached_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        if not self.key or not self.key.strip():
            msg = "key must be non-empty"
            raise ValueError(msg)

    def is_expired(self, now: datetime) -> bool:
        """True once ``now`` has reached ``expires_at``."""
        return now >= self.expires_at


@dataclass
class CacheStats(BaseDataclass):
    """Snapshot of cache counters."""

    hits: int = 0
    misses: int = 0
    entry_count: int = 0

    @property
    def hit_rate(self) -> float:
        """Hit percentage, 0.0 when the cache has not been queried."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total * 100


__all__ = ["CacheEntry", "CacheStats"]
