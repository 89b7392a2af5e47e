"""Response cache contract and in-memory implementation.

Both backends store raw response bytes under string keys with a
per-entry expiry and keep hit/miss counters. Expired entries are removed
lazily by the ``get`` that finds them.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Union

from movievault.services.cache_models import CacheEntry, CacheStats
from movievault.shared.constants import Cache
from movievault.shared.errors import CacheStorageError
from movievault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

TTL = Union[timedelta, int, float]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_ttl(ttl: TTL) -> timedelta:
    """Accept a timedelta or a number of seconds."""
    if isinstance(ttl, timedelta):
        return ttl
    return timedelta(seconds=ttl)


def short_key(key: str) -> str:
    """Key truncated for log lines."""
    return key[: Cache.LOG_KEY_LENGTH]


class ResponseCache(ABC):
    """Key/value store for raw API responses with expiry and statistics.

    Subclasses implement storage; this base owns the hit/miss counters so
    every ``get`` is counted exactly once whatever the backend does.
    """

    def __init__(self) -> None:
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> tuple[bytes | None, bool]:
        """Look up ``key``.

        Returns:
            ``(payload, True)`` on a live entry, ``(None, False)`` when the key
            is absent, expired or the backend failed.
        """
        try:
            payload = self._lookup(key)
        except CacheStorageError as e:
            log_operation_error(logger, e, operation="cache_get", level=logging.WARNING)
            payload = None

        found = payload is not None
        with self._stats_lock:
            if found:
                self._hits += 1
            else:
                self._misses += 1
        return payload, found

    @abstractmethod
    def _lookup(self, key: str) -> bytes | None:
        """Return the live payload, deleting the entry first if it has expired."""

    @abstractmethod
    def set(self, key: str, payload: bytes, ttl: TTL) -> None:
        """Insert or replace ``key``.

        Raises:
            CacheStorageError: If the backend cannot store the entry
        """

    @abstractmethod
    def clear(self) -> int:
        """Delete every entry and return how many were removed."""

    @abstractmethod
    def count(self) -> int:
        """Number of stored entries, expired ones included until touched."""

    def stats(self) -> CacheStats:
        with self._stats_lock:
            hits, misses = self._hits, self._misses
        return CacheStats(hits=hits, misses=misses, entry_count=self.count())

    def reset_stats(self) -> None:
        with self._stats_lock:
            self._hits = 0
            self._misses = 0

    def close(self) -> None:  # noqa: B027
        """Release backend resources."""

    def __enter__(self) -> ResponseCache:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


class InMemoryCache(ResponseCache):
    """Dictionary-backed cache for tests and throwaway runs.

    Args:
        clock: Returns the current UTC time; override to control expiry
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now) -> None:
        super().__init__()
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _lookup(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug("Evicted expired cache entry: %s", short_key(key))
                return None
            return entry.payload

    def set(self, key: str, payload: bytes, ttl: TTL) -> None:
        now = self._clock()
        entry = CacheEntry(
            key=key,
            payload=bytes(payload),
            cached_at=now,
            expires_at=now + normalize_ttl(ttl),
        )
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        return removed

    def count(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["TTL", "InMemoryCache", "ResponseCache", "normalize_ttl", "short_key", "utc_now"]
