"""Unit tests for InMemoryCache and the shared ResponseCache behaviour."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

import pytest

from movievault.services.cache import InMemoryCache, ResponseCache
from movievault.services.cache_models import CacheStats
from movievault.shared.errors import CacheStorageError, ErrorCode


class FakeClock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class TestInMemoryCacheGetSet:
    """get/set semantics."""

    def test_set_then_get_returns_payload_and_counts_hit(self) -> None:
        # Given
        cache = InMemoryCache()
        cache.set("tmdb:movie:27205", b'{"id": 27205}', timedelta(days=30))

        # When
        payload, found = cache.get("tmdb:movie:27205")

        # Then
        assert found is True
        assert payload == b'{"id": 27205}'
        stats = cache.stats()
        assert stats.hits == 1
        assert stats.misses == 0

    def test_missing_key_counts_miss(self) -> None:
        cache = InMemoryCache()

        payload, found = cache.get("tmdb:movie:1")

        assert (payload, found) == (None, False)
        assert cache.stats().misses == 1
        assert cache.stats().hits == 0

    def test_set_replaces_existing_entry(self) -> None:
        cache = InMemoryCache()
        cache.set("key", b"old", 60)
        cache.set("key", b"new", 60)

        assert cache.get("key") == (b"new", True)
        assert cache.count() == 1

    def test_ttl_accepts_seconds(self) -> None:
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        cache.set("key", b"data", 10)

        clock.advance(seconds=9)
        assert cache.get("key")[1] is True

        clock.advance(seconds=1)
        assert cache.get("key")[1] is False


class TestInMemoryCacheExpiry:
    """Lazy eviction of expired entries."""

    def test_expired_entry_is_absent_and_removed(self) -> None:
        # Given
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        cache.set("key", b"data", timedelta(hours=1))
        assert cache.count() == 1

        # When
        clock.advance(hours=2)
        payload, found = cache.get("key")

        # Then
        assert (payload, found) == (None, False)
        assert cache.count() == 0
        assert cache.stats().misses == 1

    def test_expired_entry_counted_until_touched(self) -> None:
        clock = FakeClock()
        cache = InMemoryCache(clock=clock)
        cache.set("key", b"data", timedelta(seconds=1))

        clock.advance(seconds=5)

        assert cache.count() == 1

    def test_ttl_in_the_past_is_absent(self) -> None:
        cache = InMemoryCache()
        cache.set("key", b"data", timedelta(seconds=-1))

        assert cache.get("key") == (None, False)
        assert cache.count() == 0


class TestCacheStatistics:
    """Counters, hit rate and reset."""

    def test_hit_rate_zero_without_operations(self) -> None:
        assert InMemoryCache().stats().hit_rate == 0.0

    def test_hit_rate_percentage(self) -> None:
        stats = CacheStats(hits=3, misses=1, entry_count=3)

        assert stats.hit_rate == pytest.approx(75.0)

    def test_reset_stats_keeps_entries(self) -> None:
        # Given
        cache = InMemoryCache()
        cache.set("key", b"data", 60)
        cache.get("key")
        cache.get("other")

        # When
        cache.reset_stats()

        # Then
        stats = cache.stats()
        assert (stats.hits, stats.misses, stats.entry_count) == (0, 0, 1)

    def test_clear_keeps_counters_and_reports_removed(self) -> None:
        cache = InMemoryCache()
        cache.set("a", b"1", 60)
        cache.set("b", b"2", 60)
        cache.get("a")

        removed = cache.clear()

        assert removed == 2
        assert cache.count() == 0
        assert cache.stats().hits == 1

    def test_counters_are_exact_under_concurrency(self) -> None:
        # Given
        cache = InMemoryCache()
        cache.set("hit", b"x", 60)

        def worker() -> None:
            for _ in range(500):
                cache.get("hit")
                cache.get("miss")

        # When
        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Then
        stats = cache.stats()
        assert stats.hits == 4000
        assert stats.misses == 4000


class BrokenCache(ResponseCache):
    """Backend whose storage always fails."""

    def _lookup(self, key: str) -> bytes | None:
        raise CacheStorageError(ErrorCode.CACHE_READ_FAILED, "disk on fire")

    def set(self, key: str, payload: bytes, ttl: object) -> None:
        raise CacheStorageError(ErrorCode.CACHE_WRITE_FAILED, "disk on fire")

    def clear(self) -> int:
        return 0

    def count(self) -> int:
        return 0


class TestResponseCacheStorageFailures:
    def test_read_failure_counts_as_miss(self) -> None:
        cache = BrokenCache()

        assert cache.get("key") == (None, False)
        assert cache.stats().misses == 1

    def test_write_failure_raises_storage_error(self) -> None:
        with pytest.raises(CacheStorageError):
            BrokenCache().set("key", b"data", 60)

    def test_context_manager_returns_cache(self) -> None:
        with InMemoryCache() as cache:
            cache.set("key", b"data", 60)
            assert cache.count() == 1
