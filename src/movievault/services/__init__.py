"""Metadata acquisition services: cache, retry, throttle, TMDB client, images."""

from .cache import InMemoryCache, ResponseCache
from .cache_models import CacheEntry, CacheStats
from .rate_limiter import RequestThrottle
from .retry import RetryOutcome, RetryVerdict, classify_failure, retry_call
from .sqlite_cache_db import SQLiteCacheDB, open_cache
from .tmdb import TMDBClient

__all__ = [
    "CacheEntry",
    "CacheStats",
    "InMemoryCache",
    "RequestThrottle",
    "ResponseCache",
    "RetryOutcome",
    "RetryVerdict",
    "SQLiteCacheDB",
    "TMDBClient",
    "classify_failure",
    "open_cache",
    "retry_call",
]
