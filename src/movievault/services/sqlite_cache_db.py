"""SQLite cache database.

Persistent ResponseCache backed by a single ``tmdb_cache`` table.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

from movievault.services.cache import TTL, ResponseCache, normalize_ttl, short_key, utc_now
from movievault.services.sqlite_cache.migration.manager import MigrationManager
from movievault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_cache_error,
)
from movievault.shared.logging import log_operation_error, log_operation_success

if TYPE_CHECKING:
    from movievault.config.models.cache_settings import CacheSettings

logger = logging.getLogger(__name__)


class SQLiteCacheDB(ResponseCache):
    """SQLite-based TMDB response cache.

    Stores raw response bodies as BLOBs with ISO-8601 UTC timestamps. Uses
    WAL mode and one connection shared across threads; every statement runs
    under an internal lock.

    Attributes:
        db_path: Path to SQLite database file
        conn: SQLite database connection, None once closed

    Example:
        >>> with SQLiteCacheDB(Path("data/cache.db")) as cache:
        ...     cache.set("tmdb:movie:27205", b"{...}", timedelta(days=30))
        ...     payload, found = cache.get("tmdb:movie:27205")
    """

    def __init__(
        self,
        db_path: Path | str,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Open or create the cache database.

        Args:
            db_path: Path to SQLite database file; parent directories are created
            clock: Returns the current UTC time

        Raises:
            InfrastructureError: If the database cannot be opened or initialized
        """
        super().__init__()
        self.db_path = Path(db_path)
        self._clock = clock
        self._lock = threading.RLock()
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

    def _initialize_db(self) -> None:
        context = ErrorContext(
            operation="initialize_db",
            additional_data={"db_path": str(self.db_path)},
        )
        start = time.perf_counter()

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                isolation_level=None,  # autocommit
            )
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")

            MigrationManager(self.conn).create_tables()

        except (sqlite3.Error, OSError) as e:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
            error = InfrastructureError(
                code=ErrorCode.CACHE_INIT_FAILED,
                message=f"Failed to initialize SQLite cache: {e!s}",
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error, operation="initialize_db")
            raise error from e

        log_operation_success(
            logger=logger,
            operation="initialize_db",
            duration_ms=(time.perf_counter() - start) * 1000,
            context=context,
        )

    def _connection(self, operation: str, key: str | None = None) -> sqlite3.Connection:
        if self.conn is None:
            raise create_cache_error(
                "Database connection is closed",
                operation=operation,
                key=key,
                write=operation != "cache_get",
            )
        return self.conn

    def _execute(
        self,
        operation: str,
        sql: str,
        params: tuple[Any, ...] = (),
        key: str | None = None,
        *,
        write: bool = True,
    ) -> sqlite3.Cursor:
        conn = self._connection(operation, key)
        try:
            return conn.execute(sql, params)
        except sqlite3.Error as e:
            raise create_cache_error(
                f"SQLite {operation} failed: {e!s}",
                operation=operation,
                key=key,
                original_error=e,
                write=write,
            ) from e

    def _lookup(self, key: str) -> bytes | None:
        with self._lock:
            row = self._execute(
                "cache_get",
                "SELECT response_data, expires_at FROM tmdb_cache WHERE cache_key = ?",
                (key,),
                key,
                write=False,
            ).fetchone()
            if row is None:
                return None

            payload, expires_at = row
            try:
                expired = self._clock() >= datetime.fromisoformat(expires_at)
            except (ValueError, TypeError) as e:
                logger.warning("Corrupted expiry on cache entry %s: %s", short_key(key), e)
                expired = True
            if expired:
                self._execute(
                    "cache_get",
                    "DELETE FROM tmdb_cache WHERE cache_key = ?",
                    (key,),
                    key,
                    write=False,
                )
                logger.debug("Evicted expired cache entry: %s", short_key(key))
                return None

        return bytes(payload)

    def set(self, key: str, payload: bytes, ttl: TTL) -> None:
        now = self._clock()
        expires_at = now + normalize_ttl(ttl)
        with self._lock:
            self._execute(
                "cache_set",
                "INSERT OR REPLACE INTO tmdb_cache "
                "(cache_key, response_data, cached_at, expires_at) VALUES (?, ?, ?, ?)",
                (key, sqlite3.Binary(payload), now.isoformat(), expires_at.isoformat()),
                key,
            )

    def clear(self) -> int:
        with self._lock:
            cursor = self._execute("cache_clear", "DELETE FROM tmdb_cache")
            removed = cursor.rowcount
        logger.info("Cleared %d cache entries from %s", removed, self.db_path)
        return removed

    def count(self) -> int:
        with self._lock:
            row = self._execute(
                "cache_count",
                "SELECT COUNT(*) FROM tmdb_cache",
                write=False,
            ).fetchone()
        return int(row[0])

    def close(self) -> None:
        """Close database connection. Safe to call more than once."""
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None
                logger.debug("Closed SQLite cache connection: %s", self.db_path)


def open_cache(cache_settings: CacheSettings) -> SQLiteCacheDB | None:
    """Open the configured cache, or return None when caching is disabled."""
    if not cache_settings.enabled:
        logger.info("Response cache disabled")
        return None
    return SQLiteCacheDB(Path(cache_settings.path).expanduser())


__all__ = ["SQLiteCacheDB", "open_cache"]
