"""Migration manager for the SQLite response cache."""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_SCHEMA_V1 = """
CREATE TABLE IF NOT EXISTS tmdb_cache (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    cache_key TEXT UNIQUE NOT NULL,
    response_data BLOB NOT NULL,
    cached_at TIMESTAMP NOT NULL,
    expires_at TIMESTAMP NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_tmdb_cache_key ON tmdb_cache(cache_key);
CREATE INDEX IF NOT EXISTS idx_tmdb_cache_expires_at ON tmdb_cache(expires_at);

CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
);
"""


class MigrationManager:
    """Creates and versions the cache schema.

    Every statement is ``IF NOT EXISTS`` so opening an existing database
    is a no-op.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self._current_version = self._get_current_version()

    def get_current_version(self) -> int:
        return self._current_version

    def _get_current_version(self) -> int:
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
        )
        if cursor.fetchone() is None:
            return 0

        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def create_tables(self) -> None:
        """Create the current schema if it is missing."""
        self.conn.executescript(_SCHEMA_V1)

        if self._current_version < SCHEMA_VERSION:
            self.conn.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            logger.info("Created cache schema (v%d)", SCHEMA_VERSION)
        self._current_version = SCHEMA_VERSION


__all__ = ["SCHEMA_VERSION", "MigrationManager"]
