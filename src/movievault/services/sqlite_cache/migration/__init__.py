"""Schema migration for the SQLite cache."""

from .manager import SCHEMA_VERSION, MigrationManager

__all__ = ["SCHEMA_VERSION", "MigrationManager"]
