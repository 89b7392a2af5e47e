"""SQLite cache internals."""
