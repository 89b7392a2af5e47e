"""
Cache Configuration Constants

Defaults and cache key layout for the TMDB response cache.
"""


class Cache:
    """Response cache defaults."""

    DEFAULT_PATH = "./data/cache.db"
    DEFAULT_TTL_DAYS = 30

    # Key prefixes; the suffix is the query or numeric id
    KEY_SEARCH = "tmdb:search:{title}:{year}"
    KEY_DETAILS = "tmdb:movie:{tmdb_id}"
    KEY_CREDITS = "tmdb:credits:{tmdb_id}"

    # Truncation for keys in log lines
    LOG_KEY_LENGTH = 80
