"""CLI text constants."""


class CLIHelp:
    """Help strings for the typer application."""

    APP_NAME = "movievault"
    APP_DESCRIPTION = "Resolve movies to TMDB metadata and manage the response cache."
    APP_STYLE = "rich"

    CONFIG_HELP = "Path to a TOML configuration file"
    LOG_LEVEL_HELP = "Log level (DEBUG, INFO, WARNING, ERROR)"
    LOOKUP_HELP = "Resolve one movie by TMDB id or title/year"
    YEAR_HELP = "Release year used to narrow the search"
    TMDB_ID_HELP = "Trusted TMDB id; falls back to search when stale"
    JSON_HELP = "Output the record as JSON"
    CACHE_STATS_HELP = "Show cache statistics"
    CLEAR_CACHE_HELP = "Remove every cached response"
    FETCH_IMAGE_HELP = "Download a TMDB image path, a URL, or copy a local file"
    KIND_HELP = "Image kind for TMDB path fragments (poster or backdrop)"

    CACHE_DISABLED = "Cache is disabled in configuration."
    SESSION_STATS_NOTE = (
        "Hit/miss statistics are tracked per session; "
        "run a lookup to see cache effectiveness."
    )
