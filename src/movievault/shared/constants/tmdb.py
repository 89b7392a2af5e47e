"""TMDB API constants."""


class TMDBConfig:
    """Endpoints and defaults for the TMDB v3 API."""

    API_BASE_URL = "https://api.themoviedb.org/3"
    IMAGE_BASE_URL = "https://image.tmdb.org/t/p"

    SEARCH_MOVIE_PATH = "/search/movie"
    MOVIE_DETAILS_PATH = "/movie/{tmdb_id}"
    MOVIE_CREDITS_PATH = "/movie/{tmdb_id}/credits"

    DEFAULT_LANGUAGE = "en-US"
    DEFAULT_TIMEOUT = 30
    DEFAULT_RATE_LIMIT_DELAY_MS = 250

    USER_AGENT = "MovieVault/0.3 (movie-metadata-scanner)"


class ImageKind:
    """Image kinds and their TMDB size tokens."""

    POSTER = "poster"
    BACKDROP = "backdrop"

    SIZES = {
        POSTER: "w500",
        BACKDROP: "w1280",
    }

    DOWNLOAD_CHUNK_SIZE = 64 * 1024


class TMDBErrorHandling:
    """Retry defaults."""

    RETRY_ATTEMPTS = 3
    INITIAL_BACKOFF_MS = 1000


class RecordAssembly:
    """Rules used when building a MovieRecord."""

    DIRECTOR_JOB = "Director"
    DIRECTOR_SEPARATOR = ", "
    MAX_CAST = 5
    YEAR_PREFIX_LENGTH = 4
