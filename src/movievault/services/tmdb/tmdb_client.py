"""TMDB metadata client.

Composes the response cache, the retry policy and the request throttle with
plain ``requests`` calls against the TMDB v3 API, and assembles MovieRecord
objects for the scanner.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import timedelta
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import requests

from movievault.config.loader import require_api_key
from movievault.services.image_downloader import copy_local_image, write_stream
from movievault.services.rate_limiter import RequestThrottle
from movievault.services.retry import RetryOutcome, retry_call
from movievault.services.tmdb.transformer import build_movie_record
from movievault.shared.constants import (
    Cache,
    HTTPHeaders,
    HTTPStatusCodes,
    ImageKind,
    TMDBConfig,
    TMDBErrorHandling,
)
from movievault.shared.errors import (
    CacheStorageError,
    EmptyResultError,
    ErrorCode,
    ErrorContext,
    ImageSourceError,
    MovieNotFoundError,
    NotFoundError,
    TMDBResponseError,
    TMDBTransportError,
    create_http_error,
)
from movievault.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from movievault.shared.models.api import Credits, MovieDetails, MovieSummary, TMDBSearchResponse
from movievault.shared.utils.dataclass_serialization import from_dict, to_dict

if TYPE_CHECKING:
    from pathlib import Path

    from movievault.config.models.settings import Settings
    from movievault.services.cache import ResponseCache
    from movievault.shared.models.movie import MovieRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M")


class TMDBClient:
    """Cache-aware, retrying TMDB client.

    A ``cache`` of None disables caching; nothing else in the client needs
    to know. With ``force_refresh`` cached responses are never read but
    fresh ones are still written.

    Args:
        api_key: TMDB v3 API key
        language: Response language tag
        timeout: Per-request timeout in seconds
        rate_limit_delay: Minimum gap between remote calls in seconds
        max_attempts: Attempts per remote call
        initial_backoff: Seconds before the first retry
        cache: Response cache, or None
        cache_ttl: Lifetime of cached responses
        force_refresh: Skip cache reads
        on_retry: Extra observer for retry attempts
        session: HTTP session; the client owns and closes it
        sleep: Sleep function used by throttle and retries

    Example:
        >>> with TMDBClient(api_key, cache=SQLiteCacheDB("data/cache.db")) as client:
        ...     record = client.get_full_movie_data("Inception", 2010)
    """

    def __init__(
        self,
        api_key: str,
        *,
        language: str = TMDBConfig.DEFAULT_LANGUAGE,
        timeout: float = TMDBConfig.DEFAULT_TIMEOUT,
        rate_limit_delay: float = TMDBConfig.DEFAULT_RATE_LIMIT_DELAY_MS / 1000,
        max_attempts: int = TMDBErrorHandling.RETRY_ATTEMPTS,
        initial_backoff: float = TMDBErrorHandling.INITIAL_BACKOFF_MS / 1000,
        cache: ResponseCache | None = None,
        cache_ttl: timedelta = timedelta(days=Cache.DEFAULT_TTL_DAYS),
        force_refresh: bool = False,
        on_retry: Callable[[RetryOutcome], None] | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._api_key = api_key
        self.language = language
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.initial_backoff = initial_backoff
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.force_refresh = force_refresh
        self._on_retry = on_retry
        self._sleep = sleep
        self._throttle = RequestThrottle(rate_limit_delay, sleep=sleep)
        self._session = session or self._create_session()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: ResponseCache | None = None,
        session: requests.Session | None = None,
    ) -> TMDBClient:
        """Build a client from application settings.

        Raises:
            SecurityError: If no API key is configured
        """
        return cls(
            require_api_key(settings),
            language=settings.tmdb.language,
            timeout=settings.tmdb.timeout,
            rate_limit_delay=settings.tmdb.rate_limit_delay_ms / 1000,
            max_attempts=settings.retry.max_attempts,
            initial_backoff=settings.retry.initial_backoff,
            cache=cache,
            cache_ttl=settings.cache.ttl,
            force_refresh=settings.tmdb.force_refresh,
            session=session,
        )

    @staticmethod
    def _create_session() -> requests.Session:
        session = requests.Session()
        session.headers[HTTPHeaders.USER_AGENT] = TMDBConfig.USER_AGENT
        session.headers[HTTPHeaders.ACCEPT] = "application/json"
        return session

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> TMDBClient:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    # --- cache -------------------------------------------------------------

    def _cache_get(self, key: str) -> bytes | None:
        if self.cache is None or self.force_refresh:
            return None
        payload, found = self.cache.get(key)
        logger.debug("Cache %s: %s", "hit" if found else "miss", key[: Cache.LOG_KEY_LENGTH])
        return payload if found else None

    def _cache_set(self, key: str, payload: bytes) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(key, payload, self.cache_ttl)
        except CacheStorageError as e:
            log_operation_error(logger, e, operation="cache_set", level=logging.WARNING)
            return
        logger.debug("Cached response: %s", key[: Cache.LOG_KEY_LENGTH])

    def _load_cached(self, key: str, model: type[M]) -> M | None:
        payload = self._cache_get(key)
        if payload is None:
            return None
        try:
            return from_dict(model, json.loads(payload))
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(
                "Ignoring unreadable cache entry %s: %s",
                key[: Cache.LOG_KEY_LENGTH],
                e,
            )
            return None

    # --- transport ---------------------------------------------------------

    def _log_retry(self, operation: str, outcome: RetryOutcome) -> None:
        logger.warning(
            "Retrying %s in %.2fs (attempt %d/%d failed): %s",
            operation,
            outcome.backoff,
            outcome.attempt,
            outcome.max_attempts,
            outcome.last_error,
        )
        if self._on_retry is not None:
            self._on_retry(outcome)

    def _send(
        self,
        operation: str,
        url: str,
        params: dict[str, Any] | None,
        *,
        stream: bool,
    ) -> requests.Response:
        context = ErrorContext(operation=operation, additional_data={"url": url})
        try:
            response = self._session.get(url, params=params, timeout=self.timeout, stream=stream)
        except requests.Timeout as e:
            raise TMDBTransportError(
                ErrorCode.TMDB_API_TIMEOUT,
                f"{operation} timed out after {self.timeout}s",
                context,
                original_error=e,
            ) from e
        except requests.RequestException as e:
            raise TMDBTransportError(
                ErrorCode.TMDB_API_CONNECTION_ERROR,
                f"{operation} connection failed: {e}",
                context,
                original_error=e,
            ) from e

        if not HTTPStatusCodes.is_success(response.status_code):
            response.close()
            raise create_http_error(
                response.status_code,
                f"{operation} failed with HTTP {response.status_code}",
                operation=operation,
                url=url,
            )
        return response

    def _call(
        self,
        operation: str,
        url: str,
        handler: Callable[[requests.Response], T],
        params: dict[str, Any] | None = None,
        *,
        stream: bool = False,
    ) -> T:
        """One remote call under the throttle and the retry policy."""

        def attempt() -> T:
            with self._throttle.slot():
                response = self._send(operation, url, params, stream=stream)
                try:
                    return handler(response)
                finally:
                    response.close()

        return retry_call(
            attempt,
            self.max_attempts,
            self.initial_backoff,
            on_retry=partial(self._log_retry, operation),
            sleep=self._sleep,
        )

    def _get_json(self, operation: str, path: str, **extra_params: Any) -> tuple[bytes, dict[str, Any]]:
        params: dict[str, Any] = {"api_key": self._api_key, "language": self.language}
        params.update(extra_params)
        payload = self._call(
            operation,
            f"{TMDBConfig.API_BASE_URL}{path}",
            lambda response: response.content,
            params,
        )
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise TMDBResponseError(
                ErrorCode.TMDB_API_INVALID_RESPONSE,
                f"{operation} returned a body that is not JSON",
                ErrorContext(operation=operation, additional_data={"path": path}),
                original_error=e,
            ) from e
        if not isinstance(data, dict):
            raise TMDBResponseError(
                ErrorCode.TMDB_API_INVALID_RESPONSE,
                f"{operation} returned {type(data).__name__} instead of an object",
                ErrorContext(operation=operation, additional_data={"path": path}),
            )
        return payload, data

    def _decode(self, operation: str, model: type[M], data: dict[str, Any]) -> M:
        try:
            return from_dict(model, data)
        except (TypeError, KeyError) as e:
            raise TMDBResponseError(
                ErrorCode.TMDB_API_INVALID_RESPONSE,
                f"{operation} returned an unexpected payload: {e}",
                ErrorContext(operation=operation),
                original_error=e,
            ) from e

    # --- metadata ----------------------------------------------------------

    def search_movie(self, title: str, year: int = 0) -> MovieSummary:
        """Best search match for ``title``, narrowed by ``year`` when positive.

        Raises:
            EmptyResultError: If the search matched nothing
            TMDBHTTPError: On a non-success status after retries
        """
        key = Cache.KEY_SEARCH.format(title=title, year=year)
        cached = self._load_cached(key, MovieSummary)
        if cached is not None:
            return cached

        params: dict[str, Any] = {"query": title, "page": 1, "include_adult": "false"}
        if year > 0:
            params["year"] = year
        _, data = self._get_json("search_movie", TMDBConfig.SEARCH_MOVIE_PATH, **params)

        response = self._decode("search_movie", TMDBSearchResponse, data)
        if not response.results:
            raise EmptyResultError(
                ErrorCode.TMDB_API_NO_RESULTS,
                f"No results for '{title}' ({year})",
                ErrorContext(
                    operation="search_movie",
                    additional_data={"title": title, "year": year},
                ),
            )

        summary = response.results[0]
        self._cache_set(key, json.dumps(to_dict(summary)).encode("utf-8"))
        return summary

    def get_movie_details(self, tmdb_id: int) -> MovieDetails:
        """``/movie/{id}``, cached."""
        key = Cache.KEY_DETAILS.format(tmdb_id=tmdb_id)
        cached = self._load_cached(key, MovieDetails)
        if cached is not None:
            return cached

        payload, data = self._get_json(
            "get_movie_details",
            TMDBConfig.MOVIE_DETAILS_PATH.format(tmdb_id=tmdb_id),
        )
        details = self._decode("get_movie_details", MovieDetails, data)
        self._cache_set(key, payload)
        return details

    def get_credits(self, tmdb_id: int) -> Credits:
        """``/movie/{id}/credits``, cached."""
        key = Cache.KEY_CREDITS.format(tmdb_id=tmdb_id)
        cached = self._load_cached(key, Credits)
        if cached is not None:
            return cached

        payload, data = self._get_json(
            "get_credits",
            TMDBConfig.MOVIE_CREDITS_PATH.format(tmdb_id=tmdb_id),
        )
        credits = self._decode("get_credits", Credits, data)
        self._cache_set(key, payload)
        return credits

    def get_full_movie_data(self, title: str, year: int = 0) -> MovieRecord:
        """Search, then details and credits of the best match.

        The first failing step propagates; no partial record is returned.
        """
        log_operation_start(logger, "get_full_movie_data", {"title": title, "year": year})
        start = time.perf_counter()
        summary = self.search_movie(title, year)
        details = self.get_movie_details(summary.id)
        credits = self.get_credits(summary.id)
        record = build_movie_record(details, credits)
        log_operation_success(
            logger,
            "get_full_movie_data",
            (time.perf_counter() - start) * 1000,
            result_info={"tmdb_id": record.tmdb_id, "title": record.title},
        )
        return record

    def get_movie_by_id(self, tmdb_id: int) -> MovieRecord:
        """Details and credits for a known id, without searching.

        Raises:
            MovieNotFoundError: If TMDB answers 404 for the id
        """
        log_operation_start(logger, "get_movie_by_id", {"tmdb_id": tmdb_id})
        start = time.perf_counter()
        try:
            details = self.get_movie_details(tmdb_id)
        except NotFoundError as e:
            raise MovieNotFoundError(
                ErrorCode.TMDB_API_MEDIA_NOT_FOUND,
                f"Movie {tmdb_id} not found on TMDB",
                e.status_code,
                ErrorContext(
                    operation="get_movie_by_id",
                    additional_data={"tmdb_id": tmdb_id},
                ),
                original_error=e,
            ) from e
        credits = self.get_credits(tmdb_id)
        record = build_movie_record(details, credits)
        log_operation_success(
            logger,
            "get_movie_by_id",
            (time.perf_counter() - start) * 1000,
            result_info={"tmdb_id": record.tmdb_id, "title": record.title},
        )
        return record

    def resolve_movie(self, title: str, year: int = 0, tmdb_id: int | None = None) -> MovieRecord:
        """Prefer a trusted id, fall back to title/year search when it is stale."""
        if tmdb_id is not None and tmdb_id > 0:
            try:
                return self.get_movie_by_id(tmdb_id)
            except MovieNotFoundError:
                logger.warning(
                    "TMDB id %d not found, falling back to search for '%s' (%d)",
                    tmdb_id,
                    title,
                    year,
                )
        return self.get_full_movie_data(title, year)

    # --- images ------------------------------------------------------------

    def _download(self, operation: str, url: str, destination: str | Path) -> int:
        return self._call(
            operation,
            url,
            lambda response: write_stream(
                response.iter_content(chunk_size=ImageKind.DOWNLOAD_CHUNK_SIZE),
                destination,
            ),
            stream=True,
        )

    def download_image(
        self,
        path_fragment: str,
        destination: str | Path,
        kind: str = ImageKind.POSTER,
    ) -> None:
        """Download a TMDB image (``/abc.jpg``) at the size for ``kind``.

        Raises:
            ValueError: If kind is neither poster nor backdrop
            ImageSourceError: If path_fragment is empty
        """
        size = ImageKind.SIZES.get(kind)
        if size is None:
            msg = f"Unknown image kind: {kind!r} (expected one of {', '.join(ImageKind.SIZES)})"
            raise ValueError(msg)
        if not path_fragment:
            raise ImageSourceError(
                ErrorCode.FILE_READ_ERROR,
                "Image path is empty",
                ErrorContext(operation="download_image", additional_data={"kind": kind}),
            )
        if not path_fragment.startswith("/"):
            path_fragment = f"/{path_fragment}"

        url = f"{TMDBConfig.IMAGE_BASE_URL}/{size}{path_fragment}"
        written = self._download("download_image", url, destination)
        logger.debug("Downloaded %s image %s (%d bytes)", kind, path_fragment, written)

    def download_image_from_url(self, source: str, destination: str | Path) -> None:
        """Download an http(s) URL, or copy ``source`` as a local file.

        Local copies make no network call and are neither throttled nor retried.

        Raises:
            ImageSourceError: If source is empty or a local file is missing
        """
        if not source:
            raise ImageSourceError(
                ErrorCode.FILE_READ_ERROR,
                "Image source is empty",
                ErrorContext(operation="download_image_from_url"),
            )
        if source.startswith(("http://", "https://")):
            self._download("download_image_from_url", source, destination)
        else:
            copy_local_image(source, destination)


__all__ = ["TMDBClient"]
