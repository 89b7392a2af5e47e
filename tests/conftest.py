"""
Pytest configuration and shared fixtures for MovieVault tests.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Callable, Generator
from typing import Any

import pytest
import requests

from movievault.services.cache import InMemoryCache
from movievault.services.tmdb.tmdb_client import TMDBClient

INCEPTION_SEARCH: dict[str, Any] = {
    "page": 1,
    "total_pages": 1,
    "total_results": 2,
    "results": [
        {
            "id": 27205,
            "title": "Inception",
            "original_title": "Inception",
            "overview": "Cobb, a skilled thief who commits corporate espionage...",
            "poster_path": "/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg",
            "backdrop_path": "/8ZTVqvKDQ8emSGUEMjsS4yHAwrp.jpg",
            "release_date": "2010-07-15",
            "vote_average": 8.4,
            "vote_count": 36000,
            "popularity": 120.5,
            "genre_ids": [28, 878, 12],
            "adult": False,
            "original_language": "en",
        },
        {
            "id": 64956,
            "title": "Inception: The Cobol Job",
            "release_date": "2010-12-07",
            "poster_path": None,
        },
    ],
}

INCEPTION_DETAILS: dict[str, Any] = {
    "id": 27205,
    "imdb_id": "tt1375666",
    "title": "Inception",
    "original_title": "Inception",
    "overview": "Cobb, a skilled thief who commits corporate espionage...",
    "tagline": "Your mind is the scene of the crime.",
    "poster_path": "/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg",
    "backdrop_path": "/8ZTVqvKDQ8emSGUEMjsS4yHAwrp.jpg",
    "release_date": "2010-07-15",
    "runtime": 148,
    "vote_average": 8.4,
    "vote_count": 36000,
    "popularity": 120.5,
    "genres": [
        {"id": 28, "name": "Action"},
        {"id": 878, "name": "Science Fiction"},
        {"id": 12, "name": "Adventure"},
    ],
    "status": "Released",
    "homepage": None,
    "budget": 160000000,
}

INCEPTION_CREDITS: dict[str, Any] = {
    "id": 27205,
    "cast": [
        {"id": 6193, "name": "Leonardo DiCaprio", "character": "Cobb", "order": 0},
        {"id": 24045, "name": "Joseph Gordon-Levitt", "character": "Arthur", "order": 1},
        {"id": 27578, "name": "Elliot Page", "character": "Ariadne", "order": 2},
        {"id": 2524, "name": "Tom Hardy", "character": "Eames", "order": 3},
        {"id": 3899, "name": "Ken Watanabe", "character": "Saito", "order": 4},
        {"id": 2037, "name": "Cillian Murphy", "character": "Fischer", "order": 5},
    ],
    "crew": [
        {"id": 525, "name": "Christopher Nolan", "job": "Director", "department": "Directing"},
        {"id": 525, "name": "Christopher Nolan", "job": "Writer", "department": "Writing"},
        {"id": 947, "name": "Hans Zimmer", "job": "Original Music Composer", "department": "Sound"},
    ],
}


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep tests independent of the developer's environment and logging setup."""
    for name in list(os.environ):
        if name.startswith("MOVIEVAULT_"):
            monkeypatch.delenv(name, raising=False)
    # setenv first so teardown also removes values written by load_dotenv
    monkeypatch.setenv("TMDB_API_KEY", "")
    monkeypatch.delenv("TMDB_API_KEY")

    yield

    package_logger = logging.getLogger("movievault")
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory for fully-read ``requests.Response`` objects."""

    def _make(status_code: int = 200, body: Any = b"", url: str = "") -> requests.Response:
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode("utf-8")
        response = requests.Response()
        response.status_code = status_code
        response._content = body
        response._content_consumed = True
        response.url = url
        return response

    return _make


@pytest.fixture
def session(mocker: Any) -> Any:
    """Mocked requests.Session; queue results through ``session.get.side_effect``."""
    return mocker.Mock(spec=requests.Session)


@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache()


@pytest.fixture
def sleeps() -> list[float]:
    """Records every sleep requested by the code under test."""
    return []


@pytest.fixture
def make_client(session: Any, sleeps: list[float]) -> Callable[..., TMDBClient]:
    """Factory for TMDBClient wired to the mocked session and a recording sleep."""

    def _make(**overrides: Any) -> TMDBClient:
        options: dict[str, Any] = {
            "rate_limit_delay": 0,
            "initial_backoff": 1.0,
            "session": session,
            "sleep": sleeps.append,
        }
        options.update(overrides)
        return TMDBClient("test-api-key", **options)  # pragma: allowlist secret

    return _make


@pytest.fixture
def inception_search() -> dict[str, Any]:
    return copy.deepcopy(INCEPTION_SEARCH)


@pytest.fixture
def inception_details() -> dict[str, Any]:
    return copy.deepcopy(INCEPTION_DETAILS)


@pytest.fixture
def inception_credits() -> dict[str, Any]:
    return copy.deepcopy(INCEPTION_CREDITS)
