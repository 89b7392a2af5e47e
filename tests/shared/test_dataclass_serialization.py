"""Tests for dataclass (de)serialization of TMDB payloads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

import pytest

from movievault.shared.models.api import Credits, MovieDetails, TMDBSearchResponse
from movievault.shared.utils.dataclass_serialization import from_dict, to_dict


@dataclass
class Stamped:
    name: str
    when: datetime


class TestFromDict:
    def test_unknown_keys_ignored_and_nulls_defaulted(self) -> None:
        details = from_dict(
            MovieDetails,
            {
                "id": 27205,
                "title": "Inception",
                "imdb_id": None,
                "runtime": None,
                "budget": 160000000,
                "genres": [{"id": 28, "name": "Action"}],
            },
        )

        assert details.imdb_id == ""
        assert details.runtime == 0
        assert details.genres[0].name == "Action"

    def test_nested_lists(self) -> None:
        response = from_dict(
            TMDBSearchResponse,
            {"page": 1, "results": [{"id": 1, "title": "A"}, "garbage", {"id": 2}]},
        )

        assert [summary.id for summary in response.results] == [1, 2]

    def test_missing_required_field(self) -> None:
        with pytest.raises(KeyError):
            from_dict(Credits, {"cast": [{"name": "No Id"}]})

    def test_rejects_non_dict(self) -> None:
        with pytest.raises(TypeError):
            from_dict(MovieDetails, ["not", "a", "dict"])

    def test_datetime_fields(self) -> None:
        stamped = from_dict(Stamped, {"name": "x", "when": "2024-01-01T00:00:00+00:00"})

        assert stamped.when == datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestToDict:
    def test_nested_and_datetime(self) -> None:
        credits = from_dict(Credits, {"id": 5, "cast": [{"id": 1, "name": "A"}]})

        assert to_dict(credits)["cast"][0]["name"] == "A"
        assert to_dict(Stamped("x", datetime(2024, 1, 1, tzinfo=timezone.utc)))["when"] == (
            "2024-01-01T00:00:00+00:00"
        )

    def test_rejects_classes(self) -> None:
        with pytest.raises(TypeError):
            to_dict(Credits)
