"""Tests for MovieRecord assembly."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from movievault.services.tmdb.transformer import (
    build_movie_record,
    derive_release_year,
    extract_cast,
    extract_directors,
)
from movievault.shared.models.api import CastMember, Credits, CrewMember, MovieDetails, TMDBGenre


class TestDeriveReleaseYear:
    @pytest.mark.parametrize(
        ("release_date", "expected"),
        [
            ("2010-07-15", 2010),
            ("1999", 1999),
            ("", 0),
            ("201", 0),
            (None, 0),
            ("TBA-2025", 0),
            ("¹²³⁴-01-01", 0),
        ],
    )
    def test_year_from_prefix(self, release_date: str | None, expected: int) -> None:
        assert derive_release_year(release_date) == expected


class TestCreditsExtraction:
    def test_all_directors_joined_in_order(self) -> None:
        credits = Credits(
            id=1,
            crew=[
                CrewMember(id=1, name="Lana Wachowski", job="Director"),
                CrewMember(id=2, name="Joel Silver", job="Producer"),
                CrewMember(id=3, name="Lilly Wachowski", job="Director"),
            ],
        )

        assert extract_directors(credits) == "Lana Wachowski, Lilly Wachowski"

    def test_no_director_gives_empty_string(self) -> None:
        assert extract_directors(Credits(id=1)) == ""

    def test_cast_limited_to_five_in_order(self) -> None:
        credits = Credits(
            id=1,
            cast=[CastMember(id=i, name=f"Actor {i}", order=i) for i in range(8)],
        )

        assert extract_cast(credits) == [f"Actor {i}" for i in range(5)]

    def test_short_cast_kept_whole(self) -> None:
        credits = Credits(id=1, cast=[CastMember(id=1, name="Solo")])

        assert extract_cast(credits) == ["Solo"]


class TestBuildMovieRecord:
    def test_fields_are_merged(self) -> None:
        # Given
        details = MovieDetails(
            id=603,
            title="The Matrix",
            overview="A hacker learns the truth.",
            release_date="1999-03-31",
            runtime=136,
            vote_average=8.2,
            imdb_id="tt0133093",
            genres=[TMDBGenre(id=28, name="Action"), TMDBGenre(id=878, name="Science Fiction")],
            poster_path="/matrix.jpg",
        )
        credits = Credits(
            id=603,
            cast=[CastMember(id=6384, name="Keanu Reeves")],
            crew=[CrewMember(id=9339, name="Lana Wachowski", job="Director")],
        )
        scanned_at = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

        # When
        record = build_movie_record(details, credits, scanned_at=scanned_at)

        # Then
        assert record.title == "The Matrix"
        assert record.description == "A hacker learns the truth."
        assert record.release_year == 1999
        assert record.rating == pytest.approx(8.2)
        assert record.genres == ["Action", "Science Fiction"]
        assert record.director == "Lana Wachowski"
        assert record.cast == ["Keanu Reeves"]
        assert record.poster_path == "/matrix.jpg"
        assert record.scanned_at == scanned_at

    def test_missing_release_date(self) -> None:
        record = build_movie_record(MovieDetails(id=1, title="Untitled"), Credits(id=1))

        assert record.release_year == 0
        assert record.scanned_at.tzinfo is not None
