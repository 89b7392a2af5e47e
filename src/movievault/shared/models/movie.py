"""Movie record handed to the document writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from movievault.shared.types.base import BaseDataclass


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MovieRecord(BaseDataclass):
    """Canonical metadata for one scanned movie.

    Created once per scan item from MovieDetails + Credits, handed to the
    writer and not retained by the client.

    Attributes:
        title: Localized title
        description: Synopsis (TMDB ``overview``)
        rating: TMDB vote average
        release_year: Four-digit year, 0 when the date is missing
        release_date: Full release date string as returned by TMDB
        runtime: Runtime in minutes
        genres: Genre names in API order
        director: All directors joined with ", "
        cast: Up to five leading cast names
        tmdb_id: TMDB movie id
        imdb_id: IMDb id, empty when unknown
        poster_path: TMDB poster path fragment
        backdrop_path: TMDB backdrop path fragment
        scanned_at: When the metadata was acquired (UTC)
    """

    title: str
    tmdb_id: int
    description: str = ""
    rating: float = 0.0
    release_year: int = 0
    release_date: str = ""
    runtime: int = 0
    genres: list[str] = field(default_factory=list)
    director: str = ""
    cast: list[str] = field(default_factory=list)
    imdb_id: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    scanned_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping with the writer's front-matter keys."""
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "rating": self.rating,
            "releaseYear": self.release_year,
            "releaseDate": self.release_date,
            "runtime": self.runtime,
            "genres": list(self.genres),
            "director": self.director,
            "cast": list(self.cast),
            "tmdbId": self.tmdb_id,
            "scannedAt": self.scanned_at.isoformat(),
        }
        if self.imdb_id:
            data["imdbId"] = self.imdb_id
        return data
