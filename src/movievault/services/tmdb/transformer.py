"""Assemble MovieRecord from TMDB details and credits."""

from __future__ import annotations

from datetime import datetime

from movievault.shared.constants import RecordAssembly
from movievault.shared.models.api import Credits, MovieDetails
from movievault.shared.models.movie import MovieRecord


def derive_release_year(release_date: str | None) -> int:
    """Year from the first four characters of ``release_date``.

    Short, empty or non-numeric dates give 0.

    Example:
        >>> derive_release_year("2010-07-15")
        2010
        >>> derive_release_year("")
        0
    """
    if not release_date or len(release_date) < RecordAssembly.YEAR_PREFIX_LENGTH:
        return 0
    prefix = release_date[: RecordAssembly.YEAR_PREFIX_LENGTH]
    if not prefix.isdecimal():
        return 0
    return int(prefix)


def extract_directors(credits: Credits) -> str:
    """Names of every crew member whose job is Director, in API order."""
    names = [member.name for member in credits.crew if member.job == RecordAssembly.DIRECTOR_JOB]
    return RecordAssembly.DIRECTOR_SEPARATOR.join(names)


def extract_cast(credits: Credits, limit: int = RecordAssembly.MAX_CAST) -> list[str]:
    """First ``limit`` cast names, order preserved."""
    return [member.name for member in credits.cast[:limit]]


def build_movie_record(
    details: MovieDetails,
    credits: Credits,
    scanned_at: datetime | None = None,
) -> MovieRecord:
    """Merge details and credits into one MovieRecord.

    Args:
        details: ``/movie/{id}`` response
        credits: ``/movie/{id}/credits`` response
        scanned_at: Acquisition time, defaults to now (UTC)
    """
    record = MovieRecord(
        title=details.title,
        tmdb_id=details.id,
        description=details.overview,
        rating=details.vote_average,
        release_year=derive_release_year(details.release_date),
        release_date=details.release_date,
        runtime=details.runtime,
        genres=[genre.name for genre in details.genres],
        director=extract_directors(credits),
        cast=extract_cast(credits),
        imdb_id=details.imdb_id,
        poster_path=details.poster_path,
        backdrop_path=details.backdrop_path,
    )
    if scanned_at is not None:
        record.scanned_at = scanned_at
    return record


__all__ = [
    "build_movie_record",
    "derive_release_year",
    "extract_cast",
    "extract_directors",
]
