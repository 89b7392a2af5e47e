"""Shared data models."""

from .api import (
    CastMember,
    Credits,
    CrewMember,
    MovieDetails,
    MovieSummary,
    TMDBGenre,
    TMDBSearchResponse,
)
from .movie import MovieRecord

__all__ = [
    "CastMember",
    "Credits",
    "CrewMember",
    "MovieDetails",
    "MovieRecord",
    "MovieSummary",
    "TMDBGenre",
    "TMDBSearchResponse",
]
