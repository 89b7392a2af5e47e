"""TMDB API response models."""

from .tmdb import (
    CastMember,
    Credits,
    CrewMember,
    MovieDetails,
    MovieSummary,
    TMDBGenre,
    TMDBSearchResponse,
)

__all__ = [
    "CastMember",
    "Credits",
    "CrewMember",
    "MovieDetails",
    "MovieSummary",
    "TMDBGenre",
    "TMDBSearchResponse",
]
