"""TMDB API Response Models.

This module defines dataclasses for TMDB API responses to ensure
type safety at the external API boundary. They are transit structures:
decoded once, read while assembling a MovieRecord, never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from movievault.shared.types.base import BaseDataclass


@dataclass
class TMDBGenre(BaseDataclass):
    """TMDB genre information."""

    id: int
    name: str


@dataclass
class MovieSummary(BaseDataclass):
    """Single result of ``/search/movie``."""

    id: int
    title: str = ""
    original_title: str = ""
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genre_ids: list[int] = field(default_factory=list)
    adult: bool = False
    original_language: str = ""


@dataclass
class TMDBSearchResponse(BaseDataclass):
    """Complete ``/search/movie`` response."""

    page: int = 1
    total_pages: int = 0
    total_results: int = 0
    results: list[MovieSummary] = field(default_factory=list)


@dataclass
class MovieDetails(BaseDataclass):
    """``/movie/{id}`` response."""

    id: int
    title: str = ""
    original_title: str = ""
    overview: str = ""
    tagline: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    release_date: str = ""
    runtime: int = 0
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genres: list[TMDBGenre] = field(default_factory=list)
    status: str = ""
    imdb_id: str = ""
    homepage: str = ""
    original_language: str = ""


@dataclass
class CastMember(BaseDataclass):
    """Cast entry of ``/movie/{id}/credits``."""

    id: int
    name: str
    character: str = ""
    order: int = 0
    profile_path: str = ""


@dataclass
class CrewMember(BaseDataclass):
    """Crew entry of ``/movie/{id}/credits``."""

    id: int
    name: str
    job: str = ""
    department: str = ""
    profile_path: str = ""


@dataclass
class Credits(BaseDataclass):
    """``/movie/{id}/credits`` response."""

    id: int = 0
    cast: list[CastMember] = field(default_factory=list)
    crew: list[CrewMember] = field(default_factory=list)


__all__ = [
    "CastMember",
    "Credits",
    "CrewMember",
    "MovieDetails",
    "MovieSummary",
    "TMDBGenre",
    "TMDBSearchResponse",
]
