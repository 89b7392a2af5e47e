"""TMDB client and record assembly."""

from .tmdb_client import TMDBClient
from .transformer import build_movie_record, derive_release_year

__all__ = ["TMDBClient", "build_movie_record", "derive_release_year"]
