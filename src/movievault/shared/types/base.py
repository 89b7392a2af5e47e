"""
Base Dataclasses for MovieVault

Common dataclass base for models that cross the API or writer boundary.

Design Decisions:
- Dataclass over Pydantic: type safety without runtime overhead for
  transit structures decoded once per request
- Decoding goes through ``from_dict`` so unknown API keys are ignored
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BaseDataclass:
    """Common base dataclass for all MovieVault types.

    Lenient by design of the decoder: unknown fields in TMDB payloads are
    silently dropped by ``from_dict``.

    Example:
        >>> from movievault.shared.utils.dataclass_serialization import from_dict
        >>> genre = from_dict(TMDBGenre, {"id": 18, "name": "Drama", "extra": 1})
        >>> genre.name
        'Drama'
    """
