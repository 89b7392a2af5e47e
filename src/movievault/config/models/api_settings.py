"""API configuration models (TMDB access and retry tuning)."""

from __future__ import annotations

from pydantic import BaseModel, Field

from movievault.shared.constants import TMDBConfig as TMDBConstants
from movievault.shared.constants import TMDBErrorHandling


class TMDBSettings(BaseModel):
    """TMDB API configuration.

    Security: api_key is masked in __repr__ so it never reaches logs.
    """

    api_key: str = Field(
        default="",
        repr=False,
        description="TMDB API key (required for API access)",
    )
    language: str = Field(
        default=TMDBConstants.DEFAULT_LANGUAGE,
        min_length=1,
        description="Language tag sent with every metadata request",
    )
    timeout: int = Field(
        default=TMDBConstants.DEFAULT_TIMEOUT,
        gt=0,
        description="Request timeout in seconds",
    )
    rate_limit_delay_ms: int = Field(
        default=TMDBConstants.DEFAULT_RATE_LIMIT_DELAY_MS,
        ge=0,
        description="Minimum gap between remote calls in milliseconds",
    )
    force_refresh: bool = Field(
        default=False,
        description="Skip cache reads (responses are still cached)",
    )

    def __repr__(self) -> str:
        masked_key = "****" if self.api_key else "[empty]"
        return (
            f"TMDBSettings("
            f"api_key={masked_key}, "
            f"language={self.language}, "
            f"timeout={self.timeout}, "
            f"rate_limit_delay_ms={self.rate_limit_delay_ms}, "
            f"force_refresh={self.force_refresh})"
        )


class RetrySettings(BaseModel):
    """Retry policy tuning for remote calls."""

    max_attempts: int = Field(
        default=TMDBErrorHandling.RETRY_ATTEMPTS,
        gt=0,
        description="Total attempts per call, including the first one",
    )
    initial_backoff_ms: int = Field(
        default=TMDBErrorHandling.INITIAL_BACKOFF_MS,
        gt=0,
        description="Backoff before the first retry in milliseconds",
    )

    @property
    def initial_backoff(self) -> float:
        """Initial backoff in seconds."""
        return self.initial_backoff_ms / 1000


__all__ = [
    "RetrySettings",
    "TMDBSettings",
]
