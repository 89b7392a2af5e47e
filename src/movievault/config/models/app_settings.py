"""Application-level configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level name")
    file: str | None = Field(
        default=None,
        description="Optional JSON log file",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        """Normalize and validate the level name."""
        normalized = value.upper()
        if normalized not in _VALID_LEVELS:
            msg = f"Invalid log level: {value}. Must be one of {', '.join(_VALID_LEVELS)}"
            raise ValueError(msg)
        return normalized


__all__ = ["LoggingSettings"]
