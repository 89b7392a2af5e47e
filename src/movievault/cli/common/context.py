"""
CLI Context Management Module

Holds the options parsed by the root callback in a ContextVar so every
command sees the same configuration path and log level.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class CliContext(BaseModel):
    """
    Options shared by all commands.

    Attributes:
        config_path: Optional TOML configuration file
        log_level: Console log level override
    """

    config_path: Path | None = Field(default=None, description="TOML configuration file")
    log_level: LogLevel | None = Field(
        default=None,
        description="Console log level; None uses the configured level",
    )


_cli_context: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """Return the current CLI context, or defaults when none was set."""
    return _cli_context.get() or CliContext()


def set_cli_context(context: CliContext) -> None:
    _cli_context.set(context)


__all__ = ["CliContext", "LogLevel", "get_cli_context", "set_cli_context"]
