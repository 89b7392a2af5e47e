"""MovieVault Error Handling Module

This module defines the error handling system for MovieVault, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
- HTTP failures carry their status code so callers can branch on it
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

from movievault.shared.constants import HTTPStatusCodes

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("api_key",)


class ErrorCode(str, Enum):
    """Error codes for MovieVault.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    DIRECTORY_CREATION_FAILED = "DIRECTORY_CREATION_FAILED"

    # TMDB API Errors
    TMDB_API_CONNECTION_ERROR = "TMDB_API_CONNECTION_ERROR"
    TMDB_API_TIMEOUT = "TMDB_API_TIMEOUT"
    TMDB_API_AUTHENTICATION_ERROR = "TMDB_API_AUTHENTICATION_ERROR"
    TMDB_API_RATE_LIMIT_EXCEEDED = "TMDB_API_RATE_LIMIT_EXCEEDED"
    TMDB_API_SERVER_ERROR = "TMDB_API_SERVER_ERROR"
    TMDB_API_REQUEST_FAILED = "TMDB_API_REQUEST_FAILED"
    TMDB_API_MEDIA_NOT_FOUND = "TMDB_API_MEDIA_NOT_FOUND"
    TMDB_API_NO_RESULTS = "TMDB_API_NO_RESULTS"
    TMDB_API_INVALID_RESPONSE = "TMDB_API_INVALID_RESPONSE"

    # Cache Errors
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_INIT_FAILED = "CACHE_INIT_FAILED"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    MISSING_CONFIG = "MISSING_CONFIG"
    INVALID_CONFIG = "INVALID_CONFIG"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # CLI Errors
    CLI_COMMAND_FAILED = "CLI_COMMAND_FAILED"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path and Enum to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization in structured logs.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            # frozen dataclass: bypass __setattr__ for the coerced copy
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with sensitive keys removed.

        Args:
            mask_keys: Keys to drop from additional_data. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with a guaranteed additional_data key.

        Example:
            >>> ErrorContext(operation="search_movie").safe_dict()
            {'operation': 'search_movie', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.file_path is not None:
            data["file_path"] = self.file_path
        if self.operation is not None:
            data["operation"] = self.operation

        additional = dict(self.additional_data or {})
        for key in mask_keys:
            additional.pop(key, None)
        data["additional_data"] = additional

        return data


class MovieVaultError(Exception):
    """Base exception class for all MovieVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize MovieVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for structured logging.

        Returns:
            Dictionary with code, message, masked context and original_error
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(MovieVaultError):
    """Domain-specific errors.

    These errors occur when the remote data does not satisfy what the
    caller asked for, e.g. a search that matched nothing.
    """


class InfrastructureError(MovieVaultError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems
    like the file system, network, the TMDB API or the cache database.
    """


class ApplicationError(MovieVaultError):
    """Application-level errors (configuration, command handling)."""


class SecurityError(ApplicationError):
    """Missing or invalid credentials."""


# --- TMDB transport and HTTP errors -----------------------------------------


class TMDBTransportError(InfrastructureError):
    """Connection failure or timeout before any HTTP status was received."""


class TMDBHTTPError(InfrastructureError):
    """Non-success HTTP status from the TMDB API.

    Attributes:
        status_code: HTTP status returned by the server
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(code, message, context, original_error)


class TMDBRateLimitError(TMDBHTTPError):
    """HTTP 429 Too Many Requests."""


class TMDBServerError(TMDBHTTPError):
    """HTTP 5xx."""


class TMDBAuthenticationError(TMDBHTTPError):
    """HTTP 401. Signals a configuration problem, never retried."""


class NotFoundError(TMDBHTTPError):
    """HTTP 404."""


class MovieNotFoundError(NotFoundError):
    """A trusted TMDB id no longer resolves to a movie.

    Raised by id-based lookups so the caller can fall back to a
    title/year search.
    """


class TMDBResponseError(InfrastructureError):
    """The API answered 2xx but the body could not be decoded."""


class EmptyResultError(DomainError):
    """A search returned zero matches."""


# --- Cache and image errors --------------------------------------------------


class CacheStorageError(InfrastructureError):
    """Cache backend failure. Callers continue as if no cache were configured."""


class ImageSourceError(InfrastructureError):
    """Image source missing, empty or unreadable."""


class ImageWriteError(InfrastructureError):
    """Image destination could not be created or written."""


def create_http_error(
    status_code: int,
    message: str,
    operation: str | None = None,
    url: str | None = None,
) -> TMDBHTTPError:
    """Create the TMDBHTTPError subclass matching an HTTP status code.

    Args:
        status_code: HTTP status from the response
        message: Human-readable error message
        operation: Operation that issued the request
        url: Request URL without credentials

    Returns:
        Typed HTTP error carrying status_code
    """
    additional_data: dict[str, PrimitiveContextValue] = {"status_code": status_code}
    if url:
        additional_data["url"] = url
    context = ErrorContext(operation=operation, additional_data=additional_data)

    error_class: type[TMDBHTTPError]
    if status_code == HTTPStatusCodes.TOO_MANY_REQUESTS:
        error_class, code = TMDBRateLimitError, ErrorCode.TMDB_API_RATE_LIMIT_EXCEEDED
    elif HTTPStatusCodes.is_server_error(status_code):
        error_class, code = TMDBServerError, ErrorCode.TMDB_API_SERVER_ERROR
    elif status_code == HTTPStatusCodes.UNAUTHORIZED:
        error_class, code = TMDBAuthenticationError, ErrorCode.TMDB_API_AUTHENTICATION_ERROR
    elif status_code == HTTPStatusCodes.NOT_FOUND:
        error_class, code = NotFoundError, ErrorCode.TMDB_API_MEDIA_NOT_FOUND
    else:
        error_class, code = TMDBHTTPError, ErrorCode.TMDB_API_REQUEST_FAILED

    return error_class(code, message, status_code, context)


def create_cache_error(
    message: str,
    operation: str,
    key: str | None = None,
    original_error: Exception | None = None,
    *,
    write: bool = True,
) -> CacheStorageError:
    """Create a cache storage error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"key": key} if key else None
    )
    context = ErrorContext(operation=operation, additional_data=additional_data)
    code = ErrorCode.CACHE_WRITE_FAILED if write else ErrorCode.CACHE_READ_FAILED
    return CacheStorageError(code, message, context, original_error)


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )


__all__ = [
    "ApplicationError",
    "CacheStorageError",
    "DomainError",
    "EmptyResultError",
    "ErrorCode",
    "ErrorContext",
    "ImageSourceError",
    "ImageWriteError",
    "InfrastructureError",
    "MovieNotFoundError",
    "MovieVaultError",
    "NotFoundError",
    "SecurityError",
    "TMDBAuthenticationError",
    "TMDBHTTPError",
    "TMDBRateLimitError",
    "TMDBResponseError",
    "TMDBServerError",
    "TMDBTransportError",
    "create_cache_error",
    "create_config_error",
    "create_http_error",
]
