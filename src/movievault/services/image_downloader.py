"""Image acquisition: write downloaded or local image bytes to disk."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from movievault.shared.errors import (
    ErrorCode,
    ErrorContext,
    ImageSourceError,
    ImageWriteError,
)

logger = logging.getLogger(__name__)


def _prepare_destination(destination: Path) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ImageWriteError(
            code=ErrorCode.DIRECTORY_CREATION_FAILED,
            message=f"Cannot create directory for {destination}: {e}",
            context=ErrorContext(
                file_path=str(destination.parent),
                operation="prepare_destination",
            ),
            original_error=e,
        ) from e


def write_stream(chunks: Iterable[bytes], destination: str | Path) -> int:
    """Write a byte stream to ``destination``, replacing any existing file.

    Args:
        chunks: Byte chunks, e.g. ``response.iter_content()``
        destination: Target file; parent directories are created

    Returns:
        Number of bytes written

    Raises:
        ImageWriteError: If the destination cannot be created or written
    """
    destination = Path(destination)
    _prepare_destination(destination)

    written = 0
    try:
        with destination.open("wb") as f:
            for chunk in chunks:
                if chunk:
                    f.write(chunk)
                    written += len(chunk)
    except OSError as e:
        raise ImageWriteError(
            code=ErrorCode.FILE_WRITE_ERROR,
            message=f"Failed to write image {destination}: {e}",
            context=ErrorContext(file_path=str(destination), operation="write_stream"),
            original_error=e,
        ) from e

    logger.debug("Wrote %d bytes to %s", written, destination)
    return written


def copy_local_image(source: str | Path, destination: str | Path) -> Path:
    """Copy a local image file byte-for-byte.

    Raises:
        ImageSourceError: If the source is missing or unreadable
        ImageWriteError: If the destination cannot be created or written
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_file():
        raise ImageSourceError(
            code=ErrorCode.FILE_NOT_FOUND,
            message=f"Image source not found: {source}",
            context=ErrorContext(file_path=str(source), operation="copy_local_image"),
        )

    _prepare_destination(destination)

    try:
        src_file = source.open("rb")
    except OSError as e:
        raise ImageSourceError(
            code=ErrorCode.FILE_READ_ERROR,
            message=f"Cannot read image source {source}: {e}",
            context=ErrorContext(file_path=str(source), operation="copy_local_image"),
            original_error=e,
        ) from e

    with src_file:
        try:
            with destination.open("wb") as dst_file:
                shutil.copyfileobj(src_file, dst_file)
        except OSError as e:
            raise ImageWriteError(
                code=ErrorCode.FILE_WRITE_ERROR,
                message=f"Failed to copy image to {destination}: {e}",
                context=ErrorContext(file_path=str(destination), operation="copy_local_image"),
                original_error=e,
            ) from e

    logger.debug("Copied local image %s -> %s", source, destination)
    return destination


__all__ = ["copy_local_image", "write_stream"]
