"""
CLI Error Handling Utilities

Consistent reporting of errors raised by CLI commands.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

from movievault.shared.errors import ErrorCode, MovieVaultError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    data: dict[str, Any] | None = None,
) -> str:
    """Format a command result as a JSON document.

    Args:
        command: The command that was executed
        success: Whether the operation was successful
        errors: List of error messages
        data: Additional data to include
    """
    output: dict[str, Any] = {
        "success": success,
        "command": command,
    }
    if errors:
        output["errors"] = errors
    if data:
        output["data"] = data
    return json.dumps(output, indent=2, ensure_ascii=False)


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log and print ``error`` and return the exit code for the command.

    MovieVault errors are printed with their code; anything else is reported
    as an unexpected error.
    """
    if isinstance(error, KeyboardInterrupt):
        logger.warning("Command interrupted: %s", command)
        sys.stderr.write("Interrupted\n")
        return EXIT_INTERRUPTED

    if isinstance(error, MovieVaultError):
        code = error.code
        message = error.message
        logger.debug("CLI error in %s", command, extra={"context": error.to_dict()})
    else:
        code = ErrorCode.CLI_UNEXPECTED_ERROR
        message = f"Unexpected error: {error}"
        logger.error("Unexpected error in %s", command, exc_info=error)

    if json_output:
        sys.stdout.write(
            format_json_output(
                command,
                success=False,
                errors=[message],
                data={"error_code": code.value, "error_type": type(error).__name__},
            )
            + "\n"
        )
    else:
        sys.stderr.write(f"Error [{code.value}]: {message}\n")

    return EXIT_FAILURE


__all__ = ["EXIT_FAILURE", "format_json_output", "handle_cli_error"]
