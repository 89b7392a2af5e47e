"""Retry policy for remote calls.

Re-invokes a fallible operation with exponential backoff. Failures are
classified by ``classify_failure``: transport errors, HTTP 429 and HTTP 5xx
are retried; every other failure propagates on the first occurrence. A 429
doubles the backoff for that attempt.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, TypeVar

import requests
from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt

from movievault.shared.constants import HTTPStatusCodes
from movievault.shared.errors import TMDBHTTPError, TMDBTransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryVerdict(str, Enum):
    """How the retry policy treats an outcome."""

    SUCCESS = "success"
    RETRY = "retry"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class RetryOutcome:
    """State handed to the ``on_retry`` observer before each sleep.

    Attributes:
        attempt: Attempt that just failed (1-based)
        max_attempts: Configured attempt limit
        backoff: Seconds the policy is about to sleep
        last_error: Failure of ``attempt``
    """

    attempt: int
    max_attempts: int
    backoff: float
    last_error: BaseException


def _classify_status(status_code: int) -> RetryVerdict:
    if not HTTPStatusCodes.is_error(status_code):
        return RetryVerdict.SUCCESS
    if status_code == HTTPStatusCodes.TOO_MANY_REQUESTS or HTTPStatusCodes.is_server_error(
        status_code
    ):
        return RetryVerdict.RETRY
    return RetryVerdict.TERMINAL


def _status_of(error: BaseException) -> int | None:
    if isinstance(error, TMDBHTTPError):
        return error.status_code
    if isinstance(error, requests.RequestException) and error.response is not None:
        return error.response.status_code
    return None


def classify_failure(error_or_status: BaseException | int) -> RetryVerdict:
    """Classify an HTTP status or a raised exception.

    Pure function; never performs I/O.

    Args:
        error_or_status: HTTP status code or the exception an attempt raised

    Returns:
        SUCCESS for 2xx/3xx statuses, RETRY for transport errors, 429 and 5xx,
        TERMINAL otherwise
    """
    if isinstance(error_or_status, int):
        return _classify_status(error_or_status)

    status_code = _status_of(error_or_status)
    if status_code is not None:
        verdict = _classify_status(status_code)
        # an exception is never a success
        return RetryVerdict.TERMINAL if verdict is RetryVerdict.SUCCESS else verdict

    if isinstance(error_or_status, (TMDBTransportError, requests.RequestException)):
        return RetryVerdict.RETRY

    return RetryVerdict.TERMINAL


def compute_backoff(attempt: int, initial_backoff: float, error: BaseException | None) -> float:
    """Backoff after ``attempt`` fails: ``initial * 2**(attempt-1)``, doubled on 429."""
    backoff = initial_backoff * (2 ** (attempt - 1))
    if error is not None and _status_of(error) == HTTPStatusCodes.TOO_MANY_REQUESTS:
        backoff *= 2
    return backoff


def _is_retryable(error: BaseException) -> bool:
    return classify_failure(error) is RetryVerdict.RETRY


def retry_call(
    operation: Callable[[], T],
    max_attempts: int,
    initial_backoff: float,
    on_retry: Callable[[RetryOutcome], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation`` under the retry policy.

    Args:
        operation: Zero-argument callable performing one attempt
        max_attempts: Total attempts; values below 1 mean a single attempt
        initial_backoff: Seconds to wait before the first retry
        on_retry: Observer called before every sleep
        sleep: Sleep function, replaceable in tests

    Returns:
        The first successful result

    Raises:
        Exception: The terminal error, or the last retryable error once the
            attempts are exhausted
    """
    attempts = max(1, max_attempts)

    def _wait(retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        return compute_backoff(retry_state.attempt_number, initial_backoff, error)

    def _before_sleep(retry_state: RetryCallState) -> None:
        if on_retry is None or retry_state.outcome is None:
            return
        backoff = retry_state.next_action.sleep if retry_state.next_action else 0.0
        on_retry(
            RetryOutcome(
                attempt=retry_state.attempt_number,
                max_attempts=attempts,
                backoff=backoff,
                last_error=retry_state.outcome.exception(),
            )
        )

    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception(_is_retryable),
        wait=_wait,
        before_sleep=_before_sleep,
        sleep=sleep,
        reraise=True,
    )
    return retrying(operation)


__all__ = [
    "RetryOutcome",
    "RetryVerdict",
    "classify_failure",
    "compute_backoff",
    "retry_call",
]
