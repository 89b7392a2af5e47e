"""Request throttle shared by every remote call of one client.

Guarantees at least ``delay`` seconds between the end of one remote call
and the start of the next. The wait is taken before the next call rather
than after the previous one, so nothing is slept after the last call of a
batch. Thread-safe: concurrent callers queue on one lock and share the
quota.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Callable

from movievault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


class RequestThrottle:
    """Fixed-gap throttle.

    Args:
        delay: Minimum gap between remote calls in seconds
        sleep: Sleep function, replaceable in tests
        clock: Monotonic clock, replaceable in tests

    Raises:
        ApplicationError: If delay is negative
    """

    def __init__(
        self,
        delay: float,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if delay < 0:
            raise ApplicationError(
                code=ErrorCode.VALIDATION_ERROR,
                message=f"Rate limit delay must be non-negative, got: {delay}",
                context=ErrorContext(
                    operation="throttle_init",
                    additional_data={"delay": delay},
                ),
            )
        self.delay = delay
        self._sleep = sleep
        self._clock = clock
        self._lock = threading.Lock()
        self._last_call_end: float | None = None

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold the throttle for one remote call.

        Waits out the remaining gap, runs the body, then records when it
        finished. The end time is recorded even when the call raises.
        """
        with self._lock:
            if self._last_call_end is not None and self.delay > 0:
                remaining = self.delay - (self._clock() - self._last_call_end)
                if remaining > 0:
                    logger.debug("Throttling next request for %.3fs", remaining)
                    self._sleep(remaining)
            try:
                yield
            finally:
                self._last_call_end = self._clock()


__all__ = ["RequestThrottle"]
