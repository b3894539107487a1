"""
Rate limiting for quote providers.

The free Alpha Vantage tier allows roughly five requests a minute, so
calls are spaced by a fixed interval rather than fired in a burst.
"""

import threading
import time
from collections.abc import Callable

from loguru import logger


class FixedIntervalGate:
    """Allow at most one acquisition per ``interval_sec``.

    The first ``acquire`` passes immediately; each later one blocks until
    ``interval_sec`` has elapsed since the previous acquisition. The gate
    remembers the last call across batches, so back-to-back cycles are
    spaced too.

    Thread Safety:
        ``acquire`` holds an internal lock while waiting, so concurrent
        callers are serialized.
    """

    def __init__(
        self,
        interval_sec: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_sec < 0:
            raise ValueError(f"interval_sec must be non-negative, got {interval_sec}")
        self.interval_sec = interval_sec
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = threading.Lock()

    def acquire(self) -> None:
        """Block until the next call is allowed, then record it."""
        with self._lock:
            if self._last is not None:
                wait = self._last + self.interval_sec - self._clock()
                if wait > 0:
                    logger.debug(f"Rate limit: waiting {wait:.1f}s before next quote request")
                    self._sleep(wait)
            self._last = self._clock()
