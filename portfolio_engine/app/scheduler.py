"""
Periodic refresh.

The timer is re-armed only after a cycle finishes, so a slow cycle
(rate-limited quote fetches) delays the next tick instead of overlapping
with it.
"""

import threading
from collections.abc import Callable

from loguru import logger

from portfolio_engine.core.constants import DEFAULT_REFRESH_SEC

from .commands import Tick
from .cycle import CycleResult, PortfolioCycle


class RefreshScheduler:
    """Run ``Tick`` cycles on a background thread.

    Args:
        cycle: Cycle runner to drive
        interval_source: Seconds to wait before the next tick; read after
            every cycle, so settings changes apply from the next wait
        run_immediately: Run one cycle as soon as the scheduler starts
    """

    def __init__(
        self,
        cycle: PortfolioCycle,
        interval_source: Callable[[], float] | None = None,
        run_immediately: bool = True,
    ) -> None:
        self.cycle = cycle
        self.interval_source = interval_source or (
            lambda: cycle.settings_source().effective_refresh_sec
        )
        self.run_immediately = run_immediately
        self.ticks = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> CycleResult | None:
        """Run one tick; failures are logged and reported as None."""
        self.ticks += 1
        try:
            return self.cycle.run(Tick())
        except Exception:
            logger.exception(f"Refresh tick {self.ticks} failed")
            return None

    def run_forever(self) -> None:
        """Tick in the calling thread until ``stop`` is called."""
        self._stop.clear()
        self._loop()

    def start(self) -> None:
        """Start ticking on a daemon thread."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="portfolio-refresh", daemon=True)
        self._thread.start()
        logger.info("Refresh scheduler started")

    def stop(self, timeout: float | None = None) -> None:
        """Stop ticking and wait for an in-flight cycle to finish."""
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None
        logger.info("Refresh scheduler stopped")

    def _loop(self) -> None:
        if self.run_immediately and not self._stop.is_set():
            self.run_once()
        while not self._stop.wait(self._next_interval()):
            self.run_once()

    def _next_interval(self) -> float:
        try:
            return float(self.interval_source())
        except Exception:
            logger.exception(f"Could not read refresh interval; retrying in {DEFAULT_REFRESH_SEC}s")
            return float(DEFAULT_REFRESH_SEC)
