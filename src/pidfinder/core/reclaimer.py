"""Periodic forced garbage collection.

A process-wide timer that calls the collector on a fixed interval to
keep heap use low in long-running hosts.  It shares nothing with the
resolution pipeline.  The core ``tick()`` method is deterministic and
synchronous — it accepts an explicit *now* timestamp, making the timer
testable without threads.
"""

from __future__ import annotations

import gc
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0


class MemoryReclaimer:
    """Run a garbage collector every *interval_seconds*.

    Parameters
    ----------
    interval_seconds:
        Delay between collections.
    collect:
        Collector callable, returning the number of objects freed.
        Defaults to :func:`gc.collect`.
    """

    def __init__(
        self,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        collect: Callable[[], Any] = gc.collect,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._interval = interval_seconds
        self._collect = collect
        self._next_run_at = 0.0
        self._run_count = 0
        self._error_count = 0
        self._running = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        """Whether the background thread is active."""
        return self._running

    # --- Core tick ------------------------------------------------------

    def tick(self, now: float | None = None) -> Any:
        """Run the collector if it is due and reschedule it.

        Returns the collector's result, or ``None`` when nothing ran or
        the collector raised.
        """
        if now is None:
            now = time.monotonic()
        if now < self._next_run_at:
            return None

        self._next_run_at = now + self._interval
        self._run_count += 1
        try:
            freed = self._collect()
        except Exception as exc:
            self._error_count += 1
            logger.warning("Garbage collection failed: %s", exc)
            return None
        logger.debug("Garbage collection freed %s object(s)", freed)
        return freed

    # --- Background thread ----------------------------------------------

    def start(self) -> None:
        """Start the background timer thread."""
        if self._running:
            return
        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop,
            daemon=True,
            name="pidfinder-reclaimer",
        )
        self._thread.start()
        logger.info("Memory reclaimer started (interval=%.1fs)", self._interval)

    def stop(self) -> None:
        """Stop the background timer thread."""
        self._running = False
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=self._interval + 2)
            self._thread = None
        logger.info("Memory reclaimer stopped")

    def _run_loop(self) -> None:
        while self._running:
            self.tick()
            self._stop_event.wait(self._interval)

    # --- Stats ----------------------------------------------------------

    def get_stats(self) -> dict[str, Any]:
        return {
            "interval_seconds": self._interval,
            "running": self._running,
            "run_count": self._run_count,
            "error_count": self._error_count,
        }


_reclaimer: MemoryReclaimer | None = None
_reclaimer_lock = threading.Lock()


def start_reclaimer(
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
) -> MemoryReclaimer:
    """Start the process-wide reclaimer once and return it.

    Later calls return the same instance, restarting it if it was
    stopped; *interval_seconds* only applies to the first call.  The
    thread is a daemon and ends with the process.
    """
    global _reclaimer
    with _reclaimer_lock:
        if _reclaimer is None:
            _reclaimer = MemoryReclaimer(interval_seconds=interval_seconds)
        if not _reclaimer.is_running:
            _reclaimer.start()
        return _reclaimer
