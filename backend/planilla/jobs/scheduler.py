"""In-process fixed-interval scheduler.

Each :class:`IntervalJob` owns one daemon thread that calls ``tick()`` every
``interval_seconds`` until stopped. ``tick()`` is also public so callers and
tests can fire a run by hand; a tick that starts while the previous run is
still executing is skipped, never queued.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class IntervalJob:
    def __init__(self, name: str, func: Callable[[], object], interval_seconds: float = 60):
        self.name = name
        self._func = func
        self._interval = interval_seconds
        self._stop_event = threading.Event()
        self._running = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    def tick(self) -> bool:
        """Run the job once. Returns False when the tick was skipped."""
        if not self._running.acquire(blocking=False):
            logger.warning("%s: previous run still in progress, skipping tick", self.name)
            return False
        try:
            self._func()
        except Exception:
            logger.exception("%s: run failed", self.name)
        finally:
            self._running.release()
        return True

    @property
    def busy(self) -> bool:
        return self._running.locked()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info("%s started (every %ss)", self.name, self._interval)

    def stop(self, timeout: float = 30.0) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout=timeout)
        logger.info("%s stopped", self.name)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self.tick()
            self._stop_event.wait(timeout=self._interval)
