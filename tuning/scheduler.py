"""Cancellable fixed-cadence background task."""
import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Calls `callback` every `interval` seconds on a daemon thread until cancelled.

    Ticks are scheduled against a monotonic clock so a slow callback does not
    make the cadence drift. A callback that raises is logged and the task keeps
    running.
    """

    def __init__(self, interval: float, callback: Callable[[], None], name: str = "periodic-task"):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def start_new(cls, interval: float, callback: Callable[[], None]) -> "PeriodicTask":
        """Scheduler entry point used by TuningSession: create and start."""
        task = cls(interval, callback)
        task.start()
        return task

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def cancel(self):
        """Stop ticking. Idempotent; waits for an in-flight tick unless called from it."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.interval * 2 + 1.0)

    def _run(self):
        next_tick = time.monotonic() + self.interval
        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            try:
                self.callback()
            except Exception:
                logger.exception("%s tick failed", self.name)
            next_tick += self.interval
            # Skip ticks we already missed instead of bursting to catch up
            now = time.monotonic()
            if next_tick < now:
                next_tick = now + self.interval
