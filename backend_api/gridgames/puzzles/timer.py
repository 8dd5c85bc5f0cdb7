from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]


def thread_scheduler(interval: float, callback: Callable[[], None]) -> threading.Timer:
    """Run callback once after interval seconds on a daemon thread."""
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    timer.start()
    return timer


def format_elapsed(seconds: int) -> str:
    """MM:SS, minutes growing past 99 if need be."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes:02d}:{secs:02d}"


# PUBLIC_INTERFACE
class ElapsedTimer:
    """Counts whole seconds for the current round.

    Each start() opens a new generation and every scheduled tick carries the
    generation it was armed for; ticks from an older generation, or arriving
    after stop(), are dropped. scheduler(interval, callback) must return an
    object with cancel(); the default arms a threading.Timer.
    """

    def __init__(self, interval: float = 1.0, scheduler: Optional[Scheduler] = None):
        self.interval = interval
        self.seconds = 0
        self._scheduler = scheduler or thread_scheduler
        self._handle: Any = None
        self._generation = 0
        self._running = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        with self._lock:
            self._cancel_locked()
            self.seconds = 0
            self._generation += 1
            self._running = True
            self._arm_locked(self._generation)

    def stop(self) -> None:
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._running = False

    def _cancel_locked(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm_locked(self, generation: int) -> None:
        self._handle = self._scheduler(self.interval, lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        with self._lock:
            if not self._running or generation != self._generation:
                logger.debug("Dropped stale timer tick (generation %d)", generation)
                return
            self.seconds += 1
            self._arm_locked(generation)
