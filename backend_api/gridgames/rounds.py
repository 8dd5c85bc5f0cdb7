from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple

from django.conf import settings

from .best_scores import ModelBestScores
from .puzzles import ElapsedTimer, SessionCoordinator

logger = logging.getLogger(__name__)

DEFAULTS: Dict[str, Any] = {
    "MAX_ACTIVE_ROUNDS": 256,
    "TIMER_INTERVAL_SECS": 1.0,
    "DEFAULT_MODE": "normal",
    "DEFAULT_DIFFICULTY": "medium",
}


def gridgames_setting(name: str) -> Any:
    """Read a key from settings.GRIDGAMES, falling back to DEFAULTS."""
    return getattr(settings, "GRIDGAMES", {}).get(name, DEFAULTS[name])


# PUBLIC_INTERFACE
class RoundNotFound(KeyError):
    """Raised by RoundStore.checkout() for an unknown or evicted round id."""


# PUBLIC_INTERFACE
class RoundStore:
    """In-process table of live rounds keyed by an opaque round id.

    Rounds are not persisted. The store holds at most `capacity` rounds and
    evicts the least recently used one, stopping its timer. All access to a
    coordinator goes through checkout(), which holds that round's own lock so
    its engine state is only ever mutated by one request at a time. The store
    lock covers the table itself and is never held while a round is in use.
    """

    def __init__(self, capacity: int, timer_interval: float = 1.0, best_scores=None):
        self.capacity = capacity
        self.timer_interval = timer_interval
        self._best_scores = best_scores if best_scores is not None else ModelBestScores()
        self._rounds: "OrderedDict[str, Tuple[SessionCoordinator, threading.RLock]]" = OrderedDict()
        self._lock = threading.RLock()

    def create(self, mode: str, difficulty: str) -> Tuple[str, SessionCoordinator]:
        """Start a new round and return (round_id, coordinator).

        Raises:
            KeyError: unknown mode.
            ValueError: unknown difficulty.
        """
        coordinator = SessionCoordinator(
            mode=mode,
            difficulty=difficulty,
            best_scores=self._best_scores,
            timer=ElapsedTimer(interval=self.timer_interval),
        )
        round_id = uuid.uuid4().hex
        with self._lock:
            self._rounds[round_id] = (coordinator, threading.RLock())
            while len(self._rounds) > self.capacity:
                evicted_id, (evicted, _) = self._rounds.popitem(last=False)
                evicted.stop()
                logger.info("Evicted idle round %s", evicted_id)
        return round_id, coordinator

    def exists(self, round_id: str) -> bool:
        with self._lock:
            return round_id in self._rounds

    @contextmanager
    def checkout(self, round_id: str) -> Iterator[SessionCoordinator]:
        """Hold the round's lock while the caller works with it.

        Raises:
            RoundNotFound: unknown round id.
        """
        with self._lock:
            if round_id not in self._rounds:
                raise RoundNotFound(round_id)
            coordinator, round_lock = self._rounds[round_id]
            self._rounds.move_to_end(round_id)
        with round_lock:
            yield coordinator

    def discard(self, round_id: str) -> bool:
        with self._lock:
            entry = self._rounds.pop(round_id, None)
        if entry is None:
            return False
        entry[0].stop()
        return True

    def clear(self) -> None:
        with self._lock:
            for coordinator, _ in self._rounds.values():
                coordinator.stop()
            self._rounds.clear()

    def __len__(self) -> int:
        return len(self._rounds)


_store: Optional[RoundStore] = None
_store_lock = threading.Lock()


# PUBLIC_INTERFACE
def get_store() -> RoundStore:
    """Return the process-wide RoundStore, built lazily from settings."""
    global _store
    with _store_lock:
        if _store is None:
            _store = RoundStore(
                capacity=gridgames_setting("MAX_ACTIVE_ROUNDS"),
                timer_interval=gridgames_setting("TIMER_INTERVAL_SECS"),
            )
        return _store
