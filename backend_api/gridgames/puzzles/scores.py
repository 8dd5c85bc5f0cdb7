from __future__ import annotations

from typing import Dict, Protocol, Tuple, runtime_checkable

# Namespace under which 2048 best scores are kept, one value per board size.
SLIDING_NAMESPACE = "2048"


@runtime_checkable
class BestScoreStore(Protocol):
    """Minimal persistence interface for best scores.

    Kept as a protocol so the engines never import Django models; the app
    provides a model-backed implementation.
    """

    def get(self, namespace: str, size: int) -> int: ...

    def put(self, namespace: str, size: int, score: int) -> None: ...


class InMemoryBestScores:
    """Dict-backed store for tests and one-off command runs."""

    def __init__(self) -> None:
        self._scores: Dict[Tuple[str, int], int] = {}

    def get(self, namespace: str, size: int) -> int:
        return self._scores.get((namespace, size), 0)

    def put(self, namespace: str, size: int, score: int) -> None:
        self._scores[(namespace, size)] = score
