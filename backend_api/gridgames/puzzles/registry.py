from __future__ import annotations

from functools import partial
from typing import Callable, Dict, List

from .binary import BinaryPlacementEngine
from .nonogram import PictureLogicEngine
from .sliding import SIZES as SLIDING_SIZES
from .sliding import SlidingMergeEngine
from .sudoku import NumberGridEngine

MODE_NORMAL = "normal"
MODE_KILLER = "killer"
MODE_2048 = "2048"
MODE_OHH1 = "ohh1"
MODE_NONOGRAM = "nonogram"

GAME_MODES = (MODE_NORMAL, MODE_KILLER, MODE_2048, MODE_OHH1, MODE_NONOGRAM)
SUDOKU_MODES = (MODE_NORMAL, MODE_KILLER)
DIFFICULTIES = ("easy", "medium", "hard")

DIFFICULTY_LABELS = {"easy": "Easy", "medium": "Medium", "hard": "Hard"}

# builder(difficulty, rng=None) -> engine
EngineBuilder = Callable[..., object]


# PUBLIC_INTERFACE
class EngineRegistry:
    """Registry mapping game mode identifiers to engine builders."""

    _registry: Dict[str, EngineBuilder] = {
        MODE_NORMAL: partial(NumberGridEngine, killer=False),
        MODE_KILLER: partial(NumberGridEngine, killer=True),
        MODE_2048: SlidingMergeEngine.from_difficulty,
        MODE_OHH1: BinaryPlacementEngine.from_difficulty,
        MODE_NONOGRAM: PictureLogicEngine.from_difficulty,
    }

    @classmethod
    def get(cls, mode: str) -> EngineBuilder:
        """Return the builder for a given game mode, or raise KeyError."""
        key = (mode or "").strip().lower()
        if key not in cls._registry:
            raise KeyError(f"Unknown game mode: {mode!r}")
        return cls._registry[key]

    @classmethod
    def register(cls, mode: str, builder: EngineBuilder) -> None:
        """Register or override an engine builder for a given game mode."""
        key = (mode or "").strip().lower()
        if not key:
            raise ValueError("mode must be a non-empty string")
        cls._registry[key] = builder

    @classmethod
    def modes(cls) -> List[str]:
        return list(cls._registry)


# PUBLIC_INTERFACE
def get_engine(mode: str) -> EngineBuilder:
    """Convenience function returning the builder for the given mode.

    Example:
        engine = get_engine("ohh1")("medium")
        engine.toggle_cell(0, 0)
    """
    return EngineRegistry.get(mode)


def difficulty_labels(mode: str) -> Dict[str, str]:
    """Display labels per difficulty; 2048 is labelled by board size."""
    if mode == MODE_2048:
        return {d: f"{SLIDING_SIZES[d]}×{SLIDING_SIZES[d]}" for d in DIFFICULTIES}
    return dict(DIFFICULTY_LABELS)
