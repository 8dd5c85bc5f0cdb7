"""
Puzzle engines, registry, hint and session helpers.

Exports:
- EngineRegistry and get_engine for resolving engines by game mode
- NumberGridEngine, BinaryPlacementEngine, PictureLogicEngine and
  SlidingMergeEngine engine classes
- SessionCoordinator, which owns one active engine and routes input to it
- reveal_cell hint helper and the BestScoreStore persistence protocol

These modules are framework-agnostic and can be reused by views or services
without importing request objects or Django models.
"""

from .binary import BinaryPlacementEngine
from .coordinator import SessionCoordinator
from .grid import GenerationError
from .hints import reveal_cell
from .nonogram import PictureLogicEngine
from .registry import DIFFICULTIES, GAME_MODES, EngineRegistry, difficulty_labels, get_engine
from .scores import BestScoreStore, InMemoryBestScores
from .sliding import SlidingMergeEngine
from .sudoku import NumberGridEngine
from .timer import ElapsedTimer

__all__ = [
    "BinaryPlacementEngine",
    "PictureLogicEngine",
    "SlidingMergeEngine",
    "NumberGridEngine",
    "SessionCoordinator",
    "EngineRegistry",
    "get_engine",
    "difficulty_labels",
    "GAME_MODES",
    "DIFFICULTIES",
    "reveal_cell",
    "BestScoreStore",
    "InMemoryBestScores",
    "ElapsedTimer",
    "GenerationError",
]
