"""
Grid games package initializer.

Re-exports puzzle engines, the registry and the session coordinator so callers
can import from gridgames directly, e.g.:

    from gridgames import SessionCoordinator, get_engine
"""

# PUBLIC_INTERFACE
from .puzzles import (
    BinaryPlacementEngine,
    EngineRegistry,
    NumberGridEngine,
    PictureLogicEngine,
    SessionCoordinator,
    SlidingMergeEngine,
    get_engine,
    reveal_cell,
)

__all__ = [
    "BinaryPlacementEngine",
    "NumberGridEngine",
    "PictureLogicEngine",
    "SlidingMergeEngine",
    "SessionCoordinator",
    "EngineRegistry",
    "get_engine",
    "reveal_cell",
]
