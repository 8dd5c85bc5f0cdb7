from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Tuple, runtime_checkable


# Light-weight protocol so any engine with a solution can serve hints.
@runtime_checkable
class _HintCapable(Protocol):
    """Minimal interface required from an engine for hint computations."""

    game_over: bool

    def reveal_hint(self) -> Optional[Tuple[int, int]]: ...


def supports_hints(engine: Any) -> bool:
    return isinstance(engine, _HintCapable)


def _revealed_value(engine: _HintCapable, row: int, col: int) -> int:
    """Read back what the engine now shows at (row, col)."""
    board = getattr(engine, "board", None)
    if board is not None:
        return board[row][col].value
    return engine.grid[row][col]


# PUBLIC_INTERFACE
def reveal_cell(engine: Any) -> Optional[Dict[str, Any]]:
    """Reveal one cell from the engine's solution.

    Parameters:
        engine: a puzzle engine exposing game_over and reveal_hint(). Engines
                without a hidden solution (2048) are accepted and ignored.

    Returns:
        {
            "type": "reveal_cell",
            "data": { "row": int, "col": int, "value": int }
        }
        or None when the engine has no hints, the round is over, or no cell is
        left to reveal. A None result leaves the engine untouched.
    """
    if not supports_hints(engine) or engine.game_over:
        return None
    revealed = engine.reveal_hint()
    if revealed is None:
        return None
    row, col = revealed
    return {
        "type": "reveal_cell",
        "data": {"row": row, "col": col, "value": _revealed_value(engine, row, col)},
    }
