from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .grid import GenerationError, Grid, Position, column, copy_grid, in_bounds, make_grid, positions

logger = logging.getLogger(__name__)

EMPTY = 0
FILLED = 1
MARKED = 2

SIZES = {"easy": 5, "medium": 10, "hard": 15}
FILL_PROBABILITY = 0.5
MIN_FILL_RATIO = 0.2
MAX_FILL_RATIO = 0.8
MAX_ATTEMPTS = 10_000


# PUBLIC_INTERFACE
def compute_hints(line: Sequence[int]) -> List[int]:
    """Lengths of the filled runs in line, in order; [0] when nothing is filled.

    Only FILLED counts; empty and marked cells both break a run.
    """
    hints: List[int] = []
    run = 0
    for value in line:
        if value == FILLED:
            run += 1
        elif run:
            hints.append(run)
            run = 0
    if run:
        hints.append(run)
    return hints or [0]


def grid_hints(grid: Sequence[Sequence[int]]) -> Tuple[List[List[int]], List[List[int]]]:
    """(row hints, column hints) for a square grid."""
    rows = [compute_hints(row) for row in grid]
    cols = [compute_hints(column(grid, c)) for c in range(len(grid))]
    return rows, cols


# PUBLIC_INTERFACE
def generate_solution(size: int, rng=None) -> Grid:
    """Draw random pictures until one has between 20% and 80% of cells filled.

    Raises:
        GenerationError: after MAX_ATTEMPTS draws all fell outside the bounds.
    """
    rng = rng or random
    total = size * size
    low, high = int(total * MIN_FILL_RATIO), int(total * MAX_FILL_RATIO)
    for attempt in range(1, MAX_ATTEMPTS + 1):
        grid = [[FILLED if rng.random() < FILL_PROBABILITY else EMPTY for _ in range(size)] for _ in range(size)]
        filled = sum(map(sum, grid))
        if low <= filled <= high:
            if attempt > 1:
                logger.debug("Nonogram %dx%d accepted on draw %d", size, size, attempt)
            return grid
    raise GenerationError(f"No {size}x{size} picture within fill bounds after {MAX_ATTEMPTS} draws.")


# PUBLIC_INTERFACE
class PictureLogicEngine:
    """Nonogram: reproduce a hidden picture from its row and column run hints.

    The win check compares hints, not cells, so any picture with the same runs
    is accepted.
    """

    def __init__(self, size: int = 5, rng=None, solution: Optional[Grid] = None):
        self._rng = rng or random
        self.solution: Grid = copy_grid(solution) if solution is not None else generate_solution(size, self._rng)
        self.size = len(self.solution)
        self.grid: Grid = make_grid(self.size)
        self.row_hints, self.col_hints = grid_hints(self.solution)
        self.game_over = False
        self.won = False

    @classmethod
    def from_difficulty(cls, difficulty: str, rng=None) -> "PictureLogicEngine":
        if difficulty not in SIZES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        return cls(SIZES[difficulty], rng=rng)

    def contains(self, row: int, col: int) -> bool:
        return in_bounds(row, col, self.size)

    def toggle_cell(self, row: int, col: int) -> bool:
        """Cycle empty -> filled -> marked -> empty."""
        if self.game_over or not self.contains(row, col):
            return False
        self.grid[row][col] = (self.grid[row][col] + 1) % 3
        self._settle_win()
        return True

    def check_win(self) -> bool:
        rows, cols = grid_hints(self.grid)
        return rows == self.row_hints and cols == self.col_hints

    def _settle_win(self) -> None:
        if self.check_win():
            self.won = True
            self.game_over = True

    def reveal_hint(self) -> Optional[Position]:
        """Correct one cell whose filled state disagrees with the picture."""
        if self.game_over:
            return None
        wrong = [
            (r, c) for r, c in positions(self.size)
            if (self.grid[r][c] == FILLED) != (self.solution[r][c] == FILLED)
        ]
        if not wrong:
            return None
        row, col = self._rng.choice(wrong)
        self.grid[row][col] = FILLED if self.solution[row][col] == FILLED else MARKED
        self._settle_win()
        return row, col

    def snapshot(self) -> Dict[str, Any]:
        return {
            "grid": copy_grid(self.grid),
            "row_hints": [list(h) for h in self.row_hints],
            "col_hints": [list(h) for h in self.col_hints],
        }
