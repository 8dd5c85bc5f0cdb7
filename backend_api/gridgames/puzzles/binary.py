from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from .grid import Grid, Position, column, copy_grid, fill_grid, in_bounds, make_grid, positions, shuffled

logger = logging.getLogger(__name__)

EMPTY = 0
COLOR_A = 1
COLOR_B = 2
COLORS = (COLOR_A, COLOR_B)

SIZES = {"easy": 6, "medium": 8, "hard": 10}
REVEAL_RATIO = 0.35


def _completes_run(grid: Sequence[Sequence[int]], row: int, col: int, color: int) -> bool:
    """True if color at (row, col) would sit inside three equal cells in a line."""
    size = len(grid)
    for dr, dc in ((0, 1), (1, 0)):
        for start in (-2, -1, 0):
            others = [(row + dr * k, col + dc * k) for k in range(start, start + 3) if k != 0]
            if all(in_bounds(r, c, size) and grid[r][c] == color for r, c in others):
                return True
    return False


# PUBLIC_INTERFACE
def color_fits(grid: Sequence[Sequence[int]], row: int, col: int, color: int) -> bool:
    """Whether color may go at the empty cell (row, col).

    Rejects three-in-a-row in either direction and any row or column that
    would hold more than half its cells in one color.
    """
    if _completes_run(grid, row, col, color):
        return False
    half = len(grid) // 2
    if sum(1 for c, v in enumerate(grid[row]) if v == color and c != col) >= half:
        return False
    if sum(1 for r, v in enumerate(column(grid, col)) if v == color and r != row) >= half:
        return False
    return True


def has_triple(line: Sequence[int]) -> bool:
    return any(
        line[i] != EMPTY and line[i] == line[i + 1] == line[i + 2] for i in range(len(line) - 2)
    )


def is_balanced(line: Sequence[int]) -> bool:
    half = len(line) // 2
    return line.count(COLOR_A) == half and line.count(COLOR_B) == half


# PUBLIC_INTERFACE
def generate_solution(size: int, rng=None) -> Grid:
    """Fill an even-sized grid with two colors obeying the Oh h1 rules."""
    if size <= 0 or size % 2:
        raise ValueError(f"Oh h1 grids need an even size, got {size}")
    return fill_grid(size, COLORS, color_fits, rng)


# PUBLIC_INTERFACE
class BinaryPlacementEngine:
    """Oh h1: fill the grid with two colors, no triples, balanced lines."""

    def __init__(self, size: int = 6, rng=None, solution: Optional[Grid] = None):
        self._rng = rng or random
        self.solution: Grid = copy_grid(solution) if solution is not None else generate_solution(size, self._rng)
        self.size = len(self.solution)
        self.grid: Grid = make_grid(self.size)
        self.fixed: List[List[bool]] = [[False] * self.size for _ in range(self.size)]
        self.game_over = False
        self.won = False
        self.carve()

    @classmethod
    def from_difficulty(cls, difficulty: str, rng=None) -> "BinaryPlacementEngine":
        if difficulty not in SIZES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        return cls(SIZES[difficulty], rng=rng)

    def carve(self) -> None:
        """Reveal a random 35% of the solution as fixed cells."""
        reveal = int(self.size * self.size * REVEAL_RATIO)
        self.grid = make_grid(self.size)
        self.fixed = [[False] * self.size for _ in range(self.size)]
        for row, col in shuffled(positions(self.size), self._rng)[:reveal]:
            self.grid[row][col] = self.solution[row][col]
            self.fixed[row][col] = True

    def contains(self, row: int, col: int) -> bool:
        return in_bounds(row, col, self.size)

    def toggle_cell(self, row: int, col: int) -> bool:
        """Cycle empty -> color A -> color B -> empty."""
        if self.game_over or not self.contains(row, col) or self.fixed[row][col]:
            return False
        self.grid[row][col] = (self.grid[row][col] + 1) % 3
        self._settle_win()
        return True

    def check_win(self) -> bool:
        if any(v == EMPTY for row in self.grid for v in row):
            return False
        lines = [list(row) for row in self.grid] + [column(self.grid, c) for c in range(self.size)]
        return all(not has_triple(line) and is_balanced(line) for line in lines)

    def _settle_win(self) -> None:
        if self.check_win():
            self.won = True
            self.game_over = True

    def reveal_hint(self) -> Optional[Position]:
        """Lock one cell that does not yet match the solution."""
        if self.game_over:
            return None
        wrong = [
            (r, c) for r, c in positions(self.size)
            if not self.fixed[r][c] and self.grid[r][c] != self.solution[r][c]
        ]
        if not wrong:
            return None
        row, col = self._rng.choice(wrong)
        self.grid[row][col] = self.solution[row][col]
        self.fixed[row][col] = True
        self._settle_win()
        return row, col

    def snapshot(self) -> Dict[str, Any]:
        return {"grid": copy_grid(self.grid), "fixed": [list(row) for row in self.fixed]}
