from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .grid import Grid, copy_grid, in_bounds, make_grid, positions

logger = logging.getLogger(__name__)

SIZES = {"easy": 4, "medium": 5, "hard": 6}
DIRECTIONS = ("up", "down", "left", "right")
WINNING_TILE = 2048
FOUR_PROBABILITY = 0.1


# PUBLIC_INTERFACE
def merge_line(line: Sequence[int]) -> Tuple[List[int], int, bool]:
    """Slide one line toward index 0 and merge equal neighbours.

    Each tile merges at most once, so [2, 2, 2, 2] becomes [4, 4, 0, 0].

    Returns:
        (new line padded to the same length, points scored, whether a
        WINNING_TILE was made)
    """
    tiles = [v for v in line if v]
    merged: List[int] = []
    gained = 0
    reached = False
    i = 0
    while i < len(tiles):
        if i + 1 < len(tiles) and tiles[i] == tiles[i + 1]:
            value = tiles[i] * 2
            merged.append(value)
            gained += value
            reached = reached or value == WINNING_TILE
            i += 2
        else:
            merged.append(tiles[i])
            i += 1
    return merged + [0] * (len(line) - len(merged)), gained, reached


# PUBLIC_INTERFACE
class SlidingMergeEngine:
    """2048 on a square board.

    best_score is seeded by the caller and raised here whenever the running
    score passes it; writing it to storage is the caller's job.
    """

    def __init__(self, size: int = 4, rng=None, best_score: int = 0, grid: Optional[Grid] = None):
        self._rng = rng or random
        self.size = size if grid is None else len(grid)
        self.score = 0
        self.best_score = best_score
        self.won = False
        self.game_over = False
        if grid is None:
            self.grid: Grid = make_grid(self.size)
            self.spawn_tile()
            self.spawn_tile()
        else:
            self.grid = copy_grid(grid)

    @classmethod
    def from_difficulty(cls, difficulty: str, rng=None) -> "SlidingMergeEngine":
        if difficulty not in SIZES:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        return cls(SIZES[difficulty], rng=rng)

    def contains(self, row: int, col: int) -> bool:
        return in_bounds(row, col, self.size)

    def spawn_tile(self) -> bool:
        """Drop a 2 (or, one time in ten, a 4) on a random empty cell."""
        empty = [(r, c) for r, c in positions(self.size) if self.grid[r][c] == 0]
        if not empty:
            return False
        row, col = self._rng.choice(empty)
        self.grid[row][col] = 2 if self._rng.random() >= FOUR_PROBABILITY else 4
        return True

    def _read_line(self, direction: str, index: int) -> List[int]:
        if direction in ("left", "right"):
            line = list(self.grid[index])
        else:
            line = [self.grid[r][index] for r in range(self.size)]
        if direction in ("right", "down"):
            line.reverse()
        return line

    def _write_line(self, direction: str, index: int, line: List[int]) -> None:
        if direction in ("right", "down"):
            line = line[::-1]
        if direction in ("left", "right"):
            self.grid[index] = line
        else:
            for r in range(self.size):
                self.grid[r][index] = line[r]

    # PUBLIC_INTERFACE
    def move(self, direction: str) -> bool:
        """Slide every line toward direction.

        Returns True only if the board changed; in that case a tile is spawned
        and best_score is updated. Game over is re-evaluated either way.
        """
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction!r}")
        if self.game_over:
            return False

        before = copy_grid(self.grid)
        for index in range(self.size):
            merged, gained, reached = merge_line(self._read_line(direction, index))
            self._write_line(direction, index, merged)
            self.score += gained
            if reached:
                self.won = True

        moved = self.grid != before
        if moved:
            self.spawn_tile()
            if self.score > self.best_score:
                self.best_score = self.score
        self.game_over = self.game_over_check()
        return moved

    def can_move(self) -> bool:
        for r, c in positions(self.size):
            value = self.grid[r][c]
            if value == 0:
                return True
            if c + 1 < self.size and value == self.grid[r][c + 1]:
                return True
            if r + 1 < self.size and value == self.grid[r + 1][c]:
                return True
        return False

    def game_over_check(self) -> bool:
        return not self.can_move()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "grid": copy_grid(self.grid),
            "score": self.score,
            "best_score": self.best_score,
            "won": self.won,
        }
