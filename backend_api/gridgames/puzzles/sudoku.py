from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Set

from .grid import Grid, Position, copy_grid, fill_grid, in_bounds, make_grid, neighbors, positions, shuffled

logger = logging.getLogger(__name__)

SIZE = 9
BOX = 3
DIGITS = tuple(range(1, SIZE + 1))

# Cells left visible in a standard puzzle.
REVEALED_CELLS = {"easy": 38, "medium": 30, "hard": 24}
# Cells left visible once a killer board has been caged.
KILLER_HINTS = {"easy": 12, "medium": 6, "hard": 0}
# Inclusive (min, max) cage sizes.
CAGE_SIZES = {"easy": (2, 3), "medium": (2, 4), "hard": (2, 5)}
MAX_MISTAKES = {"normal": 10, "killer": 20}


# PUBLIC_INTERFACE
@dataclass
class Cell:
    """A single Sudoku square as the player sees it."""

    value: int = 0
    fixed: bool = False
    is_error: bool = False
    cage_index: int = -1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "fixed": self.fixed,
            "is_error": self.is_error,
            "cage_index": self.cage_index,
        }


# PUBLIC_INTERFACE
@dataclass
class Cage:
    """A connected killer region and the sum of its solution digits."""

    cells: List[Position] = field(default_factory=list)
    sum: int = 0
    index: int = -1

    def to_dict(self) -> Dict[str, Any]:
        return {"cells": [list(rc) for rc in self.cells], "sum": self.sum, "index": self.index}


# PUBLIC_INTERFACE
def validate_placement(board: Sequence[Sequence[int]], row: int, col: int, num: int) -> bool:
    """Return False if num already appears in the row, column or 3x3 box."""
    if num in board[row]:
        return False
    for r in range(SIZE):
        if board[r][col] == num:
            return False
    box_row = (row // BOX) * BOX
    box_col = (col // BOX) * BOX
    for r in range(box_row, box_row + BOX):
        for c in range(box_col, box_col + BOX):
            if board[r][c] == num:
                return False
    return True


# PUBLIC_INTERFACE
def generate_solution(rng=None) -> Grid:
    """Build a complete, valid 9x9 grid by randomized backtracking."""
    return fill_grid(SIZE, DIGITS, validate_placement, rng)


def related_positions(row: int, col: int) -> Set[Position]:
    """Every other cell sharing a row, column or box with (row, col)."""
    out = {(row, c) for c in range(SIZE)} | {(r, col) for r in range(SIZE)}
    box_row = (row // BOX) * BOX
    box_col = (col // BOX) * BOX
    out |= {(r, c) for r in range(box_row, box_row + BOX) for c in range(box_col, box_col + BOX)}
    out.discard((row, col))
    return out


# PUBLIC_INTERFACE
def grow_cage(
    start_row: int,
    start_col: int,
    visited: List[List[bool]],
    min_size: int,
    max_size: int,
    rng=None,
) -> Cage:
    """Grow one cage outward from a start cell.

    The frontier is sampled uniformly at random rather than in queue or stack
    order, which gives irregular shapes. Growth stops at a target size drawn
    from [min_size, max_size], or earlier when the frontier runs dry; such
    boundary-limited cages are kept as they are. visited is updated in place.
    """
    rng = rng or random
    size = len(visited)
    cage = Cage()
    target = rng.randint(min_size, max_size)
    frontier: List[Position] = [(start_row, start_col)]

    while len(cage.cells) < target and frontier:
        row, col = frontier.pop(rng.randrange(len(frontier)))
        if visited[row][col]:
            continue
        visited[row][col] = True
        cage.cells.append((row, col))
        for r, c in neighbors(row, col, size):
            if not visited[r][c]:
                frontier.append((r, c))

    return cage


def build_cages(solution: Sequence[Sequence[int]], difficulty: str, rng=None):
    """Tile the board with cages; returns (cages, cell_to_cage)."""
    min_size, max_size = CAGE_SIZES[difficulty]
    visited = [[False] * SIZE for _ in range(SIZE)]
    cell_to_cage = make_grid(SIZE, -1)
    cages: List[Cage] = []

    for row, col in positions(SIZE):
        if visited[row][col]:
            continue
        cage = grow_cage(row, col, visited, min_size, max_size, rng)
        cage.index = len(cages)
        cage.sum = sum(solution[r][c] for r, c in cage.cells)
        for r, c in cage.cells:
            cell_to_cage[r][c] = cage.index
        cages.append(cage)

    return cages, cell_to_cage


# PUBLIC_INTERFACE
class NumberGridEngine:
    """Sudoku and killer Sudoku rounds.

    The engine keeps the hidden solution, the player's board, pencil notes and
    (in killer mode) the cage layout. Player input is checked against the
    solution rather than re-searched; wrong digits are counted as mistakes and
    the round is lost when the count reaches max_mistakes.
    """

    size = SIZE

    def __init__(self, difficulty: str = "medium", killer: bool = False, rng=None, solution: Optional[Grid] = None):
        if difficulty not in REVEALED_CELLS:
            raise ValueError(f"Unknown difficulty: {difficulty!r}")
        self.difficulty = difficulty
        self.killer = killer
        self._rng = rng or random
        self.solution: Grid = copy_grid(solution) if solution is not None else generate_solution(self._rng)
        self.board: List[List[Cell]] = [[Cell(value=v) for v in row] for row in self.solution]
        self.notes: List[List[Set[int]]] = [[set() for _ in range(SIZE)] for _ in range(SIZE)]
        self.cages: List[Cage] = []
        self.cell_to_cage: Grid = make_grid(SIZE, -1)
        self.mistakes = 0
        self.max_mistakes = MAX_MISTAKES[self.mode]
        self.game_over = False
        self.won = False
        self.carve()

    @property
    def mode(self) -> str:
        return "killer" if self.killer else "normal"

    def carve(self) -> None:
        """Turn the full solution on the board into a playable puzzle."""
        cells = shuffled(positions(SIZE), self._rng)
        if self.killer:
            self.cages, self.cell_to_cage = build_cages(self.solution, self.difficulty, self._rng)
            for row, col in positions(SIZE):
                self.board[row][col] = Cell(cage_index=self.cell_to_cage[row][col])
            for row, col in cells[:KILLER_HINTS[self.difficulty]]:
                self.board[row][col].value = self.solution[row][col]
                self.board[row][col].fixed = True
        else:
            for row, col in cells[REVEALED_CELLS[self.difficulty]:]:
                self.board[row][col].value = 0
            for row, col in positions(SIZE):
                cell = self.board[row][col]
                cell.fixed = cell.value != 0
        logger.debug(
            "Carved %s puzzle (%s): %d givens, %d cages",
            self.mode, self.difficulty, sum(c.fixed for r in self.board for c in r), len(self.cages),
        )

    def contains(self, row: int, col: int) -> bool:
        return in_bounds(row, col, SIZE)

    # PUBLIC_INTERFACE
    def apply_move(self, row: int, col: int, digit: int, notes: bool = False) -> bool:
        """Write digit (0 clears) at (row, col), or toggle it as a note.

        Returns True when the board, notes or mistake count changed.
        """
        if self.game_over or not self.contains(row, col) or not 0 <= digit <= 9:
            return False
        cell = self.board[row][col]
        if cell.fixed:
            return False

        if notes and digit != 0:
            self.notes[row][col] ^= {digit}
            cell.value = 0
            cell.is_error = False
            return True

        if digit == 0:
            changed = cell.value != 0 or cell.is_error or bool(self.notes[row][col])
            cell.value = 0
            cell.is_error = False
            self.notes[row][col].clear()
            return changed

        if cell.value == digit:
            return False

        self.notes[row][col].clear()
        cell.value = digit
        if digit != self.solution[row][col]:
            cell.is_error = True
            self.mistakes += 1
            logger.debug("Mistake %d/%d at (%d, %d)", self.mistakes, self.max_mistakes, row, col)
            if self.mistakes >= self.max_mistakes:
                self.game_over = True
        else:
            cell.is_error = False
            self.remove_note_from_related_cells(row, col, digit)
            self._settle_win()
        return True

    def remove_note_from_related_cells(self, row: int, col: int, digit: int) -> None:
        for r, c in related_positions(row, col):
            self.notes[r][c].discard(digit)

    def check_win(self) -> bool:
        return all(
            self.board[r][c].value == self.solution[r][c] for r, c in positions(SIZE)
        )

    def _settle_win(self) -> None:
        if self.check_win():
            self.won = True
            self.game_over = True

    # PUBLIC_INTERFACE
    def reveal_hint(self) -> Optional[Position]:
        """Fill one random empty cell from the solution and lock it.

        Returns the revealed position, or None when nothing is left to reveal.
        """
        if self.game_over:
            return None
        empty = [(r, c) for r, c in positions(SIZE) if self.board[r][c].value == 0]
        if not empty:
            return None
        row, col = self._rng.choice(empty)
        cell = self.board[row][col]
        cell.value = self.solution[row][col]
        cell.fixed = True
        cell.is_error = False
        self.notes[row][col].clear()
        self._settle_win()
        return row, col

    def correct_counts(self) -> List[int]:
        """counts[d] is how many copies of digit d sit in their solved position."""
        counts = [0] * (SIZE + 1)
        for r, c in positions(SIZE):
            value = self.board[r][c].value
            if value and value == self.solution[r][c]:
                counts[value] += 1
        return counts

    def cage_borders(self, row: int, col: int) -> Dict[str, bool]:
        """Which sides of (row, col) face a different cage."""
        index = self.cell_to_cage[row][col]
        if index == -1:
            return {"top": False, "right": False, "bottom": False, "left": False}
        return {
            "top": row == 0 or self.cell_to_cage[row - 1][col] != index,
            "right": col == SIZE - 1 or self.cell_to_cage[row][col + 1] != index,
            "bottom": row == SIZE - 1 or self.cell_to_cage[row + 1][col] != index,
            "left": col == 0 or self.cell_to_cage[row][col - 1] != index,
        }

    def is_cage_anchor(self, row: int, col: int) -> bool:
        """True for the top-left cell of its cage, where the sum is drawn."""
        index = self.cell_to_cage[row][col]
        if index == -1:
            return False
        return min(self.cages[index].cells) == (row, col)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "cells": [[cell.to_dict() for cell in row] for row in self.board],
            "notes": [[sorted(n) for n in row] for row in self.notes],
            "cages": [cage.to_dict() for cage in self.cages],
            "mistakes": self.mistakes,
            "max_mistakes": self.max_mistakes,
            "correct_counts": self.correct_counts(),
        }
