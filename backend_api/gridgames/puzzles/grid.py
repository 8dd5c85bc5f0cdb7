from __future__ import annotations

import logging
import random
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

Grid = List[List[int]]
Position = Tuple[int, int]

# right, down, left, up
NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

DEFAULT_STEP_LIMIT = 200_000
DEFAULT_RESTARTS = 25


# PUBLIC_INTERFACE
class GenerationError(RuntimeError):
    """Raised when a bounded puzzle search gives up without a complete grid."""


def make_grid(size: int, fill: int = 0) -> Grid:
    """Return a new size x size grid with every cell set to fill."""
    return [[fill] * size for _ in range(size)]


def copy_grid(grid: Sequence[Sequence[int]]) -> Grid:
    return [list(row) for row in grid]


def positions(size: int) -> List[Position]:
    """All (row, col) pairs of a size x size grid in row-major order."""
    return [(row, col) for row in range(size) for col in range(size)]


def column(grid: Sequence[Sequence[int]], col: int) -> List[int]:
    return [row[col] for row in grid]


def shuffled(items, rng=None) -> list:
    """Return a shuffled copy of items, leaving the input untouched."""
    out = list(items)
    (rng or random).shuffle(out)
    return out


def neighbors(row: int, col: int, size: int) -> Iterator[Position]:
    """Yield the in-bounds orthogonal neighbours of (row, col)."""
    for dr, dc in NEIGHBOR_OFFSETS:
        r, c = row + dr, col + dc
        if 0 <= r < size and 0 <= c < size:
            yield r, c


def in_bounds(row: int, col: int, size: int) -> bool:
    return 0 <= row < size and 0 <= col < size


FitsFn = Callable[[Grid, int, int, int], bool]


def _search(size: int, symbols: Sequence[int], fits: FitsFn, rng, step_limit: int) -> Optional[Grid]:
    """Depth-first fill in row-major order using an explicit frame stack.

    Frame i holds the untried candidates for cell i. The top frame's cell is
    reset to empty before each candidate is tried, so popping a frame is all a
    backtrack needs.
    """
    grid = make_grid(size)
    cells = positions(size)
    stack: List[List[int]] = [shuffled(symbols, rng)]
    steps = 0

    while stack:
        row, col = cells[len(stack) - 1]
        candidates = stack[-1]
        grid[row][col] = 0
        while candidates:
            value = candidates.pop()
            if fits(grid, row, col, value):
                grid[row][col] = value
                break
        else:
            stack.pop()
            continue

        if len(stack) == len(cells):
            return grid
        steps += 1
        if steps > step_limit:
            return None
        stack.append(shuffled(symbols, rng))

    return None


# PUBLIC_INTERFACE
def fill_grid(
    size: int,
    symbols: Sequence[int],
    fits: FitsFn,
    rng=None,
    step_limit: int = DEFAULT_STEP_LIMIT,
    restarts: int = DEFAULT_RESTARTS,
) -> Grid:
    """Fill a size x size grid by randomized backtracking.

    Parameters:
        size: edge length of the grid.
        symbols: the values a cell may take; tried in a fresh shuffled order
                 at every cell.
        fits: predicate fits(grid, row, col, value) called with the target cell
              still empty; must return True when value may be placed there.
        rng: a random.Random-compatible source (defaults to the random module).
        step_limit: placements allowed per attempt before reshuffling.
        restarts: attempts allowed before giving up.

    Returns:
        A fully filled grid.

    Raises:
        GenerationError: if every attempt ran out of steps or candidates.
    """
    for attempt in range(1, restarts + 1):
        grid = _search(size, symbols, fits, rng, step_limit)
        if grid is not None:
            return grid
        logger.warning(
            "Backtracking fill of %dx%d grid gave up after %d steps (attempt %d/%d); reshuffling",
            size, size, step_limit, attempt, restarts,
        )
    raise GenerationError(f"Could not fill a {size}x{size} grid in {restarts} attempts.")
