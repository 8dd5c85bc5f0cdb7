import random

from django.core.management.base import BaseCommand, CommandError

from gridgames.puzzles import DIFFICULTIES, GAME_MODES, GenerationError, get_engine
from gridgames.puzzles.registry import MODE_2048, MODE_NONOGRAM, SUDOKU_MODES

NONOGRAM_SYMBOLS = {0: ".", 1: "#", 2: "x"}
OHH1_SYMBOLS = {0: ".", 1: "R", 2: "B"}


def _sudoku_lines(engine, show_solution):
    lines = []
    for r in range(engine.size):
        if r and r % 3 == 0:
            lines.append("------+-------+------")
        row = engine.solution[r] if show_solution else [cell.value for cell in engine.board[r]]
        chunks = [" ".join(str(v) if v else "." for v in row[c:c + 3]) for c in (0, 3, 6)]
        lines.append(" | ".join(chunks))
    if engine.cages:
        lines.append("")
        for cage in engine.cages:
            cells = " ".join(f"r{r + 1}c{c + 1}" for r, c in cage.cells)
            lines.append(f"cage {cage.index:>2}: sum {cage.sum:>2}  {cells}")
    return lines


def _nonogram_lines(engine, show_solution):
    grid = engine.solution if show_solution else engine.grid
    lines = ["cols: " + " | ".join(" ".join(map(str, h)) for h in engine.col_hints)]
    for hints, row in zip(engine.row_hints, grid):
        lines.append("".join(NONOGRAM_SYMBOLS[v] for v in row) + "  " + " ".join(map(str, hints)))
    return lines


def _grid_lines(grid, symbols=None):
    width = max(len(str(v)) for row in grid for v in row)
    return [" ".join((symbols[v] if symbols else str(v or ".")).rjust(width) for v in row) for row in grid]


class Command(BaseCommand):
    help = "Generate a puzzle for the given mode and print it as text."

    def add_arguments(self, parser):
        parser.add_argument("--mode", default="normal", choices=GAME_MODES)
        parser.add_argument("--difficulty", default="medium", choices=DIFFICULTIES)
        parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible puzzle.")
        parser.add_argument("--solution", action="store_true", help="Print the solution instead of the puzzle.")

    def handle(self, *args, **options):
        # PUBLIC_INTERFACE
        # Read-only: nothing is stored, so the command is safe to run anywhere.
        mode = options["mode"]
        rng = random.Random(options["seed"])
        try:
            engine = get_engine(mode)(options["difficulty"], rng=rng)
        except GenerationError as e:
            raise CommandError(str(e))

        show_solution = options["solution"]
        if mode in SUDOKU_MODES:
            lines = _sudoku_lines(engine, show_solution)
        elif mode == MODE_2048:
            lines = _grid_lines(engine.grid)
        elif mode == MODE_NONOGRAM:
            lines = _nonogram_lines(engine, show_solution)
        else:
            lines = _grid_lines(engine.solution if show_solution else engine.grid, OHH1_SYMBOLS)

        for line in lines:
            self.stdout.write(line)
        self.stdout.write(self.style.SUCCESS(f"Generated {mode} puzzle ({options['difficulty']}, {engine.size}x{engine.size})."))
