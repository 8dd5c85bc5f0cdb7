import random

from django.test import SimpleTestCase

from gridgames.puzzles.binary import (
    COLOR_A,
    COLOR_B,
    EMPTY,
    BinaryPlacementEngine,
    color_fits,
    generate_solution,
    has_triple,
    is_balanced,
)
from gridgames.puzzles.grid import column

SOLVED = [
    [1, 1, 2, 1, 2, 2],
    [2, 2, 1, 2, 1, 1],
    [1, 2, 1, 1, 2, 2],
    [2, 1, 2, 2, 1, 1],
    [1, 2, 2, 1, 1, 2],
    [2, 1, 1, 2, 2, 1],
]


class RuleTests(SimpleTestCase):
    def test_line_rules(self):
        self.assertTrue(has_triple([1, 2, 2, 2, 1, 1]))
        self.assertFalse(has_triple([1, 1, 2, 1, 1, 2]))
        self.assertFalse(has_triple([0, 0, 0, 1, 2, 1]))
        self.assertTrue(is_balanced([1, 2, 1, 2]))
        self.assertFalse(is_balanced([1, 1, 1, 2]))
        self.assertFalse(is_balanced([1, 2, 0, 2]))

    def test_color_fits_rejects_runs_and_overfull_lines(self):
        grid = [[EMPTY] * 6 for _ in range(6)]
        grid[0][0] = grid[0][1] = COLOR_A
        self.assertFalse(color_fits(grid, 0, 2, COLOR_A))
        self.assertTrue(color_fits(grid, 0, 2, COLOR_B))

        row = [[COLOR_A, COLOR_B, COLOR_A, COLOR_B, COLOR_A, EMPTY]]
        row += [[EMPTY] * 6 for _ in range(5)]
        self.assertFalse(color_fits(row, 0, 5, COLOR_A))
        self.assertTrue(color_fits(row, 0, 5, COLOR_B))

    def test_color_fits_checks_the_middle_of_a_run(self):
        grid = [[EMPTY] * 6 for _ in range(6)]
        grid[1][3] = grid[3][3] = COLOR_B
        self.assertFalse(color_fits(grid, 2, 3, COLOR_B))


class GenerationTests(SimpleTestCase):
    def assertValidSolution(self, grid):
        size = len(grid)
        lines = [list(row) for row in grid] + [column(grid, c) for c in range(size)]
        for line in lines:
            self.assertNotIn(EMPTY, line)
            self.assertFalse(has_triple(line))
            self.assertTrue(is_balanced(line))

    def test_generated_solutions_obey_the_rules(self):
        for size in (6, 8):
            for seed in range(3):
                self.assertValidSolution(generate_solution(size, random.Random(seed)))

    def test_largest_board(self):
        self.assertValidSolution(generate_solution(10, random.Random(42)))

    def test_odd_sizes_are_rejected(self):
        with self.assertRaises(ValueError):
            generate_solution(5)

    def test_reference_solution_is_valid(self):
        self.assertValidSolution(SOLVED)


class EngineTests(SimpleTestCase):
    def setUp(self):
        self.engine = BinaryPlacementEngine(rng=random.Random(1), solution=SOLVED)

    def test_carve_reveals_a_fixed_share(self):
        fixed = [(r, c) for r in range(6) for c in range(6) if self.engine.fixed[r][c]]
        self.assertEqual(len(fixed), int(36 * 0.35))
        for r in range(6):
            for c in range(6):
                expected = SOLVED[r][c] if self.engine.fixed[r][c] else EMPTY
                self.assertEqual(self.engine.grid[r][c], expected)

    def test_from_difficulty_sizes(self):
        self.assertEqual(BinaryPlacementEngine.from_difficulty("easy", rng=random.Random(0)).size, 6)
        self.assertEqual(BinaryPlacementEngine.from_difficulty("medium", rng=random.Random(0)).size, 8)
        with self.assertRaises(ValueError):
            BinaryPlacementEngine.from_difficulty("extreme")

    def test_toggle_cycles_and_respects_fixed_cells(self):
        r, c = next((r, c) for r in range(6) for c in range(6) if not self.engine.fixed[r][c])
        self.assertTrue(self.engine.toggle_cell(r, c))
        self.assertEqual(self.engine.grid[r][c], COLOR_A)
        self.engine.toggle_cell(r, c)
        self.assertEqual(self.engine.grid[r][c], COLOR_B)
        self.engine.toggle_cell(r, c)
        self.assertEqual(self.engine.grid[r][c], EMPTY)

        fr, fc = next((r, c) for r in range(6) for c in range(6) if self.engine.fixed[r][c])
        self.assertFalse(self.engine.toggle_cell(fr, fc))
        self.assertEqual(self.engine.grid[fr][fc], SOLVED[fr][fc])

    def test_win_requires_a_full_valid_grid(self):
        self.engine.grid = [row[:] for row in SOLVED]
        self.assertTrue(self.engine.check_win())

        self.engine.grid[0][0] = EMPTY
        self.assertFalse(self.engine.check_win())

        broken = [row[:] for row in SOLVED]
        broken[0] = [1, 1, 1, 2, 2, 2]
        self.engine.grid = broken
        self.assertFalse(self.engine.check_win())

    def test_completing_the_grid_ends_the_round(self):
        for r in range(6):
            for c in range(6):
                while self.engine.grid[r][c] != SOLVED[r][c]:
                    self.engine.toggle_cell(r, c)
        self.assertTrue(self.engine.won)
        self.assertTrue(self.engine.game_over)
        self.assertFalse(self.engine.toggle_cell(0, 0))

    def test_hint_locks_a_mismatched_cell(self):
        row, col = self.engine.reveal_hint()
        self.assertEqual(self.engine.grid[row][col], SOLVED[row][col])
        self.assertTrue(self.engine.fixed[row][col])
