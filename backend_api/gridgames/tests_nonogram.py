import random

from django.test import SimpleTestCase

from gridgames.puzzles.nonogram import (
    EMPTY,
    FILLED,
    MARKED,
    PictureLogicEngine,
    compute_hints,
    generate_solution,
    grid_hints,
)

PICTURE = [
    [1, 1, 1],
    [0, 0, 0],
    [1, 0, 1],
]


class HintTests(SimpleTestCase):
    def test_compute_hints(self):
        self.assertEqual(compute_hints([1, 1, 0, 1]), [2, 1])
        self.assertEqual(compute_hints([0, 0, 0]), [0])
        self.assertEqual(compute_hints([1, 1, 1, 1]), [4])
        self.assertEqual(compute_hints([0, 1, 0, 0, 1, 1]), [1, 2])

    def test_marked_cells_break_runs(self):
        self.assertEqual(compute_hints([FILLED, MARKED, FILLED]), [1, 1])
        self.assertEqual(compute_hints([MARKED, MARKED]), [0])

    def test_grid_hints(self):
        rows, cols = grid_hints(PICTURE)
        self.assertEqual(rows, [[3], [0], [1, 1]])
        self.assertEqual(cols, [[1, 1], [1], [1, 1]])


class GenerationTests(SimpleTestCase):
    def test_fill_ratio_is_bounded(self):
        for size in (5, 10, 15):
            grid = generate_solution(size, random.Random(size))
            filled = sum(map(sum, grid))
            self.assertEqual(len(grid), size)
            self.assertGreaterEqual(filled, int(size * size * 0.2))
            self.assertLessEqual(filled, int(size * size * 0.8))

    def test_engine_hints_match_its_picture(self):
        engine = PictureLogicEngine.from_difficulty("medium", rng=random.Random(9))
        self.assertEqual(engine.size, 10)
        self.assertEqual((engine.row_hints, engine.col_hints), grid_hints(engine.solution))
        self.assertTrue(all(v == EMPTY for row in engine.grid for v in row))

    def test_unknown_difficulty_is_rejected(self):
        with self.assertRaises(ValueError):
            PictureLogicEngine.from_difficulty("expert")


class EngineTests(SimpleTestCase):
    def setUp(self):
        self.engine = PictureLogicEngine(rng=random.Random(0), solution=PICTURE)

    def test_toggle_cycles_empty_filled_marked(self):
        self.assertTrue(self.engine.toggle_cell(1, 1))
        self.assertEqual(self.engine.grid[1][1], FILLED)
        self.engine.toggle_cell(1, 1)
        self.assertEqual(self.engine.grid[1][1], MARKED)
        self.engine.toggle_cell(1, 1)
        self.assertEqual(self.engine.grid[1][1], EMPTY)
        self.assertFalse(self.engine.game_over)

    def test_marks_do_not_block_a_win(self):
        for r, c in ((0, 0), (0, 1), (0, 2), (2, 0), (2, 2)):
            self.engine.toggle_cell(r, c)
        self.assertTrue(self.engine.won)
        self.assertTrue(self.engine.game_over)
        self.assertFalse(self.engine.toggle_cell(1, 1))

    def test_marked_cells_count_as_empty_for_the_win(self):
        self.engine.toggle_cell(1, 1)
        self.engine.toggle_cell(1, 1)
        self.assertEqual(self.engine.grid[1][1], MARKED)
        for r, c in ((0, 0), (0, 1), (0, 2), (2, 0), (2, 2)):
            self.engine.toggle_cell(r, c)
        self.assertTrue(self.engine.won)

    def test_any_picture_with_matching_hints_wins(self):
        engine = PictureLogicEngine(rng=random.Random(0), solution=[[1, 0], [0, 1]])
        engine.toggle_cell(0, 1)
        self.assertFalse(engine.won)
        engine.toggle_cell(1, 0)
        self.assertTrue(engine.won)
        self.assertNotEqual(engine.grid, engine.solution)

    def test_hint_corrects_one_cell(self):
        self.engine.toggle_cell(1, 1)
        row, col = self.engine.reveal_hint()
        expected = FILLED if PICTURE[row][col] == FILLED else MARKED
        self.assertEqual(self.engine.grid[row][col], expected)

    def test_snapshot_shape(self):
        snap = self.engine.snapshot()
        self.assertEqual(snap["row_hints"], [[3], [0], [1, 1]])
        self.assertEqual(snap["col_hints"], [[1, 1], [1], [1, 1]])
        self.assertEqual(len(snap["grid"]), 3)
