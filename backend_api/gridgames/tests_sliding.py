import random

from django.test import SimpleTestCase

from gridgames.puzzles.sliding import SlidingMergeEngine, merge_line


def _board(*rows):
    size = len(rows[0])
    grid = [list(r) for r in rows]
    grid += [[0] * size for _ in range(size - len(grid))]
    return grid


def _tiles(grid):
    return sorted(v for row in grid for v in row if v)


class MergeLineTests(SimpleTestCase):
    def test_each_tile_merges_once(self):
        self.assertEqual(merge_line([2, 2, 2, 2]), ([4, 4, 0, 0], 8, False))

    def test_gaps_are_closed_before_merging(self):
        self.assertEqual(merge_line([2, 0, 2, 4]), ([4, 4, 0, 0], 4, False))
        self.assertEqual(merge_line([0, 0, 0, 2]), ([2, 0, 0, 0], 0, False))

    def test_merged_tiles_do_not_merge_again(self):
        self.assertEqual(merge_line([4, 4, 8, 8]), ([8, 16, 0, 0], 24, False))
        self.assertEqual(merge_line([2, 2, 4, 0]), ([4, 4, 0, 0], 4, False))

    def test_reaching_the_winning_tile(self):
        self.assertEqual(merge_line([1024, 1024, 0, 0, 0]), ([2048, 0, 0, 0, 0], 2048, True))


class EngineTests(SimpleTestCase):
    def test_new_board_has_two_tiles(self):
        engine = SlidingMergeEngine.from_difficulty("hard", rng=random.Random(3))
        self.assertEqual(engine.size, 6)
        tiles = _tiles(engine.grid)
        self.assertEqual(len(tiles), 2)
        self.assertTrue(set(tiles) <= {2, 4})
        self.assertEqual(engine.score, 0)

    def test_unknown_difficulty_and_direction(self):
        with self.assertRaises(ValueError):
            SlidingMergeEngine.from_difficulty("huge")
        engine = SlidingMergeEngine(rng=random.Random(0))
        with self.assertRaises(ValueError):
            engine.move("diagonal")

    def test_move_left_merges_scores_and_spawns(self):
        engine = SlidingMergeEngine(rng=random.Random(1), grid=_board([2, 2, 2, 2], [0, 0, 0, 0]))
        self.assertTrue(engine.move("left"))
        self.assertEqual(engine.grid[0][:2], [4, 4])
        self.assertEqual(engine.score, 8)
        self.assertEqual(engine.best_score, 8)
        tiles = _tiles(engine.grid)
        self.assertEqual(len(tiles), 3)
        self.assertIn(sum(tiles) - 8, (2, 4))

    def test_move_right_and_down(self):
        engine = SlidingMergeEngine(rng=random.Random(2), grid=_board([2, 2, 0, 0]))
        self.assertTrue(engine.move("right"))
        self.assertEqual(engine.grid[0][3], 4)
        self.assertEqual(len(_tiles(engine.grid)), 2)

        engine = SlidingMergeEngine(rng=random.Random(2), grid=_board([4, 0, 0, 0], [4, 0, 0, 0]))
        self.assertTrue(engine.move("down"))
        self.assertEqual(engine.grid[3][0], 8)
        self.assertEqual(engine.score, 8)

    def test_move_up(self):
        engine = SlidingMergeEngine(rng=random.Random(2), grid=_board([0, 0, 0, 0], [0, 0, 0, 0], [0, 2, 0, 0], [0, 2, 0, 0]))
        self.assertTrue(engine.move("up"))
        self.assertEqual(engine.grid[0][1], 4)

    def test_blocked_move_changes_nothing(self):
        start = _board([2, 4, 8, 16])
        engine = SlidingMergeEngine(rng=random.Random(0), grid=start)
        self.assertFalse(engine.move("left"))
        self.assertEqual(engine.grid, start)
        self.assertEqual(engine.score, 0)
        self.assertFalse(engine.game_over)

    def test_game_over_when_no_moves_remain(self):
        engine = SlidingMergeEngine(rng=random.Random(0), grid=[[2, 4], [4, 2]])
        self.assertTrue(engine.game_over_check())
        self.assertFalse(engine.move("left"))
        self.assertTrue(engine.game_over)
        self.assertFalse(engine.move("up"))

        engine = SlidingMergeEngine(rng=random.Random(0), grid=[[2, 2], [4, 8]])
        self.assertFalse(engine.game_over_check())

    def test_reaching_2048_allows_play_to_continue(self):
        engine = SlidingMergeEngine(rng=random.Random(0), grid=_board([1024, 1024, 0, 0]))
        engine.move("left")
        self.assertTrue(engine.won)
        self.assertFalse(engine.game_over)
        self.assertEqual(engine.grid[0][0], 2048)

    def test_best_score_only_rises(self):
        engine = SlidingMergeEngine(rng=random.Random(0), best_score=100, grid=_board([2, 2, 0, 0]))
        engine.move("left")
        self.assertEqual(engine.best_score, 100)
        self.assertEqual(engine.snapshot()["score"], 4)
