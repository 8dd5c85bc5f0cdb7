import random
from collections import deque

from django.test import SimpleTestCase

from gridgames.puzzles.sudoku import (
    CAGE_SIZES,
    KILLER_HINTS,
    REVEALED_CELLS,
    NumberGridEngine,
    generate_solution,
    grow_cage,
    validate_placement,
)

# A valid solved grid built from the shifted-row pattern.
SOLVED = [[(r * 3 + r // 3 + c) % 9 + 1 for c in range(9)] for r in range(9)]
DIGITS = set(range(1, 10))


def _empty_cells(engine):
    return [(r, c) for r in range(9) for c in range(9) if engine.board[r][c].value == 0]


def _wrong_digit(engine, row, col):
    return next(d for d in range(1, 10) if d != engine.solution[row][col])


class SolutionTests(SimpleTestCase):
    def assertSolved(self, grid):
        for i in range(9):
            self.assertEqual(set(grid[i]), DIGITS)
            self.assertEqual({grid[r][i] for r in range(9)}, DIGITS)
        for br in range(0, 9, 3):
            for bc in range(0, 9, 3):
                box = {grid[r][c] for r in range(br, br + 3) for c in range(bc, bc + 3)}
                self.assertEqual(box, DIGITS)

    def test_generated_solutions_are_valid(self):
        for seed in range(5):
            self.assertSolved(generate_solution(random.Random(seed)))

    def test_reference_grid_is_valid(self):
        self.assertSolved(SOLVED)

    def test_validate_placement_checks_row_column_and_box(self):
        board = [[0] * 9 for _ in range(9)]
        board[0][8] = 5
        board[8][0] = 6
        board[1][1] = 7
        self.assertFalse(validate_placement(board, 0, 0, 5))
        self.assertFalse(validate_placement(board, 0, 0, 6))
        self.assertFalse(validate_placement(board, 0, 0, 7))
        self.assertTrue(validate_placement(board, 0, 0, 4))


class StandardCarveTests(SimpleTestCase):
    def test_reveal_counts_follow_difficulty(self):
        for difficulty, revealed in REVEALED_CELLS.items():
            engine = NumberGridEngine(difficulty, rng=random.Random(3), solution=SOLVED)
            cells = [cell for row in engine.board for cell in row]
            self.assertEqual(sum(cell.fixed for cell in cells), revealed)
            for r in range(9):
                for c in range(9):
                    cell = engine.board[r][c]
                    self.assertEqual(cell.fixed, cell.value != 0)
                    if cell.fixed:
                        self.assertEqual(cell.value, SOLVED[r][c])
            self.assertEqual(engine.cages, [])
            self.assertEqual(engine.max_mistakes, 10)


class KillerCarveTests(SimpleTestCase):
    def test_cages_partition_the_board_with_correct_sums(self):
        for difficulty in ("easy", "medium", "hard"):
            engine = NumberGridEngine(difficulty, killer=True, rng=random.Random(11))
            seen = []
            for cage in engine.cages:
                seen.extend(cage.cells)
                self.assertEqual(cage.sum, sum(engine.solution[r][c] for r, c in cage.cells))
                self.assertLessEqual(len(cage.cells), CAGE_SIZES[difficulty][1])
                for r, c in cage.cells:
                    self.assertEqual(engine.cell_to_cage[r][c], cage.index)
                    self.assertEqual(engine.board[r][c].cage_index, cage.index)
            self.assertEqual(len(seen), 81)
            self.assertEqual(set(seen), {(r, c) for r in range(9) for c in range(9)})
            self.assertEqual([cage.index for cage in engine.cages], list(range(len(engine.cages))))

    def test_cages_are_connected(self):
        engine = NumberGridEngine("hard", killer=True, rng=random.Random(5))
        for cage in engine.cages:
            cells = set(cage.cells)
            start = cage.cells[0]
            reached = {start}
            queue = deque([start])
            while queue:
                r, c = queue.popleft()
                for nr, nc in ((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)):
                    if (nr, nc) in cells and (nr, nc) not in reached:
                        reached.add((nr, nc))
                        queue.append((nr, nc))
            self.assertEqual(reached, cells)

    def test_killer_hints_and_mistake_limit(self):
        for difficulty, hints in KILLER_HINTS.items():
            engine = NumberGridEngine(difficulty, killer=True, rng=random.Random(2))
            fixed = [(r, c) for r in range(9) for c in range(9) if engine.board[r][c].fixed]
            self.assertEqual(len(fixed), hints)
            self.assertEqual(len(_empty_cells(engine)), 81 - hints)
            self.assertEqual(engine.max_mistakes, 20)

    def test_grow_cage_stops_at_the_boundary(self):
        visited = [[True] * 9 for _ in range(9)]
        visited[4][4] = False
        cage = grow_cage(4, 4, visited, 3, 5, rng=random.Random(0))
        self.assertEqual(cage.cells, [(4, 4)])
        self.assertTrue(visited[4][4])

    def test_cage_rendering_helpers(self):
        engine = NumberGridEngine("medium", killer=True, rng=random.Random(8))
        cage = engine.cages[0]
        anchor = min(cage.cells)
        self.assertTrue(engine.is_cage_anchor(*anchor))
        self.assertTrue(engine.cage_borders(0, 0)["top"])
        self.assertTrue(engine.cage_borders(0, 0)["left"])
        for r, c in cage.cells:
            if (r, c) != anchor:
                self.assertFalse(engine.is_cage_anchor(r, c))


class MoveTests(SimpleTestCase):
    def setUp(self):
        self.engine = NumberGridEngine("easy", rng=random.Random(4), solution=SOLVED)
        self.row, self.col = _empty_cells(self.engine)[0]

    def test_correct_digit_never_counts_as_mistake(self):
        digit = SOLVED[self.row][self.col]
        self.assertTrue(self.engine.apply_move(self.row, self.col, digit))
        self.assertEqual(self.engine.mistakes, 0)
        self.assertEqual(self.engine.board[self.row][self.col].value, digit)
        self.assertFalse(self.engine.board[self.row][self.col].is_error)

    def test_each_distinct_wrong_entry_counts_once(self):
        wrong = [d for d in range(1, 10) if d != SOLVED[self.row][self.col]]
        self.assertTrue(self.engine.apply_move(self.row, self.col, wrong[0]))
        self.assertEqual(self.engine.mistakes, 1)
        self.assertTrue(self.engine.board[self.row][self.col].is_error)

        self.assertFalse(self.engine.apply_move(self.row, self.col, wrong[0]))
        self.assertEqual(self.engine.mistakes, 1)

        self.engine.apply_move(self.row, self.col, wrong[1])
        self.assertEqual(self.engine.mistakes, 2)

        self.engine.apply_move(self.row, self.col, SOLVED[self.row][self.col])
        self.assertEqual(self.engine.mistakes, 2)
        self.assertFalse(self.engine.board[self.row][self.col].is_error)

    def test_fixed_cells_are_immutable(self):
        r, c = next((r, c) for r in range(9) for c in range(9) if self.engine.board[r][c].fixed)
        before = self.engine.board[r][c].value
        self.assertFalse(self.engine.apply_move(r, c, 0))
        self.assertFalse(self.engine.apply_move(r, c, _wrong_digit(self.engine, r, c)))
        self.assertEqual(self.engine.board[r][c].value, before)
        self.assertEqual(self.engine.mistakes, 0)

    def test_clear_resets_value_error_and_notes(self):
        self.engine.apply_move(self.row, self.col, _wrong_digit(self.engine, self.row, self.col))
        self.assertTrue(self.engine.apply_move(self.row, self.col, 0))
        cell = self.engine.board[self.row][self.col]
        self.assertEqual((cell.value, cell.is_error), (0, False))
        self.assertEqual(self.engine.notes[self.row][self.col], set())

    def test_notes_toggle_and_clear_value(self):
        self.engine.apply_move(self.row, self.col, 3, notes=True)
        self.engine.apply_move(self.row, self.col, 5, notes=True)
        self.assertEqual(self.engine.notes[self.row][self.col], {3, 5})
        self.engine.apply_move(self.row, self.col, 3, notes=True)
        self.assertEqual(self.engine.notes[self.row][self.col], {5})
        self.assertEqual(self.engine.board[self.row][self.col].value, 0)
        self.assertEqual(self.engine.mistakes, 0)

    def test_correct_digit_purges_related_notes(self):
        digit = SOLVED[self.row][self.col]
        peers = [(r, c) for r, c in _empty_cells(self.engine) if (r, c) != (self.row, self.col)]
        same_row = [(r, c) for r, c in peers if r == self.row]
        elsewhere = [(r, c) for r, c in peers if r != self.row and c != self.col
                     and (r // 3, c // 3) != (self.row // 3, self.col // 3)]
        for r, c in same_row[:1] + elsewhere[:1]:
            self.engine.apply_move(r, c, digit, notes=True)

        self.engine.apply_move(self.row, self.col, digit)
        if same_row:
            r, c = same_row[0]
            self.assertNotIn(digit, self.engine.notes[r][c])
        if elsewhere:
            r, c = elsewhere[0]
            self.assertIn(digit, self.engine.notes[r][c])

    def test_round_is_lost_at_the_mistake_limit(self):
        wrong = _wrong_digit(self.engine, self.row, self.col)
        for i in range(self.engine.max_mistakes):
            self.engine.apply_move(self.row, self.col, 0)
            self.engine.apply_move(self.row, self.col, wrong)
        self.assertEqual(self.engine.mistakes, self.engine.max_mistakes)
        self.assertTrue(self.engine.game_over)
        self.assertFalse(self.engine.won)
        self.assertFalse(self.engine.apply_move(self.row, self.col, 0))

    def test_filling_every_cell_wins(self):
        for r, c in _empty_cells(self.engine):
            self.engine.apply_move(r, c, SOLVED[r][c])
        self.assertTrue(self.engine.check_win())
        self.assertTrue(self.engine.won)
        self.assertTrue(self.engine.game_over)


class HintTests(SimpleTestCase):
    def test_hint_reveals_and_locks_an_empty_cell(self):
        engine = NumberGridEngine("hard", rng=random.Random(6), solution=SOLVED)
        empty_before = len(_empty_cells(engine))
        row, col = engine.reveal_hint()
        cell = engine.board[row][col]
        self.assertEqual(cell.value, SOLVED[row][col])
        self.assertTrue(cell.fixed)
        self.assertEqual(len(_empty_cells(engine)), empty_before - 1)

    def test_hint_with_no_empty_cell_is_a_noop(self):
        engine = NumberGridEngine("easy", rng=random.Random(6), solution=SOLVED)
        for r, c in _empty_cells(engine):
            engine.board[r][c].value = SOLVED[r][c]
        r, c = next((r, c) for r in range(9) for c in range(9) if not engine.board[r][c].fixed)
        engine.board[r][c].value = _wrong_digit(engine, r, c)
        before = engine.snapshot()

        self.assertIsNone(engine.reveal_hint())
        self.assertEqual(engine.snapshot(), before)
        self.assertFalse(engine.game_over)

    def test_correct_counts(self):
        engine = NumberGridEngine("easy", rng=random.Random(6), solution=SOLVED)
        counts = engine.correct_counts()
        self.assertEqual(sum(counts), REVEALED_CELLS["easy"])
        self.assertEqual(counts[0], 0)

    def test_unknown_difficulty_is_rejected(self):
        with self.assertRaises(ValueError):
            NumberGridEngine("impossible")
