from io import StringIO

from django.core.management import call_command
from django.test import SimpleTestCase


class RenderPuzzleCommandTests(SimpleTestCase):
    def _render(self, *args):
        out = StringIO()
        call_command("render_puzzle", *args, stdout=out)
        return out.getvalue().splitlines()

    def test_sudoku_solution(self):
        lines = self._render("--mode", "normal", "--difficulty", "easy", "--seed", "1", "--solution")
        self.assertIn("------+-------+------", lines)
        self.assertNotIn(".", "".join(lines[:11]))
        self.assertIn("Generated normal puzzle (easy, 9x9).", lines[-1])

    def test_killer_lists_cages(self):
        lines = self._render("--mode", "killer", "--seed", "2")
        self.assertTrue(any(line.startswith("cage  0: sum") for line in lines))

    def test_same_seed_same_puzzle(self):
        first = self._render("--mode", "nonogram", "--difficulty", "easy", "--seed", "7")
        second = self._render("--mode", "nonogram", "--difficulty", "easy", "--seed", "7")
        self.assertEqual(first, second)
        self.assertTrue(first[0].startswith("cols: "))

    def test_2048_board(self):
        lines = self._render("--mode", "2048", "--difficulty", "medium", "--seed", "3")
        self.assertEqual(len(lines), 6)
