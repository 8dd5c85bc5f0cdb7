from django.test import SimpleTestCase

from gridgames.puzzles.sticky import (
    DigitCompleted,
    Entered,
    Idle,
    Selected,
    Sticky,
    sticky_digit,
    transition,
)


class SelectTransitionTests(SimpleTestCase):
    def test_selecting_an_empty_cell_while_idle_does_nothing(self):
        self.assertEqual(transition(Idle(), Selected(0, False, False)), (Idle(), None))

    def test_selecting_a_filled_cell_makes_its_digit_sticky(self):
        self.assertEqual(transition(Idle(), Selected(7, True, False)), (Sticky(7), None))
        self.assertEqual(transition(Sticky(3), Selected(7, False, False)), (Sticky(7), None))

    def test_sticky_digit_fills_other_empty_cells(self):
        self.assertEqual(transition(Sticky(4), Selected(0, False, False)), (Sticky(4), 4))

    def test_no_fill_on_the_same_cell_or_fixed_cells(self):
        self.assertEqual(transition(Sticky(4), Selected(0, False, True)), (Sticky(4), None))
        self.assertEqual(transition(Sticky(4), Selected(0, True, False)), (Sticky(4), None))

    def test_selecting_the_sticky_digit_releases_it(self):
        self.assertEqual(transition(Sticky(5), Selected(5, False, False)), (Idle(), None))
        self.assertEqual(transition(Sticky(5), Selected(5, True, True)), (Idle(), None))


class EnterTransitionTests(SimpleTestCase):
    def test_entering_a_digit_writes_and_remembers_it(self):
        self.assertEqual(transition(Idle(), Entered(6, 0, False)), (Sticky(6), 6))
        self.assertEqual(transition(Sticky(2), Entered(6, 2, False)), (Sticky(6), 6))

    def test_fixed_cells_remember_without_writing(self):
        self.assertEqual(transition(Idle(), Entered(6, 9, True)), (Sticky(6), None))

    def test_reentering_the_sticky_digit(self):
        self.assertEqual(transition(Sticky(8), Entered(8, 8, False)), (Idle(), None))
        self.assertEqual(transition(Sticky(8), Entered(8, 0, False)), (Sticky(8), 8))
        self.assertEqual(transition(Sticky(8), Entered(8, 3, True)), (Idle(), None))

    def test_clearing(self):
        self.assertEqual(transition(Sticky(8), Entered(0, 8, False)), (Idle(), 0))
        self.assertEqual(transition(Sticky(8), Entered(0, 8, True)), (Sticky(8), None))


class CompletionTests(SimpleTestCase):
    def test_completed_digit_is_released(self):
        self.assertEqual(transition(Sticky(1), DigitCompleted(1)), (Idle(), None))
        self.assertEqual(transition(Sticky(1), DigitCompleted(2)), (Sticky(1), None))
        self.assertEqual(transition(Idle(), DigitCompleted(2)), (Idle(), None))

    def test_sticky_digit(self):
        self.assertIsNone(sticky_digit(Idle()))
        self.assertEqual(sticky_digit(Sticky(9)), 9)
