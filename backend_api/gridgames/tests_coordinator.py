import random
import threading
from collections import defaultdict

from django.test import SimpleTestCase

from gridgames.puzzles import (
    ElapsedTimer,
    InMemoryBestScores,
    NumberGridEngine,
    SessionCoordinator,
    SlidingMergeEngine,
)
from gridgames.puzzles.hints import reveal_cell
from gridgames.puzzles.sticky import Sticky
from gridgames.puzzles.timer import format_elapsed
from gridgames.rounds import RoundNotFound, RoundStore

SOLVED = [[(r * 3 + r // 3 + c) % 9 + 1 for c in range(9)] for r in range(9)]


class FakeHandle:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback()


class FakeScheduler:
    """Collects scheduled ticks so tests can fire them by hand."""

    def __init__(self):
        self.handles = []

    def __call__(self, interval, callback):
        handle = FakeHandle(callback)
        self.handles.append(handle)
        return handle

    @property
    def last(self):
        return self.handles[-1]


def _coordinator(mode="normal", difficulty="easy", best_scores=None):
    scheduler = FakeScheduler()
    coordinator = SessionCoordinator(
        mode=mode,
        difficulty=difficulty,
        rng=random.Random(0),
        best_scores=best_scores,
        timer=ElapsedTimer(scheduler=scheduler),
    )
    return coordinator, scheduler


def _nearly_solved(*open_cells):
    """A Sudoku engine whose only editable cells are open_cells, all empty."""
    engine = NumberGridEngine("easy", rng=random.Random(0), solution=SOLVED)
    for row in engine.board:
        for cell in row:
            cell.fixed = True
    for r in range(9):
        for c in range(9):
            engine.board[r][c].value = SOLVED[r][c]
    for r, c in open_cells:
        engine.board[r][c].value = 0
        engine.board[r][c].fixed = False
    return engine


class TimerTests(SimpleTestCase):
    def test_ticks_count_seconds_and_rearm(self):
        scheduler = FakeScheduler()
        timer = ElapsedTimer(scheduler=scheduler)
        timer.start()
        self.assertTrue(timer.running)
        scheduler.last.fire()
        scheduler.last.fire()
        self.assertEqual(timer.seconds, 2)
        self.assertEqual(len(scheduler.handles), 3)

    def test_stop_drops_pending_ticks(self):
        scheduler = FakeScheduler()
        timer = ElapsedTimer(scheduler=scheduler)
        timer.start()
        scheduler.last.fire()
        pending = scheduler.last
        timer.stop()
        self.assertTrue(pending.cancelled)
        pending.fire()
        self.assertEqual(timer.seconds, 1)
        self.assertFalse(timer.running)

    def test_restart_ignores_ticks_from_earlier_rounds(self):
        scheduler = FakeScheduler()
        timer = ElapsedTimer(scheduler=scheduler)
        timer.start()
        stale = scheduler.last
        timer.start()
        self.assertEqual(timer.seconds, 0)
        stale.fire()
        self.assertEqual(timer.seconds, 0)
        scheduler.last.fire()
        self.assertEqual(timer.seconds, 1)

    def test_format_elapsed(self):
        self.assertEqual(format_elapsed(0), "00:00")
        self.assertEqual(format_elapsed(75), "01:15")
        self.assertEqual(format_elapsed(6000), "100:00")


class RoundLifecycleTests(SimpleTestCase):
    def test_new_round_resets_state_and_clock(self):
        coordinator, scheduler = _coordinator()
        scheduler.last.fire()
        coordinator.toggle_notes_mode()
        coordinator.select_cell(0, 0)
        self.assertEqual(coordinator.timer.seconds, 1)

        coordinator.new_round("ohh1", "medium")
        self.assertEqual(coordinator.mode, "ohh1")
        self.assertEqual(coordinator.size, 8)
        self.assertEqual(coordinator.timer.seconds, 0)
        self.assertTrue(coordinator.timer.running)
        self.assertIsNone(coordinator.selected)
        self.assertFalse(coordinator.notes_mode)
        self.assertEqual(coordinator.status, "IN_PROGRESS")

    def test_bad_configuration_keeps_the_current_round(self):
        coordinator, _ = _coordinator()
        engine = coordinator.engine
        with self.assertRaises(KeyError):
            coordinator.new_round("chess", "easy")
        with self.assertRaises(ValueError):
            coordinator.new_round("normal", "brutal")
        self.assertIs(coordinator.engine, engine)
        self.assertEqual(coordinator.mode, "normal")

    def test_actions_for_other_modes_are_ignored(self):
        coordinator, _ = _coordinator(mode="2048")
        self.assertFalse(coordinator.select_cell(0, 0))
        self.assertFalse(coordinator.input_number(3))
        self.assertFalse(coordinator.toggle_cell(0, 0))
        self.assertFalse(coordinator.toggle_notes_mode())
        self.assertIsNone(coordinator.request_hint())
        self.assertNotIn("sticky_digit", coordinator.snapshot())

        coordinator.new_round("nonogram", "easy")
        self.assertFalse(coordinator.move("left"))
        self.assertTrue(coordinator.toggle_cell(0, 0))


class StickyInputTests(SimpleTestCase):
    def setUp(self):
        self.coordinator, _ = _coordinator()
        self.coordinator.engine = NumberGridEngine("easy", rng=random.Random(4), solution=SOLVED)

    def _empty_by_digit(self):
        groups = defaultdict(list)
        board = self.coordinator.engine.board
        for r in range(9):
            for c in range(9):
                if board[r][c].value == 0:
                    groups[SOLVED[r][c]].append((r, c))
        return groups

    def test_entered_digit_fills_the_next_selected_cell(self):
        digit, cells = max(self._empty_by_digit().items(), key=lambda kv: len(kv[1]))
        self.assertGreaterEqual(len(cells), 3)
        first, second = cells[0], cells[1]

        self.assertTrue(self.coordinator.select_cell(*first))
        self.assertTrue(self.coordinator.input_number(digit))
        self.assertEqual(self.coordinator.snapshot()["sticky_digit"], digit)

        self.assertTrue(self.coordinator.select_cell(*second))
        self.assertEqual(self.coordinator.engine.board[second[0]][second[1]].value, digit)

        self.coordinator.select_cell(*second)
        self.assertIsNone(self.coordinator.snapshot()["sticky_digit"])
        self.assertEqual(self.coordinator.engine.mistakes, 0)

    def test_clearing_releases_the_sticky_digit(self):
        digit, cells = next(iter(self._empty_by_digit().items()))
        self.coordinator.select_cell(*cells[0])
        self.coordinator.input_number(digit)
        self.assertTrue(self.coordinator.input_number(0))
        self.assertEqual(self.coordinator.engine.board[cells[0][0]][cells[0][1]].value, 0)
        self.assertIsNone(self.coordinator.snapshot()["sticky_digit"])

    def test_wrong_digit_counts_a_mistake(self):
        (r, c) = next(iter(self._empty_by_digit().values()))[0]
        wrong = next(d for d in range(1, 10) if d != SOLVED[r][c])
        self.coordinator.select_cell(r, c)
        self.coordinator.input_number(wrong)
        self.assertEqual(self.coordinator.snapshot()["board"]["mistakes"], 1)
        self.assertTrue(self.coordinator.engine.board[r][c].is_error)

    def test_input_without_selection_does_nothing(self):
        self.assertFalse(self.coordinator.input_number(5))

    def test_completing_a_digit_releases_it(self):
        self.coordinator.engine = _nearly_solved((0, 0), (0, 1))
        self.coordinator.select_cell(0, 0)
        self.coordinator.input_number(SOLVED[0][0])
        self.assertIsNone(self.coordinator.snapshot()["sticky_digit"])
        self.assertEqual(self.coordinator.status, "IN_PROGRESS")

    def test_selecting_a_completed_digit_does_not_stick(self):
        self.coordinator.engine = _nearly_solved((0, 1), (0, 2))
        self.coordinator.select_cell(0, 0)
        self.assertIsNone(self.coordinator.snapshot()["sticky_digit"])

        self.coordinator.select_cell(0, 1)
        self.assertEqual(self.coordinator.engine.board[0][1].value, 0)
        self.assertEqual(self.coordinator.engine.mistakes, 0)

    def test_winning_stops_the_clock(self):
        self.coordinator.engine = _nearly_solved((4, 4))
        self.coordinator.select_cell(4, 4)
        self.coordinator.input_number(SOLVED[4][4])
        self.assertEqual(self.coordinator.status, "WON")
        self.assertFalse(self.coordinator.timer.running)
        self.assertFalse(self.coordinator.select_cell(0, 0))


class KillerInputTests(SimpleTestCase):
    def test_killer_mode_has_no_sticky_digit(self):
        coordinator, _ = _coordinator(mode="killer", difficulty="hard")
        engine = coordinator.engine
        first, second = (0, 0), (8, 8)

        coordinator.select_cell(*first)
        coordinator.input_number(engine.solution[0][0])
        self.assertEqual(engine.board[0][0].value, engine.solution[0][0])

        coordinator.select_cell(*second)
        self.assertEqual(engine.board[8][8].value, 0)
        self.assertIsNone(coordinator.snapshot()["sticky_digit"])
        self.assertEqual(coordinator.engine.max_mistakes, 20)


class HintTests(SimpleTestCase):
    def test_hint_selects_and_counts(self):
        coordinator, _ = _coordinator()
        payload = coordinator.request_hint()
        self.assertEqual(payload["type"], "reveal_cell")
        data = payload["data"]
        self.assertEqual(coordinator.selected, (data["row"], data["col"]))
        self.assertEqual(coordinator.engine.board[data["row"]][data["col"]].value, data["value"])
        self.assertEqual(coordinator.hints_used, 1)

    def test_hint_makes_the_revealed_digit_sticky(self):
        coordinator, _ = _coordinator()
        # Digits 1 and 2 each keep one open copy after any single reveal.
        coordinator.engine = _nearly_solved((0, 0), (0, 1), (1, 6), (1, 7))
        payload = coordinator.request_hint()
        self.assertIn(payload["data"]["value"], (1, 2))
        self.assertEqual(coordinator.snapshot()["sticky_digit"], payload["data"]["value"])

    def test_hint_revealing_the_sticky_digit_releases_it(self):
        coordinator, _ = _coordinator()
        coordinator.engine = _nearly_solved((0, 0), (1, 6))
        self.assertEqual(SOLVED[0][0], SOLVED[1][6])
        coordinator.autofill = Sticky(SOLVED[0][0])
        coordinator.request_hint()
        self.assertIsNone(coordinator.snapshot()["sticky_digit"])
        self.assertEqual(coordinator.engine.mistakes, 0)

    def test_killer_hint_leaves_no_sticky_digit(self):
        coordinator, _ = _coordinator(mode="killer", difficulty="hard")
        coordinator.request_hint()
        self.assertIsNone(coordinator.snapshot()["sticky_digit"])

    def test_hint_with_nothing_empty_is_a_noop(self):
        coordinator, _ = _coordinator()
        engine = _nearly_solved((2, 2))
        engine.board[2][2].value = next(d for d in range(1, 10) if d != SOLVED[2][2])
        coordinator.engine = engine
        before = coordinator.snapshot()

        self.assertIsNone(coordinator.request_hint())
        self.assertEqual(coordinator.hints_used, 0)
        self.assertEqual(coordinator.snapshot(), before)

    def test_hints_for_toggle_puzzles(self):
        coordinator, _ = _coordinator(mode="ohh1")
        payload = coordinator.request_hint()
        data = payload["data"]
        self.assertEqual(coordinator.engine.grid[data["row"]][data["col"]], data["value"])
        self.assertTrue(coordinator.engine.fixed[data["row"]][data["col"]])

    def test_reveal_cell_ignores_engines_without_hints(self):
        self.assertIsNone(reveal_cell(SlidingMergeEngine(rng=random.Random(0))))


class SlidingScoreTests(SimpleTestCase):
    def test_best_score_is_loaded_and_persisted(self):
        scores = InMemoryBestScores()
        scores.put("2048", 4, 50)
        coordinator, _ = _coordinator(mode="2048", best_scores=scores)
        self.assertEqual(coordinator.engine.best_score, 50)

        coordinator.engine = SlidingMergeEngine(
            rng=random.Random(0),
            best_score=50,
            grid=[[32, 32, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]],
        )
        self.assertTrue(coordinator.move("left"))
        self.assertEqual(scores.get("2048", 4), 64)
        self.assertEqual(scores.get("2048", 5), 0)

    def test_lost_board_stops_the_clock(self):
        coordinator, _ = _coordinator(mode="2048")
        coordinator.engine = SlidingMergeEngine(rng=random.Random(0), grid=[[2, 4], [4, 2]])
        self.assertFalse(coordinator.move("up"))
        self.assertEqual(coordinator.status, "LOST")
        self.assertFalse(coordinator.timer.running)


class RoundStoreTests(SimpleTestCase):
    def setUp(self):
        self.store = RoundStore(capacity=2, best_scores=InMemoryBestScores())

    def tearDown(self):
        self.store.clear()

    def test_least_recently_used_round_is_evicted(self):
        first, first_coordinator = self.store.create("2048", "easy")
        second, _ = self.store.create("2048", "easy")
        with self.store.checkout(first):
            pass
        third, _ = self.store.create("2048", "easy")

        self.assertTrue(self.store.exists(first))
        self.assertFalse(self.store.exists(second))
        self.assertTrue(self.store.exists(third))
        self.assertEqual(len(self.store), 2)
        self.assertTrue(first_coordinator.timer.running)

    def test_busy_round_does_not_block_other_rounds(self):
        busy, _ = self.store.create("2048", "easy")
        idle, _ = self.store.create("2048", "easy")
        reached = threading.Event()

        def touch_idle_round():
            with self.store.checkout(idle):
                reached.set()

        with self.store.checkout(busy):
            worker = threading.Thread(target=touch_idle_round)
            worker.start()
            worker.join(timeout=5)
        self.assertTrue(reached.is_set())

    def test_engine_key_errors_are_not_round_lookups(self):
        round_id, _ = self.store.create("2048", "easy")
        with self.assertRaises(KeyError) as ctx:
            with self.store.checkout(round_id):
                raise KeyError("cell")
        self.assertNotIsInstance(ctx.exception, RoundNotFound)

    def test_checkout_unknown_round(self):
        with self.assertRaises(RoundNotFound):
            with self.store.checkout("missing"):
                pass

    def test_discard_stops_the_clock(self):
        round_id, coordinator = self.store.create("nonogram", "easy")
        self.assertTrue(self.store.discard(round_id))
        self.assertFalse(coordinator.timer.running)
        self.assertFalse(self.store.discard(round_id))
