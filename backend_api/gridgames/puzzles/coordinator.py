from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from .grid import Position
from .hints import reveal_cell
from .registry import MODE_2048, MODE_KILLER, MODE_NORMAL, SUDOKU_MODES, get_engine
from .scores import SLIDING_NAMESPACE, BestScoreStore, InMemoryBestScores
from .sliding import DIRECTIONS
from .sticky import AutoFill, DigitCompleted, Entered, Idle, Selected, sticky_digit, transition
from .sudoku import SIZE as SUDOKU_SIZE
from .timer import ElapsedTimer, format_elapsed

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class SessionCoordinator:
    """Owns the active puzzle engine for one player and routes input to it.

    A round is replaced wholesale by new_round(); nothing from the previous
    engine survives. Every input method returns True when it changed visible
    state and silently does nothing when the action does not apply (wrong
    mode, fixed cell, finished round).

    Parameters:
        mode, difficulty: first round configuration.
        rng: random source handed to every engine (random module by default).
        best_scores: BestScoreStore for 2048 best scores.
        timer: ElapsedTimer for the round clock.
    """

    def __init__(
        self,
        mode: str = MODE_NORMAL,
        difficulty: str = "medium",
        rng=None,
        best_scores: Optional[BestScoreStore] = None,
        timer: Optional[ElapsedTimer] = None,
    ):
        self._rng = rng
        self._best_scores = best_scores if best_scores is not None else InMemoryBestScores()
        self.timer = timer if timer is not None else ElapsedTimer()
        self.engine: Any = None
        self.mode = mode
        self.difficulty = difficulty
        self.selected: Optional[Position] = None
        self.autofill: AutoFill = Idle()
        self.notes_mode = False
        self.hints_used = 0
        self.new_round(mode, difficulty)

    # Round lifecycle

    def new_round(self, mode: Optional[str] = None, difficulty: Optional[str] = None) -> None:
        """Discard the current round and generate a fresh one.

        Raises:
            KeyError: unknown mode.
            ValueError: unknown difficulty.
        """
        mode = (mode or self.mode).strip().lower()
        difficulty = difficulty or self.difficulty
        engine = get_engine(mode)(difficulty, rng=self._rng)

        self.timer.stop()
        if mode == MODE_2048:
            engine.best_score = self._best_scores.get(SLIDING_NAMESPACE, engine.size)
        self.engine = engine
        self.mode = mode
        self.difficulty = difficulty
        self.selected = None
        self.autofill = Idle()
        self.notes_mode = False
        self.hints_used = 0
        self.timer.start()
        logger.info("New %s round (%s), %dx%d", mode, difficulty, self.size, self.size)

    def stop(self) -> None:
        """Stop the round clock; used when the round is discarded."""
        self.timer.stop()

    @property
    def size(self) -> int:
        return self.engine.size

    @property
    def is_sudoku(self) -> bool:
        return self.mode in SUDOKU_MODES

    @property
    def game_over(self) -> bool:
        return self.engine.game_over

    @property
    def won(self) -> bool:
        return self.engine.won

    @property
    def status(self) -> str:
        if not self.engine.game_over:
            return "IN_PROGRESS"
        return "WON" if self.engine.won else "LOST"

    def contains(self, row: int, col: int) -> bool:
        return self.engine.contains(row, col)

    def _settle(self, changed: bool) -> bool:
        if self.engine.game_over and self.timer.running:
            self.timer.stop()
            logger.info("%s round finished: %s after %ss", self.mode, self.status, self.timer.seconds)
        return changed

    # Sudoku input

    def _sudoku_state(self) -> Tuple[Optional[Position], AutoFill, int, Any]:
        return self.selected, self.autofill, self.engine.mistakes, self.engine.snapshot()

    def _release_completed_digit(self) -> None:
        digit = sticky_digit(self.autofill)
        if digit is not None and self.engine.correct_counts()[digit] >= SUDOKU_SIZE:
            self.autofill, _ = transition(self.autofill, DigitCompleted(digit))

    def _feed_autofill(self, row: int, col: int, event) -> None:
        """Run one sticky transition, write its digit, then drop a completed digit."""
        self.autofill, fill = transition(self.autofill, event)
        if fill is not None:
            self.engine.apply_move(row, col, fill, notes=self.notes_mode)
        self._release_completed_digit()

    # PUBLIC_INTERFACE
    def select_cell(self, row: int, col: int) -> bool:
        """Point at a Sudoku cell, applying or toggling the sticky digit."""
        if not self.is_sudoku or self.engine.game_over or not self.contains(row, col):
            return False
        before = self._sudoku_state()
        same_cell = self.selected == (row, col)
        self.selected = (row, col)

        if self.mode != MODE_KILLER:
            cell = self.engine.board[row][col]
            self._feed_autofill(row, col, Selected(cell.value, cell.fixed, same_cell))
        return self._settle(self._sudoku_state() != before)

    # PUBLIC_INTERFACE
    def input_number(self, digit: int) -> bool:
        """Enter digit (0 clears) into the selected Sudoku cell."""
        if not self.is_sudoku or self.engine.game_over or self.selected is None:
            return False
        if not 0 <= digit <= 9:
            return False
        row, col = self.selected

        if self.mode == MODE_KILLER:
            return self._settle(self.engine.apply_move(row, col, digit, notes=self.notes_mode))

        before = self._sudoku_state()
        cell = self.engine.board[row][col]
        self._feed_autofill(row, col, Entered(digit, cell.value, cell.fixed))
        return self._settle(self._sudoku_state() != before)

    def toggle_notes_mode(self) -> bool:
        if not self.is_sudoku:
            return False
        self.notes_mode = not self.notes_mode
        return True

    # Other engines

    # PUBLIC_INTERFACE
    def toggle_cell(self, row: int, col: int) -> bool:
        """Cycle a cell in Oh h1 or Nonogram."""
        if not hasattr(self.engine, "toggle_cell") or not self.contains(row, col):
            return False
        return self._settle(self.engine.toggle_cell(row, col))

    # PUBLIC_INTERFACE
    def move(self, direction: str) -> bool:
        """Slide the 2048 board; persists a new best score when one is set."""
        if self.mode != MODE_2048 or direction not in DIRECTIONS:
            return False
        previous_best = self.engine.best_score
        moved = self.engine.move(direction)
        if moved and self.engine.best_score > previous_best:
            self._best_scores.put(SLIDING_NAMESPACE, self.engine.size, self.engine.best_score)
        return self._settle(moved)

    # PUBLIC_INTERFACE
    def request_hint(self) -> Optional[Dict[str, Any]]:
        """Reveal one cell of the solution; None (and no change) if impossible."""
        payload = reveal_cell(self.engine)
        if payload is None:
            return None
        self.hints_used += 1
        if self.is_sudoku:
            row, col = payload["data"]["row"], payload["data"]["col"]
            self.selected = (row, col)
            if self.mode != MODE_KILLER:
                # The revealed cell is selected as if the player clicked it.
                cell = self.engine.board[row][col]
                self._feed_autofill(row, col, Selected(cell.value, cell.fixed, False))
        self._settle(True)
        return payload

    # Rendering

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view of the round for a renderer."""
        snap: Dict[str, Any] = {
            "mode": self.mode,
            "difficulty": self.difficulty,
            "size": self.size,
            "status": self.status,
            "elapsed_secs": self.timer.seconds,
            "elapsed": format_elapsed(self.timer.seconds),
            "hints_used": self.hints_used,
            "board": self.engine.snapshot(),
        }
        if self.is_sudoku:
            snap["selected"] = list(self.selected) if self.selected else None
            snap["notes_mode"] = self.notes_mode
            snap["sticky_digit"] = sticky_digit(self.autofill) if self.mode != MODE_KILLER else None
        return snap
