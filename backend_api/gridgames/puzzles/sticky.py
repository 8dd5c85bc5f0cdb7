"""
Auto-fill memory for Sudoku input.

A digit becomes sticky when the player enters it or selects a cell showing it.
While sticky, selecting another empty, editable cell writes the digit there.
Selecting a cell that already shows the sticky digit, entering it again on
such a cell, clearing a cell, or completing all nine copies releases it.

Everything goes through transition(), which returns the next state and the
digit (if any) the caller should write into the selected cell.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Idle:
    """No digit remembered."""


@dataclass(frozen=True)
class Sticky:
    digit: int


AutoFill = Union[Idle, Sticky]


@dataclass(frozen=True)
class Selected:
    """The player picked a cell. same_cell is True when it was already selected."""

    value: int
    fixed: bool
    same_cell: bool


@dataclass(frozen=True)
class Entered:
    """The player pressed a digit (0 clears) with the given cell selected."""

    digit: int
    value: int
    fixed: bool


@dataclass(frozen=True)
class DigitCompleted:
    """All nine copies of digit are correctly placed."""

    digit: int


Event = Union[Selected, Entered, DigitCompleted]


def sticky_digit(state: AutoFill) -> Optional[int]:
    return state.digit if isinstance(state, Sticky) else None


# PUBLIC_INTERFACE
def transition(state: AutoFill, event: Event) -> Tuple[AutoFill, Optional[int]]:
    """Advance the auto-fill machine.

    Parameters:
        state: current Idle() or Sticky(digit).
        event: Selected, Entered or DigitCompleted.

    Returns:
        (next state, digit to write into the selected cell or None).
    """
    held = sticky_digit(state)

    if isinstance(event, DigitCompleted):
        return (Idle() if held == event.digit else state), None

    if isinstance(event, Selected):
        if held is not None and not event.fixed and event.value == 0 and not event.same_cell:
            return state, held
        if event.value != 0:
            return (Idle() if held == event.value else Sticky(event.value)), None
        return state, None

    # Entered
    if event.digit == 0:
        return (state, None) if event.fixed else (Idle(), 0)
    if held == event.digit:
        if event.value == event.digit or event.fixed:
            return Idle(), None
        return state, event.digit
    if event.fixed:
        return Sticky(event.digit), None
    return Sticky(event.digit), event.digit
