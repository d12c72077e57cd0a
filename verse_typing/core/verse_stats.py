"""Words-per-minute and accuracy calculation for a single typed verse.

The editor records every edit as a timestamped action. Stats are derived by
replaying the actions that follow the user's last full-line reset:

* duration is the sum of gaps between actions, where an idle gap longer than
  :data:`PAUSE_THRESHOLD_MS` only contributes :data:`PAUSE_PENALTY_MS`;
* WPM uses the standard five letters per word over the expected text;
* keystroke accuracy judges each inserted key against the expected letter at
  the cursor when it was typed, so corrected mistakes still count;
* corrected accuracy compares the final text against the expected text.

Any result that cannot be trusted is reported as ``None`` rather than zero.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from functools import reduce
from typing import Any, Callable, Sequence

from loguru import logger
from pydantic import ValidationError

from verse_typing.core.rounding import percentage, round_half_up
from verse_typing.schemas.typing import TypingAction, TypingData

PAUSE_THRESHOLD_MS = 3000
PAUSE_PENALTY_MS = 1000
MIN_DURATION_MS = 1000
MIN_VALID_ACTIONS = 2
LETTERS_PER_WORD = 5
MAX_WPM = 300

RESET_ACTION = "deleteSoftLineBackward"

_MS_PER_MINUTE = 60_000


@dataclass(frozen=True, slots=True)
class VerseStats:
    wpm: int
    accuracy: int
    corrected_accuracy: int


@dataclass(frozen=True, slots=True)
class VerseStatsWithDate:
    wpm: int
    accuracy: int
    corrected_accuracy: int
    date: datetime


@dataclass(frozen=True, slots=True)
class ReplayState:
    """Cursor and keystroke tallies while replaying an action log."""

    position: int = 0
    correct_count: int = 0
    incorrect_count: int = 0
    typed: str = ""

    @property
    def scored(self) -> int:
        return self.correct_count + self.incorrect_count


def parse_typing_data(data: Any) -> TypingData | None:
    """Validate raw editor data, returning ``None`` when it is unusable."""

    if data is None:
        return None
    if isinstance(data, TypingData):
        return data
    try:
        return TypingData.model_validate(data)
    except ValidationError as exc:
        logger.debug("Rejected malformed typing data", errors=exc.error_count())
        return None


def get_valid_actions_after_reset(actions: Sequence[TypingAction]) -> list[TypingAction]:
    """Return the actions that follow the last full-line reset.

    Earlier resets are irrelevant once superseded, so a single backward scan
    finds the cut-off. Without any reset every action is kept.
    """

    for index in range(len(actions) - 1, -1, -1):
        if actions[index].type == RESET_ACTION:
            return list(actions[index + 1 :])
    return list(actions)


def _gap_ms(previous: TypingAction, current: TypingAction) -> int:
    return (current.timestamp - previous.timestamp) // timedelta(milliseconds=1)


def calculate_effective_duration(actions: Sequence[TypingAction]) -> int:
    """Return typing time in milliseconds with idle pauses discounted."""

    if len(actions) < 2:
        return 0

    effective_ms = 0
    for previous, current in zip(actions, actions[1:]):
        gap = _gap_ms(previous, current)
        effective_ms += PAUSE_PENALTY_MS if gap > PAUSE_THRESHOLD_MS else gap
    return effective_ms


# ----------------------------------------------------------------------
# Keystroke replay
# ----------------------------------------------------------------------
def _insert_text(state: ReplayState, action: TypingAction, expected: Sequence[str]) -> ReplayState:
    position = state.position
    is_correct = position < len(expected) and action.key == expected[position]
    return ReplayState(
        position=position + 1,
        correct_count=state.correct_count + (1 if is_correct else 0),
        incorrect_count=state.incorrect_count + (0 if is_correct else 1),
        typed=state.typed + action.key,
    )


def _delete_character(state: ReplayState, action: TypingAction, expected: Sequence[str]) -> ReplayState:
    return replace(state, position=max(0, state.position - 1), typed=state.typed[:-1])


def _delete_word(state: ReplayState, action: TypingAction, expected: Sequence[str]) -> ReplayState:
    keep = state.typed.rfind(" ") + 1
    removed = len(state.typed) - keep
    return replace(state, position=max(0, state.position - removed), typed=state.typed[:keep])


_Transition = Callable[[ReplayState, TypingAction, Sequence[str]], ReplayState]

_TRANSITIONS: dict[str, _Transition] = {
    "insertText": _insert_text,
    "deleteContentBackward": _delete_character,
    "deleteWordBackward": _delete_word,
}


def replay_actions(actions: Sequence[TypingAction], expected: Sequence[str]) -> ReplayState:
    """Fold the action log into cursor position and keystroke tallies."""

    def step(state: ReplayState, action: TypingAction) -> ReplayState:
        transition = _TRANSITIONS.get(action.type)
        if transition is None:
            return state
        return transition(state, action, expected)

    return reduce(step, actions, ReplayState())


def calculate_accuracy(typing_data: TypingData) -> int:
    """Return keystroke accuracy (0-100) over the actions after the last reset.

    Missing expected text yields 0; a log with no scored keystrokes yields 100.
    """

    expected = typing_data.correct_letters
    if not expected:
        return 0

    state = replay_actions(get_valid_actions_after_reset(typing_data.user_actions), expected)
    if state.scored == 0:
        return 100
    return percentage(state.correct_count, state.scored)


def calculate_corrected_accuracy(typing_data: TypingData) -> int:
    """Return accuracy of the submitted text against the expected text.

    Only positions within the expected text are compared; trailing extra
    letters typed by the user are ignored.
    """

    expected = typing_data.correct_letters
    if not expected:
        return 0

    typed = typing_data.user_letters
    matches = sum(
        1 for index, letter in enumerate(expected) if index < len(typed) and typed[index] == letter
    )
    return percentage(matches, len(expected))


def calculate_stats_for_verse(data: Any) -> VerseStats | None:
    """Return speed and accuracy for one verse, or ``None`` if untrustworthy."""

    typing_data = parse_typing_data(data)
    if typing_data is None:
        return None

    valid_actions = get_valid_actions_after_reset(typing_data.user_actions)
    if len(valid_actions) < MIN_VALID_ACTIONS:
        return None

    duration_ms = calculate_effective_duration(valid_actions)
    if duration_ms < MIN_DURATION_MS:
        return None

    letter_count = len(typing_data.correct_letters)
    if letter_count == 0:
        return None

    # wpm = (letters / 5) / (ms / 60000), kept in integers until rounding.
    wpm_numerator = letter_count * _MS_PER_MINUTE
    wpm_denominator = LETTERS_PER_WORD * duration_ms
    if wpm_numerator > MAX_WPM * wpm_denominator:
        logger.debug(
            "Discarding outlier verse speed",
            letters=letter_count,
            duration_ms=duration_ms,
        )
        return None

    return VerseStats(
        wpm=round_half_up(wpm_numerator, wpm_denominator),
        accuracy=calculate_accuracy(typing_data),
        corrected_accuracy=calculate_corrected_accuracy(typing_data),
    )


__all__ = [
    "PAUSE_THRESHOLD_MS",
    "PAUSE_PENALTY_MS",
    "MIN_DURATION_MS",
    "LETTERS_PER_WORD",
    "MAX_WPM",
    "ReplayState",
    "VerseStats",
    "VerseStatsWithDate",
    "parse_typing_data",
    "get_valid_actions_after_reset",
    "calculate_effective_duration",
    "replay_actions",
    "calculate_accuracy",
    "calculate_corrected_accuracy",
    "calculate_stats_for_verse",
]
