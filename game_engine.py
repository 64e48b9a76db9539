"""
Yahtzee Game Engine - Score groups, scoring rules and the per-player score sheet

This module contains the pure scoring logic for Yahtzee. Nothing in here knows
about turns, players or dice generators; the game session (yahtzee_game.py)
feeds it five face values and stores what comes back.
"""
from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Callable, Iterable

UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS = 25

FULL_HOUSE_SCORE = 25
SMALL_STRAIGHT_SCORE = 30
LARGE_STRAIGHT_SCORE = 40
YAHTZEE_SCORE = 50

NUM_DICE = 5


class YahtzeeError(Exception):
    """Base class for rule violations reported by the engine."""


class InvalidMoveError(YahtzeeError, ValueError):
    """An argument names dice or values that the current state can't accept."""


class IllegalStateError(YahtzeeError, RuntimeError):
    """The requested operation is not allowed in the current game state."""


class ScoreGroup(Enum):
    """Yahtzee score groups, tagged with the section they belong to"""
    ONES = ("Ones", True)
    TWOS = ("Twos", True)
    THREES = ("Threes", True)
    FOURS = ("Fours", True)
    FIVES = ("Fives", True)
    SIXES = ("Sixes", True)
    THREE_OF_A_KIND = ("3 of a Kind", False)
    FOUR_OF_A_KIND = ("4 of a Kind", False)
    FULL_HOUSE = ("Full House", False)
    SMALL_STRAIGHT = ("Small Straight", False)
    LARGE_STRAIGHT = ("Large Straight", False)
    YAHTZEE = ("Yahtzee", False)
    CHANCE = ("Chance", False)

    def __init__(self, label: str, is_upper: bool):
        self.label = label
        self.is_upper = is_upper

    @property
    def is_lower(self) -> bool:
        return not self.is_upper

    @property
    def face(self) -> int | None:
        """Face value counted by an upper group, None for lower groups."""
        return _UPPER_FACES.get(self)


_UPPER_FACES = {
    ScoreGroup.ONES: 1, ScoreGroup.TWOS: 2, ScoreGroup.THREES: 3,
    ScoreGroup.FOURS: 4, ScoreGroup.FIVES: 5, ScoreGroup.SIXES: 6,
}

UPPER_GROUPS = tuple(group for group in ScoreGroup if group.is_upper)
LOWER_GROUPS = tuple(group for group in ScoreGroup if group.is_lower)


def face_counts(dice: Iterable[int]) -> tuple[int, ...]:
    """
    Count occurrences of each face value

    Args:
        dice: Five face values in [1, 6]

    Returns:
        Tuple of six counts; index 0 holds the number of ones

    Raises:
        ValueError: if the hand is not five faces in [1, 6]
    """
    values = list(dice)
    if len(values) != NUM_DICE:
        raise ValueError(f"A hand has {NUM_DICE} dice, got {len(values)}: {values}")
    counter = Counter(values)
    for value in counter:
        if not isinstance(value, int) or not 1 <= value <= 6:
            raise ValueError(f"Die value {value!r} is not between 1 and 6")
    return tuple(counter[face] for face in range(1, 7))


def has_n_of_kind(counts, n):
    """True if some face appears at least n times."""
    return max(counts) >= n


def has_full_house(counts):
    """True for three of one face and two of a different face."""
    return sorted(c for c in counts if c) == [2, 3]


def _longest_run(counts):
    longest = run = 0
    for count in counts:
        run = run + 1 if count else 0
        longest = max(longest, run)
    return longest


def has_small_straight(counts):
    """
    Check for four consecutive faces

    Possible small straights: 1-2-3-4, 2-3-4-5, 3-4-5-6
    """
    return _longest_run(counts) >= 4


def has_large_straight(counts):
    """Check for five consecutive faces: 1-2-3-4-5 or 2-3-4-5-6."""
    return _longest_run(counts) == 5


def has_yahtzee(counts):
    """Check if all dice show the same face."""
    return NUM_DICE in counts


def calculate_score(group: ScoreGroup, dice: Iterable[int]) -> int:
    """
    Calculate the score for a given group and hand

    Args:
        group: ScoreGroup to score
        dice: Five face values in [1, 6]

    Returns:
        Integer score for the group (0 if the hand doesn't qualify)
    """
    counts = face_counts(dice)
    total = sum(face * count for face, count in enumerate(counts, start=1))

    # Upper section - sum of matching dice
    if group.is_upper:
        return counts[group.face - 1] * group.face

    if group is ScoreGroup.THREE_OF_A_KIND:
        return total if has_n_of_kind(counts, 3) else 0
    elif group is ScoreGroup.FOUR_OF_A_KIND:
        return total if has_n_of_kind(counts, 4) else 0
    elif group is ScoreGroup.FULL_HOUSE:
        return FULL_HOUSE_SCORE if has_full_house(counts) else 0
    elif group is ScoreGroup.SMALL_STRAIGHT:
        return SMALL_STRAIGHT_SCORE if has_small_straight(counts) else 0
    elif group is ScoreGroup.LARGE_STRAIGHT:
        return LARGE_STRAIGHT_SCORE if has_large_straight(counts) else 0
    elif group is ScoreGroup.YAHTZEE:
        return YAHTZEE_SCORE if has_yahtzee(counts) else 0
    elif group is ScoreGroup.CHANCE:
        return total

    raise ValueError(f"Unknown score group {group!r}")


class ScoreSheet:
    """Holds one player's thirteen group scores and derives the totals.

    The sheet never reads dice itself. ``apply_dice_to_group`` forwards to the
    callback supplied by the owning game, which validates the turn, computes
    the score and stores it through ``_record_score``.
    """

    def __init__(self, apply_dice: Callable[[ScoreSheet, ScoreGroup], None] | None = None):
        # None = not played yet, distinct from a score of 0
        self._scores: dict[ScoreGroup, int | None] = {group: None for group in ScoreGroup}
        self._apply_dice = apply_dice

    @property
    def scores(self) -> dict[ScoreGroup, int | None]:
        """Copy of the group -> score mapping."""
        return dict(self._scores)

    def get_group_score(self, group: ScoreGroup) -> int | None:
        return self._scores[group]

    def is_filled(self, group: ScoreGroup) -> bool:
        return self._scores[group] is not None

    def is_complete(self) -> bool:
        return all(score is not None for score in self._scores.values())

    def open_groups(self) -> list[ScoreGroup]:
        """Groups that have not been scored yet, in sheet order."""
        return [group for group, score in self._scores.items() if score is None]

    def _record_score(self, group: ScoreGroup, score: int) -> None:
        """Store a score permanently; a group can only be recorded once."""
        if self._scores[group] is not None:
            raise IllegalStateError(f"{group.label} has already been scored")
        self._scores[group] = score

    def apply_dice_to_group(self, group: ScoreGroup) -> None:
        """Score the current dice in ``group`` and end the turn."""
        if self._apply_dice is None:
            raise IllegalStateError("This score sheet is not attached to a game")
        self._apply_dice(self, group)

    def _section_total(self, groups):
        return sum(self._scores[group] or 0 for group in groups)

    @property
    def upper_sub_total(self) -> int:
        """Raw total of the upper section (Ones through Sixes)"""
        return self._section_total(UPPER_GROUPS)

    @property
    def upper_bonus(self) -> int:
        return UPPER_BONUS if self.upper_sub_total >= UPPER_BONUS_THRESHOLD else 0

    @property
    def upper_total(self) -> int:
        """Upper subtotal plus the bonus once it reaches 63"""
        return self.upper_sub_total + self.upper_bonus

    @property
    def lower_total(self) -> int:
        return self._section_total(LOWER_GROUPS)

    @property
    def total_score(self) -> int:
        return self.upper_total + self.lower_total
