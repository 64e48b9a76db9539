"""
Scripted turns - a compact notation for replaying dice, and a generator that replays it

A roll is written as the kept values in parentheses followed by the freshly
thrown values, e.g. ``(6 6) 3 5 6``. A turn is up to three rolls separated by
commas, e.g. ``"5 4 6 6 1, (6 6) 3 5 6, (6 6 6) 2 3"``.

ScriptedGenerator hands out the freshly thrown values in order, which makes a
whole game reproducible.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from dice_generator import Generator, RandomGenerator
from game_engine import ScoreGroup


def _parse_values(text: str) -> tuple[int, ...]:
    return tuple(int(token) for token in text.split())


@dataclass(frozen=True)
class DieRoll:
    """One roll: the dice kept from the previous roll and the new throws."""
    keep: tuple[int, ...]
    roll: tuple[int, ...]

    @property
    def expected_dice(self) -> list[int]:
        """Sorted hand after this roll."""
        return sorted(self.keep + self.roll)

    @classmethod
    def parse(cls, text: str) -> DieRoll:
        open_idx = text.find("(")
        if open_idx < 0:
            return cls(keep=(), roll=_parse_values(text))
        close_idx = text.find(")", open_idx)
        if close_idx < 0:
            raise ValueError(f"Unclosed keep group in roll {text!r}")
        keep = _parse_values(text[open_idx + 1:close_idx])
        roll = _parse_values(text[:open_idx] + " " + text[close_idx + 1:])
        return cls(keep=keep, roll=roll)

    def __str__(self) -> str:
        keep = " ".join(map(str, self.keep))
        roll = " ".join(map(str, self.roll))
        if not self.keep:
            return roll
        if not self.roll:
            return f"({keep})"
        return f"({keep}) {roll}"


def parse_rolls(text: str) -> tuple[DieRoll, ...]:
    """Parse a comma separated list of rolls."""
    return tuple(DieRoll.parse(part) for part in text.split(","))


@dataclass(frozen=True)
class Turn:
    """A full turn: the rolls, the group they get scored in and the expected score."""
    rolls: tuple[DieRoll, ...]
    group: ScoreGroup
    expected_score: int

    @classmethod
    def parse(cls, rolls: str, group: ScoreGroup, expected_score: int) -> Turn:
        return cls(parse_rolls(rolls), group, expected_score)

    @property
    def final_dice(self) -> list[int]:
        """Hand at the end of the turn (last roll that threw new dice)."""
        thrown = [roll for roll in self.rolls if roll.roll]
        return thrown[-1].expected_dice

    def __str__(self) -> str:
        rolls = ", ".join(str(roll) for roll in self.rolls)
        return f'Turn("{rolls}", ScoreGroup.{self.group.name}, {self.expected_score})'


class ScriptedGenerator(Generator):
    """Replays the new values of a list of turns, one die at a time.

    Rolls without new values are skipped. Once every turn has been used up the
    generator falls back to ``fallback`` (a RandomGenerator unless given).
    """

    def __init__(self, turns: Sequence[Turn], fallback: Generator | None = None) -> None:
        self.turns = tuple(turns)
        self.fallback = fallback if fallback is not None else RandomGenerator()
        self.current_turn_index = 0
        self.current_roll_index = 0
        self.current_die_index = 0
        self._skip_empty()

    @property
    def current_turn(self) -> Turn:
        return self.turns[self.current_turn_index]

    @property
    def current_roll(self) -> DieRoll:
        return self.current_turn.rolls[self.current_roll_index]

    def is_finished(self) -> bool:
        return self.current_turn_index >= len(self.turns)

    def _skip_empty(self) -> None:
        # Move forward until the cursor points at a roll with new values
        while not self.is_finished():
            rolls = self.current_turn.rolls
            while self.current_roll_index < len(rolls) and not rolls[self.current_roll_index].roll:
                self.current_roll_index += 1
            if self.current_roll_index < len(rolls):
                return
            self.current_turn_index += 1
            self.current_roll_index = 0
            self.current_die_index = 0

    def next_die_throw(self) -> int:
        if self.is_finished():
            return self.fallback.next_die_throw()

        value = self.current_roll.roll[self.current_die_index]
        self.current_die_index += 1
        if self.current_die_index >= len(self.current_roll.roll):
            self.current_die_index = 0
            self.current_roll_index += 1
            self._skip_empty()
        return value
