"""
Yahtzee AI — Strategy interface, turn loop, and computer player strategies.

Contains:
- Action types (RollAction, ScoreAction)
- YahtzeeStrategy abstract base class
- play_turn() turn loop used by ComputerPlayer
- RandomStrategy, GreedyStrategy

Strategies only need to produce legal moves; they read the game through its
public properties (dice, round_in_turn, current_player_game_state).
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple, Union

from game_engine import ScoreGroup, calculate_score

if TYPE_CHECKING:
    from yahtzee_game import YahtzeeGame


# ── Action Types ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RollAction:
    """Keep some dice (by face value) and re-roll the rest."""
    keep: Tuple[int, ...]
    reason: str = ""


@dataclass(frozen=True)
class ScoreAction:
    """Lock in a score for a group."""
    group: ScoreGroup
    reason: str = ""


# ── Strategy Interface ──────────────────────────────────────────────────────

class YahtzeeStrategy(ABC):
    """Abstract base class for Yahtzee AI strategies."""

    @abstractmethod
    def choose_action(self, game: YahtzeeGame) -> Union[RollAction, ScoreAction]:
        """Given the game (after at least 1 roll), decide: roll again or score.

        Args:
            game: Game whose current player is the one deciding, round_in_turn >= 1

        Returns:
            RollAction to keep dice and re-roll, or ScoreAction to lock in a group
        """
        ...


# ── Turn Loop ───────────────────────────────────────────────────────────────

def play_turn(game: YahtzeeGame, strategy: YahtzeeStrategy) -> None:
    """Play one turn: mandatory first roll, then strategy decisions until scoring.

    Args:
        game: Game at the start of the current player's turn (round_in_turn == 0)
        strategy: The AI strategy to use for decisions
    """
    game.roll_dice()
    sheet = game.current_player_game_state

    while True:
        action = strategy.choose_action(game)

        if isinstance(action, ScoreAction):
            sheet.apply_dice_to_group(action.group)
            return

        if not game.can_roll():
            # Strategy asked for a fourth roll; score the first open group instead.
            sheet.apply_dice_to_group(sheet.open_groups()[0])
            return

        game.roll_dice(action.keep)


def _scores(game: YahtzeeGame) -> dict[ScoreGroup, int]:
    """Score of the current dice for every open group."""
    sheet = game.current_player_game_state
    dice = game.dice
    return {group: calculate_score(group, dice) for group in sheet.open_groups()}


# ── RandomStrategy ──────────────────────────────────────────────────────────

class RandomStrategy(YahtzeeStrategy):
    """Baseline strategy: random keeps, random group selection.

    50% chance to roll again (if rolls remain), random subset of dice kept,
    random open group chosen when scoring.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def choose_action(self, game: YahtzeeGame) -> Union[RollAction, ScoreAction]:
        if game.can_roll() and self.rng.random() < 0.5:
            keep = tuple(v for v in game.dice if self.rng.random() < 0.5)
            return RollAction(keep=keep, reason="Feeling lucky — random keep and re-roll")

        group = self.rng.choice(game.current_player_game_state.open_groups())
        return ScoreAction(group=group, reason=f"Randomly picking {group.label}")


# ── GreedyStrategy ─────────────────────────────────────────────────────────

# Thresholds for "good enough" scores to take immediately
_GOOD_SCORE_THRESHOLDS = {
    ScoreGroup.YAHTZEE: 50,
    ScoreGroup.LARGE_STRAIGHT: 40,
    ScoreGroup.SMALL_STRAIGHT: 30,
    ScoreGroup.FULL_HOUSE: 25,
}

# Least valuable first: what to give up when nothing scores
_WASTE_ORDER = [
    ScoreGroup.YAHTZEE,
    ScoreGroup.LARGE_STRAIGHT,
    ScoreGroup.FULL_HOUSE,
    ScoreGroup.SMALL_STRAIGHT,
    ScoreGroup.ONES,
    ScoreGroup.TWOS,
    ScoreGroup.THREES,
    ScoreGroup.FOUR_OF_A_KIND,
    ScoreGroup.THREE_OF_A_KIND,
    ScoreGroup.FOURS,
    ScoreGroup.FIVES,
    ScoreGroup.SIXES,
    ScoreGroup.CHANCE,
]


class GreedyStrategy(YahtzeeStrategy):
    """Rule-based strategy that takes good scores and keeps promising dice.

    Decision logic:
    - Takes any "good enough" score immediately (Yahtzee, straights, full house)
    - For upper section, takes scores >= 3x face value
    - For n-of-a-kind, takes scores >= 20
    - When re-rolling: keeps partial straights or the most frequent value
    """

    def choose_action(self, game: YahtzeeGame) -> Union[RollAction, ScoreAction]:
        scores = _scores(game)
        if not game.can_roll():
            return self._best_score(scores)

        good_action = self._check_good_scores(scores)
        if good_action is not None:
            return good_action

        keep, reason = self._choose_keep(game.dice)
        return RollAction(keep=keep, reason=reason)

    def _check_good_scores(self, scores):
        """Return a ScoreAction if an open group is worth taking right now."""
        for group, threshold in _GOOD_SCORE_THRESHOLDS.items():
            if scores.get(group, 0) >= threshold:
                return ScoreAction(
                    group=group,
                    reason=f"Taking {group.label} for {scores[group]} — that's a great score!")

        for group, score in scores.items():
            if group.is_upper and score >= group.face * 3:
                return ScoreAction(
                    group=group,
                    reason=f"Scoring {group.label} for {score} — on track for upper bonus")

        for group in (ScoreGroup.FOUR_OF_A_KIND, ScoreGroup.THREE_OF_A_KIND):
            if scores.get(group, 0) >= 20:
                return ScoreAction(group=group, reason=f"Taking {group.label} for {scores[group]}")

        return None

    def _choose_keep(self, dice):
        """Decide which face values to keep when re-rolling.

        Returns:
            (keep_values, reason) tuple
        """
        values = list(dice)
        value_set = set(values)

        for straight in ({1, 2, 3, 4}, {2, 3, 4, 5}, {3, 4, 5, 6}):
            overlap = straight & value_set
            if len(overlap) >= 3:
                keep = tuple(sorted(overlap))
                return keep, f"Keeping {list(keep)} — going for a straight"

        most_common_val = Counter(values).most_common(1)[0][0]
        keep = tuple(v for v in values if v == most_common_val)
        return keep, f"Keeping the {most_common_val}s — going for multiple of a kind"

    def _best_score(self, scores):
        """Pick the best open group once the rolls are used up."""
        best_group = None
        best_score = -1
        for group, score in scores.items():
            weighted = score
            # Nudge upper groups that keep the bonus in reach
            if group.is_upper and score >= group.face * 3:
                weighted += 5
            if weighted > best_score:
                best_score = weighted
                best_group = group

        if best_score == 0:
            return self._waste_group(list(scores))

        return ScoreAction(
            group=best_group,
            reason=f"Out of rolls — best available is {best_group.label} for {scores[best_group]}")

    def _waste_group(self, available):
        """When forced to score 0, pick the least valuable group to waste."""
        for group in _WASTE_ORDER:
            if group in available:
                return ScoreAction(group=group, reason=f"Nothing scores — sacrificing {group.label}")
        return ScoreAction(group=available[0], reason=f"Nothing scores — sacrificing {available[0].label}")
