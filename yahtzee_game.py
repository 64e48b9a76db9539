"""
YahtzeeGame — the game session.

Owns the players, the dice, the roll counter and one score sheet per player.
All changes go through ``roll_dice`` and ``ScoreSheet.apply_dice_to_group``;
after each one the update listeners are called, and once every sheet is full
the finish listeners are called (after the update listeners, in the same call).

Listeners are plain callables taking the game. The session is single
threaded: callers that share it between threads must serialize access.
"""
from __future__ import annotations

import logging
from collections import Counter
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Sequence

from dice_generator import Generator, RandomGenerator
from game_engine import (
    NUM_DICE,
    IllegalStateError,
    InvalidMoveError,
    ScoreGroup,
    ScoreSheet,
    calculate_score,
)
from players import ComputerPlayer, HumanPlayer, Player

logger = logging.getLogger(__name__)

MAX_ROLLS = 3

GameListener = Callable[["YahtzeeGame"], None]


class YahtzeeGame:
    """A game of Yahtzee for a fixed list of players."""

    def __init__(self, players: Sequence[Player] | None = None,
                 generator: Generator | None = None) -> None:
        """Create a game.

        Args:
            players: Players in turn order. The list is copied, so later changes
                     to the caller's list don't affect the game. Defaults to two
                     human players.
            generator: Source of die throws (RandomGenerator by default).
        """
        if players is None:
            players = [HumanPlayer("Player 1"), HumanPlayer("Player 2")]
        self._players = tuple(players)
        if not self._players:
            raise ValueError("A game needs at least one player")

        self.generator = generator if generator is not None else RandomGenerator()

        self._current_player_index = 0
        self._dice: list[int | None] = [None] * NUM_DICE
        self._round_in_turn = 0
        self._finished = False

        self._update_listeners: list[GameListener] = []
        self._finish_listeners: list[GameListener] = []

        self._sheets = {player: ScoreSheet(self._apply_dice_to_group) for player in self._players}

    def __repr__(self) -> str:
        return (f"YahtzeeGame(players={list(self._players)!r}, "
                f"current={self.current_player!r}, round_in_turn={self._round_in_turn})")

    # ── Queryable state ───────────────────────────────────────────────────

    @property
    def players(self) -> tuple[Player, ...]:
        return self._players

    @property
    def current_player_index(self) -> int:
        return self._current_player_index

    @property
    def current_player(self) -> Player:
        return self._players[self._current_player_index]

    @property
    def dice(self) -> tuple[int | None, ...]:
        """Snapshot of the five dice; all None before the first roll of a turn."""
        return tuple(self._dice)

    @property
    def round_in_turn(self) -> int:
        """How many times the dice were rolled this turn (0-3)."""
        return self._round_in_turn

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def player_game_state(self) -> Mapping[Player, ScoreSheet]:
        """Read-only mapping from each player to their score sheet."""
        return MappingProxyType(self._sheets)

    @property
    def current_player_game_state(self) -> ScoreSheet:
        return self._sheets[self.current_player]

    def can_roll(self) -> bool:
        """Whether the current player may roll (again) right now."""
        return not self._finished and self._round_in_turn < MAX_ROLLS

    def can_score(self, group: ScoreGroup) -> bool:
        """Whether the current player may score the dice in ``group``."""
        if self._finished or self._round_in_turn == 0:
            return False
        return not self.current_player_game_state.is_filled(group)

    # ── Listeners ─────────────────────────────────────────────────────────

    def add_update_listener(self, listener: GameListener) -> None:
        if listener not in self._update_listeners:
            self._update_listeners.append(listener)

    def remove_update_listener(self, listener: GameListener) -> None:
        if listener in self._update_listeners:
            self._update_listeners.remove(listener)

    def add_finish_listener(self, listener: GameListener) -> None:
        if listener not in self._finish_listeners:
            self._finish_listeners.append(listener)

    def remove_finish_listener(self, listener: GameListener) -> None:
        if listener in self._finish_listeners:
            self._finish_listeners.remove(listener)

    def _fire_game_updated(self) -> None:
        # Copy so listeners may unsubscribe while being called
        for listener in list(self._update_listeners):
            listener(self)

    def _fire_game_finished(self) -> None:
        for listener in list(self._finish_listeners):
            listener(self)

    # ── Commands ──────────────────────────────────────────────────────────

    def roll_dice(self, keep: Iterable[int] = ()) -> None:
        """Keep the given face values and roll the remaining dice.

        Args:
            keep: Face values to keep from the current dice (a value may be
                  kept as many times as it appears). Empty for the first roll.

        Raises:
            IllegalStateError: the game is over or the dice were rolled 3 times
            InvalidMoveError: keeping dice before the first roll, or keeping a
                              value that isn't among the dice
        """
        keep = list(keep)
        if self._finished:
            raise IllegalStateError("The game is finished, no more rolls")
        if self._round_in_turn >= MAX_ROLLS:
            raise IllegalStateError(f"No more rolls this turn ({MAX_ROLLS} already used)")
        if self._round_in_turn == 0 and keep:
            raise InvalidMoveError(f"Can't keep {keep} before the dice have been rolled")
        if len(keep) > NUM_DICE:
            raise InvalidMoveError(f"Can't keep {len(keep)} dice, there are only {NUM_DICE}")

        available = Counter(self._dice)
        for value in keep:
            # 6.0 and True hash like 6 and 1 but are not die faces
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidMoveError(f"Kept die {value!r} is not a face value")
            if available[value] == 0:
                raise InvalidMoveError(f"Die {value} is not present in {self.dice} to keep")
            available[value] -= 1

        new_dice = keep + [self.generator.next_die_throw() for _ in range(NUM_DICE - len(keep))]
        for value in new_dice:
            if not 1 <= value <= 6:
                raise ValueError(f"Generator {self.generator!r} produced die value {value}")

        self._dice = sorted(new_dice)
        self._round_in_turn += 1
        logger.debug("%s roll %d: kept %s, dice now %s",
                     self.current_player.name, self._round_in_turn, keep, self._dice)
        self._fire_game_updated()

    def _apply_dice_to_group(self, sheet: ScoreSheet, group: ScoreGroup) -> None:
        """Score the dice for ``sheet``'s player; wired into every ScoreSheet."""
        if sheet is not self.current_player_game_state:
            raise IllegalStateError("It is not this player's turn")
        if self._round_in_turn == 0:
            raise IllegalStateError("The dice must be rolled before scoring")
        if sheet.is_filled(group):
            raise IllegalStateError(f"{group.label} has already been scored")

        player = self.current_player
        score = calculate_score(group, self._dice)
        sheet._record_score(group, score)
        logger.debug("%s scored %d in %s with %s", player.name, score, group.label, self._dice)

        self._dice = [None] * NUM_DICE
        self._round_in_turn = 0
        self._current_player_index = (self._current_player_index + 1) % len(self._players)

        game_over = all(s.is_complete() for s in self._sheets.values())
        try:
            self._fire_game_updated()
        finally:
            # A full table ends the game even if an update listener raised
            if game_over:
                self._finished = True

        if game_over:
            logger.info("Game finished: %s", ", ".join(
                f"{p.name}={self._sheets[p].total_score}" for p in self._players))
            self._fire_game_finished()

    def play_computer_turns(self) -> None:
        """Let computer players take their turns until a human is up or the game ends.

        Raises:
            IllegalStateError: a computer player's turn ended without scoring
        """
        while isinstance(self.current_player, ComputerPlayer) and not self._finished:
            player = self.current_player
            sheet = self._sheets[player]
            filled_before = len(ScoreGroup) - len(sheet.open_groups())

            player.play_full_turn(self)

            filled_after = len(ScoreGroup) - len(sheet.open_groups())
            if filled_after <= filled_before:
                raise IllegalStateError(f"{player!r} ended its turn without scoring a group")

    def winners(self) -> list[Player]:
        """Players with the highest total score (more than one on a tie)."""
        best = max(sheet.total_score for sheet in self._sheets.values())
        return [p for p in self._players if self._sheets[p].total_score == best]
