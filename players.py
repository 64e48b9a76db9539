"""Players taking part in a game.

Players compare by identity: two players called "Alice" are two different
seats at the table.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ai import GreedyStrategy, YahtzeeStrategy, play_turn

if TYPE_CHECKING:
    from yahtzee_game import YahtzeeGame


class Player:
    """A seat in the game. Subclasses say whether a person or the computer plays it."""

    is_human = True

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f'{type(self).__name__}("{self.name}")'


class HumanPlayer(Player):
    """Turns are driven by roll/score commands from the user interface."""


class ComputerPlayer(Player):
    """Plays its own turns by asking a strategy for every decision."""

    is_human = False

    def __init__(self, name: str, strategy: YahtzeeStrategy | None = None) -> None:
        super().__init__(name)
        self.strategy = strategy if strategy is not None else GreedyStrategy()

    def play_full_turn(self, game: YahtzeeGame) -> None:
        """Roll, keep and finally score one group for the current turn."""
        play_turn(game, self.strategy)
