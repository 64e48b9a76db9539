"""Game log for Yahtzee — records all rolls and scores for post-game replay.

The log subscribes to a game's update notifications and works out from the
game's state what happened: a non-zero ``round_in_turn`` means a roll, a
reset to zero means the previous player scored a group.
"""
from __future__ import annotations

from dataclasses import dataclass

from game_engine import ScoreGroup


@dataclass
class LogEntry:
    """A single logged game event."""
    turn: int                                   # 1-13, per player
    player_index: int
    event_type: str                             # "roll", "score"
    dice_values: tuple[int, ...]
    group: ScoreGroup | None = None
    score: int | None = None
    roll_number: int = 0                        # 1-3 for rolls


class GameLog:
    """Accumulates LogEntry records during a game."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []
        self._game = None
        self._last_dice: tuple[int, ...] = ()
        self._last_player_index = 0
        self._last_scores: dict = {}

    def attach(self, game) -> None:
        """Start recording ``game``'s rolls and scores."""
        self.detach()
        self._game = game
        game.add_update_listener(self._on_game_updated)

    def detach(self) -> None:
        if self._game is not None:
            self._game.remove_update_listener(self._on_game_updated)
            self._game = None

    def _on_game_updated(self, game) -> None:
        if game.round_in_turn > 0:
            index = game.current_player_index
            sheet = game.player_game_state[game.players[index]]
            self._last_scores = sheet.scores
            self.log_roll(turn=self._turn_number(self._last_scores),
                          player_index=index,
                          roll_number=game.round_in_turn,
                          dice_values=list(game.dice))
            self._last_dice = tuple(game.dice)
            self._last_player_index = index
            return

        # Scoring moved the turn on; the player who rolled last has scored
        index = self._last_player_index
        sheet = game.player_game_state[game.players[index]]
        for group, score in sheet.scores.items():
            if score is not None and self._last_scores.get(group) is None:
                self.log_score(turn=self._turn_number(self._last_scores), player_index=index,
                               group=group, score=score, dice_values=list(self._last_dice))
                break
        self._last_scores = {}

    @staticmethod
    def _turn_number(scores) -> int:
        return sum(score is not None for score in scores.values()) + 1

    def log_roll(self, turn: int, player_index: int, roll_number: int, dice_values: list[int]) -> None:
        """Record a dice roll."""
        self.entries.append(LogEntry(
            turn=turn,
            player_index=player_index,
            event_type="roll",
            dice_values=tuple(dice_values),
            roll_number=roll_number,
        ))

    def log_score(self, turn: int, player_index: int, group: ScoreGroup, score: int, dice_values: list[int]) -> None:
        """Record a scoring decision."""
        self.entries.append(LogEntry(
            turn=turn,
            player_index=player_index,
            event_type="score",
            dice_values=tuple(dice_values),
            group=group,
            score=score,
        ))

    def get_turn_entries(self, turn: int, player_index: int = 0) -> list[LogEntry]:
        """Return all entries for a specific turn and player."""
        return [e for e in self.entries
                if e.turn == turn and e.player_index == player_index]

    def get_score_entries(self, player_index: int = 0) -> list[LogEntry]:
        """Return only scoring entries for a player."""
        return [e for e in self.entries
                if e.event_type == "score" and e.player_index == player_index]

    def format_turns(self, names: list[str]) -> list[str]:
        """One human readable line per entry."""
        lines = []
        for e in self.entries:
            dice = " ".join(map(str, e.dice_values))
            name = names[e.player_index]
            if e.event_type == "roll":
                lines.append(f"{name} turn {e.turn} roll {e.roll_number}: {dice}")
            else:
                lines.append(f"{name} turn {e.turn} scores {e.score} in {e.group.label} ({dice})")
        return lines

    def clear(self) -> None:
        """Remove all entries."""
        self.entries = []
