"""
AI Strategy Test Suite

Tests:
    1. Legality — parametrized across all strategies: games complete without errors,
       strategies never make illegal moves
    2. Greedy decisions — which groups it takes and which dice it keeps
    3. play_turn — turn loop behaviour
    4. Players — identity, human/computer flags
"""
import random

import pytest

from ai import (
    GreedyStrategy, RandomStrategy, RollAction, ScoreAction, YahtzeeStrategy,
    play_turn,
)
from dice_generator import Generator, RandomGenerator
from game_engine import ScoreGroup
from players import ComputerPlayer, HumanPlayer, Player
from yahtzee_game import YahtzeeGame


# ── Helpers ─────────────────────────────────────────────────────────────────

def all_strategies():
    """Return instances of all available strategies for parametrized tests."""
    return [RandomStrategy(random.Random(42)), GreedyStrategy()]


def strategy_ids():
    """Return readable names for parametrize IDs."""
    return ["Random", "Greedy"]


class SequenceGenerator(Generator):
    """Throws the given values in order, then repeats the last one."""

    def __init__(self, *values):
        self.values = list(values)

    def next_die_throw(self):
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


def rolled_game(*dice, open_groups=None):
    """Single-player game whose first roll shows ``dice``.

    ``open_groups`` limits the sheet to those groups by filling every other
    group with 0 beforehand.
    """
    game = YahtzeeGame([HumanPlayer("Solo")], generator=SequenceGenerator(*dice))
    if open_groups is not None:
        sheet = game.current_player_game_state
        for group in ScoreGroup:
            if group not in open_groups:
                sheet._record_score(group, 0)
    game.roll_dice()
    return game


# ═══════════════════════════════════════════════════════════════════════════════
# 1. LEGALITY TESTS — parametrized across all strategies
# ═══════════════════════════════════════════════════════════════════════════════

class TestLegality:
    """Every strategy must produce legal moves that complete a full game."""

    @pytest.fixture(params=all_strategies(), ids=strategy_ids())
    def strategy(self, request):
        return request.param

    def test_completes_full_game(self, strategy):
        """Strategy plays 13 rounds and game ends properly."""
        game = YahtzeeGame([ComputerPlayer("Bot", strategy)], generator=RandomGenerator(seed=42))
        game.play_computer_turns()
        assert game.is_finished
        assert game.current_player_game_state.is_complete()

    def test_never_rolls_when_out_of_rolls(self, strategy):
        """Strategy never returns RollAction after the third roll."""
        game = YahtzeeGame([HumanPlayer("Watcher")], generator=RandomGenerator(seed=99))
        sheet = game.current_player_game_state

        for _ in range(13):
            game.roll_dice()
            while True:
                action = strategy.choose_action(game)
                if game.round_in_turn >= 3:
                    assert isinstance(action, ScoreAction), (
                        f"Strategy returned RollAction with round_in_turn={game.round_in_turn}"
                    )
                if isinstance(action, ScoreAction):
                    assert game.can_score(action.group), (
                        f"Strategy tried to score filled group {action.group}"
                    )
                    sheet.apply_dice_to_group(action.group)
                    break
                game.roll_dice(action.keep)

        assert game.is_finished

    @pytest.mark.parametrize("seed", range(5))
    def test_multiplayer_game_completes(self, strategy, seed):
        players = [ComputerPlayer("A", strategy), ComputerPlayer("B", GreedyStrategy())]
        game = YahtzeeGame(players, generator=RandomGenerator(seed=seed))
        game.play_computer_turns()
        assert game.is_finished
        for sheet in game.player_game_state.values():
            assert sheet.total_score == sheet.upper_total + sheet.lower_total


# ═══════════════════════════════════════════════════════════════════════════════
# 2. GREEDY DECISIONS
# ═══════════════════════════════════════════════════════════════════════════════

class TestGreedy:

    def test_takes_yahtzee_immediately(self):
        game = rolled_game(4, 4, 4, 4, 4)
        action = GreedyStrategy().choose_action(game)
        assert action == ScoreAction(ScoreGroup.YAHTZEE, action.reason)

    def test_takes_large_straight(self):
        game = rolled_game(2, 3, 4, 5, 6)
        assert GreedyStrategy().choose_action(game).group is ScoreGroup.LARGE_STRAIGHT

    def test_takes_upper_on_track_for_bonus(self):
        game = rolled_game(5, 5, 5, 1, 2)
        assert GreedyStrategy().choose_action(game).group is ScoreGroup.FIVES

    def test_keeps_partial_straight(self):
        game = rolled_game(1, 2, 3, 3, 6)
        action = GreedyStrategy().choose_action(game)
        assert isinstance(action, RollAction)
        assert action.keep == (1, 2, 3)

    def test_keeps_most_common_value(self):
        game = rolled_game(6, 6, 1, 1, 1, open_groups={ScoreGroup.SIXES, ScoreGroup.YAHTZEE})
        action = GreedyStrategy().choose_action(game)
        assert isinstance(action, RollAction)
        assert action.keep == (1, 1, 1)

    def test_keep_is_legal_for_the_game(self):
        game = rolled_game(1, 2, 3, 3, 6)
        action = GreedyStrategy().choose_action(game)
        game.roll_dice(action.keep)
        assert game.round_in_turn == 2

    def test_scores_best_group_when_out_of_rolls(self):
        game = rolled_game(1, 1, 2, 2, 3)
        game.roll_dice()
        game.roll_dice()
        # Sequence generator repeats the last value: 3 3 3 3 3 on later rolls
        action = GreedyStrategy().choose_action(game)
        assert action.group is ScoreGroup.YAHTZEE

    def test_wastes_least_valuable_group(self):
        open_groups = {ScoreGroup.YAHTZEE, ScoreGroup.SIXES}
        game = rolled_game(1, 2, 3, 3, 5, open_groups=open_groups)
        game.roll_dice([1, 2, 3, 3, 5])
        game.roll_dice([1, 2, 3, 3, 5])
        action = GreedyStrategy().choose_action(game)
        assert action.group is ScoreGroup.YAHTZEE
        assert "sacrificing" in action.reason


# ═══════════════════════════════════════════════════════════════════════════════
# 3. PLAY_TURN
# ═══════════════════════════════════════════════════════════════════════════════

class AlwaysRoll(YahtzeeStrategy):
    """Misbehaving strategy: asks for another roll forever."""

    def choose_action(self, game):
        return RollAction(keep=())


class TestPlayTurn:

    def test_turn_ends_with_one_group_scored(self):
        game = YahtzeeGame([HumanPlayer("A"), HumanPlayer("B")], generator=RandomGenerator(seed=3))
        sheet = game.current_player_game_state
        play_turn(game, GreedyStrategy())
        assert len(sheet.open_groups()) == 12
        assert game.current_player is game.players[1]

    def test_fourth_roll_request_scores_first_open_group(self):
        game = YahtzeeGame([HumanPlayer("A")], generator=RandomGenerator(seed=3))
        sheet = game.current_player_game_state
        play_turn(game, AlwaysRoll())
        assert sheet.is_filled(ScoreGroup.ONES)
        assert game.round_in_turn == 0

    def test_random_strategy_is_reproducible(self):
        def play(seed):
            game = YahtzeeGame([ComputerPlayer("R", RandomStrategy(random.Random(seed)))],
                               generator=RandomGenerator(seed=seed))
            game.play_computer_turns()
            return game.current_player_game_state.scores

        assert play(7) == play(7)


# ═══════════════════════════════════════════════════════════════════════════════
# 4. PLAYERS
# ═══════════════════════════════════════════════════════════════════════════════

class TestPlayers:

    def test_same_name_is_a_different_player(self):
        assert HumanPlayer("Ann") != HumanPlayer("Ann")

    def test_player_equals_itself(self):
        player = HumanPlayer("Ann")
        assert player == player
        assert {player: 1}[player] == 1

    def test_human_flag(self):
        assert HumanPlayer("Ann").is_human
        assert not ComputerPlayer("Bot").is_human
        assert isinstance(ComputerPlayer("Bot"), Player)

    def test_computer_defaults_to_greedy(self):
        assert isinstance(ComputerPlayer("Bot").strategy, GreedyStrategy)

    def test_repr(self):
        assert repr(HumanPlayer("Ann")) == 'HumanPlayer("Ann")'
        assert repr(ComputerPlayer("Bot")) == 'ComputerPlayer("Bot")'
