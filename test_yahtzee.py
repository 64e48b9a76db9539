"""
Command-line Test Suite

Sections:
    1. Argument parsing
    2. Player construction
    3. Running games — single game output, multi-game summary, settings
"""
import json
import random

import pytest

from ai import GreedyStrategy, RandomStrategy
from game_engine import ScoreGroup
from yahtzee import _make_strategy, format_score_sheet, main, make_players, parse_args, play_game

# ── 1. Argument parsing ──────────────────────────────────────────────────────


def test_defaults():
    args = parse_args([])
    assert args.players is None
    assert args.games == 1
    assert args.seed is None
    assert args.turns is False


def test_players_and_names():
    args = parse_args(["--players", "greedy", "random", "--names", "Ann", "Bob", "--seed", "4"])
    assert args.players == ["greedy", "random"]
    assert args.names == ["Ann", "Bob"]
    assert args.seed == 4


def test_human_is_not_a_choice():
    with pytest.raises(SystemExit):
        parse_args(["--players", "human"])


# ── 2. Player construction ───────────────────────────────────────────────────


def test_make_strategy():
    assert isinstance(_make_strategy("greedy"), GreedyStrategy)
    assert isinstance(_make_strategy("random"), RandomStrategy)


def test_make_strategy_rejects_unknown():
    with pytest.raises(ValueError):
        _make_strategy("human")


def test_make_players_default_names():
    players = make_players(["greedy", "random"])
    assert [p.name for p in players] == ["Greedy 1", "Random 2"]
    assert not any(p.is_human for p in players)


def test_make_players_name_count_must_match():
    with pytest.raises(ValueError):
        make_players(["greedy", "random"], ["Only one"])


def test_play_game_is_reproducible():
    def totals(seed):
        players = make_players(["greedy", "random"], rng=random.Random(seed))
        game = play_game(players, seed=seed)
        return [game.player_game_state[p].total_score for p in game.players]

    assert totals(21) == totals(21)


def test_format_score_sheet_lists_every_group():
    game = play_game(make_players(["greedy"]), seed=2)
    text = format_score_sheet(game)
    for group in ScoreGroup:
        assert group.label in text
    assert "Upper total" in text
    assert str(game.current_player_game_state.total_score) in text.splitlines()[-1]


# ── 3. Running games ─────────────────────────────────────────────────────────


def test_main_single_game(capsys, tmp_path):
    code = main(["--players", "greedy", "greedy", "--names", "Ann", "Bob", "--seed", "1",
                 "--settings", str(tmp_path / "none.json")])
    out = capsys.readouterr().out
    assert code == 0
    assert "Ann" in out and "Bob" in out
    assert "Winner:" in out


def test_main_prints_turns(capsys, tmp_path):
    main(["--players", "random", "--seed", "3", "--turns",
          "--settings", str(tmp_path / "none.json")])
    out = capsys.readouterr().out
    assert "turn 1 roll 1:" in out
    assert "turn 13 scores" in out


def test_main_multiple_games(capsys, tmp_path):
    code = main(["--players", "greedy", "random", "--games", "5", "--seed", "0",
                 "--settings", str(tmp_path / "none.json")])
    out = capsys.readouterr().out
    assert code == 0
    assert "5 games" in out
    assert out.count("avg=") == 2


def test_main_reads_players_from_settings(capsys, tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"players": ["random", "random", "greedy"],
                                "names": ["X", "Y", "Z"], "seed": 8}))
    main(["--settings", str(path)])
    out = capsys.readouterr().out
    header = out.splitlines()[0]
    assert "X" in header and "Y" in header and "Z" in header


def test_main_rejects_human_in_settings(capsys, tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"players": ["human", "greedy"]}))
    assert main(["--settings", str(path)]) == 2
    assert "human" in capsys.readouterr().err
