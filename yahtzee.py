#!/usr/bin/env python3
"""
Yahtzee — play computer-only games from the command line.

Usage:
    python yahtzee.py                                   # Players from ~/.yahtzee_settings.json
    python yahtzee.py --players greedy random --seed 7  # One reproducible game
    python yahtzee.py --players greedy greedy --turns   # Print every roll and score
    python yahtzee.py --games 200                       # Average/min/max per seat
"""
import argparse
import logging
import random
import statistics
import sys

from ai import GreedyStrategy, RandomStrategy
from dice_generator import RandomGenerator
from game_engine import ScoreGroup
from game_log import GameLog
from players import ComputerPlayer
from settings import LOG_LEVELS, load_settings
from yahtzee_game import YahtzeeGame

logger = logging.getLogger(__name__)

STRATEGY_TOKENS = ["random", "greedy"]


def _make_strategy(token, rng=None):
    """Create a strategy instance from a CLI token.

    Raises:
        ValueError: for unknown tokens (including "human": games here have
                    nobody to type the moves)
    """
    if token == "random":
        return RandomStrategy(rng)
    elif token == "greedy":
        return GreedyStrategy()
    raise ValueError(f"Unknown player type {token!r} (choose from {', '.join(STRATEGY_TOKENS)})")


def make_players(tokens, names=None, rng=None):
    """Build ComputerPlayers from strategy tokens and optional names."""
    names = list(names or [])
    if names and len(names) != len(tokens):
        raise ValueError(f"Got {len(names)} names for {len(tokens)} players")
    players = []
    for i, token in enumerate(tokens):
        name = names[i] if names else f"{token.capitalize()} {i + 1}"
        players.append(ComputerPlayer(name, _make_strategy(token, rng)))
    return players


def play_game(players, seed=None, game_log=None):
    """Play one complete game between computer players and return it."""
    game = YahtzeeGame(players, generator=RandomGenerator(seed))
    if game_log is not None:
        game_log.attach(game)
    game.play_computer_turns()
    if game_log is not None:
        game_log.detach()
    return game


def format_score_sheet(game):
    """Render every player's sheet as a plain text table."""
    players = game.players
    width = max(14, *(len(p.name) for p in players))
    rows = [f"{'':16s}" + "".join(f"{p.name:>{width}s}" for p in players)]

    def row(label, values):
        rows.append(f"{label:16s}" + "".join(f"{'-' if v is None else v:>{width}}" for v in values))

    sheets = [game.player_game_state[p] for p in players]
    for group in ScoreGroup:
        if group is ScoreGroup.THREE_OF_A_KIND:
            row("Upper subtotal", [s.upper_sub_total for s in sheets])
            row("Upper total", [s.upper_total for s in sheets])
        row(group.label, [s.get_group_score(group) for s in sheets])
    row("Lower total", [s.lower_total for s in sheets])
    row("Total", [s.total_score for s in sheets])
    return "\n".join(rows)


def parse_args(argv=None):
    """Parse command-line arguments.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.

    Returns:
        Parsed argparse.Namespace.
    """
    parser = argparse.ArgumentParser(description="Yahtzee — computer players")
    parser.add_argument("--players", nargs="+", choices=STRATEGY_TOKENS, metavar="TYPE",
                        help="Player types in seat order (random, greedy)")
    parser.add_argument("--names", nargs="+", metavar="NAME",
                        help="Custom player names (must match --players count)")
    parser.add_argument("--games", type=int, default=1,
                        help="Number of games to play (default: 1)")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible games")
    parser.add_argument("--turns", action="store_true",
                        help="Print every roll and score (single game only)")
    parser.add_argument("--log-level", choices=LOG_LEVELS,
                        help="Logging level (default: from settings)")
    parser.add_argument("--settings", metavar="PATH", help="Settings file to read")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings = load_settings(args.settings)

    logging.basicConfig(level=args.log_level or settings["log_level"],
                        format="%(levelname)s %(name)s: %(message)s")

    tokens = args.players or settings["players"]
    names = args.names or settings["names"]
    seed = args.seed if args.seed is not None else settings["seed"]
    rng = random.Random(seed)

    try:
        players = make_players(tokens, names, rng)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.games <= 1:
        game_log = GameLog() if args.turns else None
        game = play_game(players, seed=seed, game_log=game_log)
        if game_log is not None:
            print("\n".join(game_log.format_turns([p.name for p in players])))
            print()
        print(format_score_sheet(game))
        winners = game.winners()
        print()
        print("Winner: " + " and ".join(p.name for p in winners))
        return 0

    totals = {i: [] for i in range(len(players))}
    for n in range(args.games):
        game_seed = None if seed is None else seed + n
        game = play_game(make_players(tokens, names, rng), seed=game_seed)
        for i, player in enumerate(game.players):
            totals[i].append(game.player_game_state[player].total_score)
    logger.info("Played %d games", args.games)

    print(f"Yahtzee — {args.games} games")
    print("=" * 72)
    for i, player in enumerate(players):
        scores = totals[i]
        stdev = statistics.stdev(scores) if len(scores) >= 2 else 0.0
        print(f"  {player.name:20s}  avg={statistics.mean(scores):6.1f}  stdev={stdev:5.1f}  "
              f"min={min(scores):4d}  max={max(scores):4d}")
    print("=" * 72)
    return 0


if __name__ == "__main__":
    sys.exit(main())
