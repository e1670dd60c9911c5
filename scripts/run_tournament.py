#!/usr/bin/env python3
"""
Run a tournament between two search algorithms.

Example:
    python scripts/run_tournament.py --game connect4 --algo1 alphabeta --depth1 4 \
        --algo2 mtdf --depth2 6 --rounds 4 --time_limit_ms 2000
"""
import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from alpha_beta_light.arena import AlgorithmSpec, Tournament
from alpha_beta_light.config import ArenaSettings, SearchSettings, setup_logging
from alpha_beta_light.engine import AlphaBetaEngine, MTDf
from alpha_beta_light.game import ConnectFour, TicTacToe

GAMES = {
    'tictactoe': TicTacToe,
    'connect4': ConnectFour,
}

ALGORITHMS = {
    'alphabeta': AlphaBetaEngine,
    'mtdf': MTDf,
}


def build_spec(name, depth, arena_settings, use_tt):
    settings = SearchSettings(depth_limit=depth, use_transposition_table=use_tt)
    return AlgorithmSpec(
        ALGORITHMS[name],
        settings,
        time_limit_ms=arena_settings.time_limit_ms,
        name=f"{ALGORITHMS[name].name} (depth {depth})",
    )


def main():
    ap = argparse.ArgumentParser(description="Alpha-beta algorithm tournament")
    ap.add_argument('--game', choices=sorted(GAMES), default='connect4')
    ap.add_argument('--algo1', choices=sorted(ALGORITHMS), default='alphabeta')
    ap.add_argument('--depth1', type=int, default=4)
    ap.add_argument('--algo2', choices=sorted(ALGORITHMS), default='mtdf')
    ap.add_argument('--depth2', type=int, default=6)
    ap.add_argument('--use_tt', action='store_true',
                    help='Use the transposition table in plain alpha-beta')
    ap.add_argument('--rounds', type=int, default=None)
    ap.add_argument('--time_limit_ms', type=int, default=None)
    args = ap.parse_args()

    setup_logging()

    overrides = {}
    if args.rounds is not None:
        overrides['rounds'] = args.rounds
    if args.time_limit_ms is not None:
        overrides['time_limit_ms'] = args.time_limit_ms
    arena_settings = ArenaSettings.from_dict(overrides)

    game = GAMES[args.game]()
    seats = game.players()
    algorithms = {
        seats[0]: build_spec(args.algo1, args.depth1, arena_settings, args.use_tt),
        seats[1]: build_spec(args.algo2, args.depth2, arena_settings, args.use_tt),
    }

    print("=" * 70)
    print(f"TOURNAMENT: {algorithms[seats[0]].name} vs {algorithms[seats[1]].name}")
    print(f"Game={args.game} | Rounds={arena_settings.rounds} | "
          f"Time limit={arena_settings.time_limit_ms or 'none'} ms")
    print("=" * 70)

    tournament = Tournament(game, algorithms, arena_settings.poll_interval_ms)
    tournament.battle_phase(arena_settings.rounds)

    print("\n" + "=" * 70)
    print("RESULTS")
    print("=" * 70)
    for place, (spec, wins) in enumerate(tournament.standings(), start=1):
        average = spec.average_time_ms()
        average_text = f"{average:.1f} ms/move" if average is not None else "no moves"
        print(f"{place}. {spec.name}: {wins} wins | {average_text}")
    print(f"\n🏆 Winner: {tournament.winner().name}")


if __name__ == '__main__':
    main()
