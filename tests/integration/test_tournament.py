"""
Tournament harness: battles, scoreboard and seat rotation.
"""

import itertools
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from alpha_beta_light.arena import AlgorithmSpec, GameAlgorithmBattle, PermutationScheduler, Tournament
from alpha_beta_light.config import SearchSettings
from alpha_beta_light.engine import AlphaBetaEngine, MTDf, SearchResult
from alpha_beta_light.errors import ConfigurationError, NoMoveFoundError
from alpha_beta_light.game import Nim, TicTacToe


class Resigner:
    """Algorithm that never finds a move."""

    name = "Resigner"

    def __init__(self, game, settings):
        self.game = game

    def search(self, cancel=None):
        return SearchResult(best_move=None, score=0.0, nodes_searched=0,
                            deepest_depth=0, time_ms=0)


class TestPermutationScheduler:
    """Every seat order is used once before any repeats."""

    @pytest.mark.parametrize("k", [2, 3, 4])
    def test_cycles_through_all_permutations(self, k):
        participants = list('abcd'[:k])
        scheduler = PermutationScheduler(participants)
        count = len(list(itertools.permutations(participants)))

        first_cycle = [scheduler.next_order() for _ in range(count)]
        second_cycle = [scheduler.next_order() for _ in range(count)]

        assert len(scheduler) == count
        assert len(set(first_cycle)) == count
        assert set(first_cycle) == set(itertools.permutations(participants))
        assert second_cycle == first_cycle

    def test_iteration(self):
        orders = PermutationScheduler([1, 2])
        assert list(itertools.islice(orders, 3)) == [(1, 2), (2, 1), (1, 2)]


class TestBattle:
    """Test a single battle."""

    def test_battle_plays_to_the_end(self):
        spec_x = AlgorithmSpec(AlphaBetaEngine, SearchSettings(depth_limit=2))
        spec_o = AlgorithmSpec(AlphaBetaEngine, SearchSettings(depth_limit=2), time_limit_ms=5000)
        battle = GameAlgorithmBattle(TicTacToe(), {'X': spec_x, 'O': spec_o})

        game = battle.battle()

        assert game.is_terminal()
        assert battle.moves_played == len(spec_x.times_per_run) + len(spec_o.times_per_run)
        assert spec_x.average_time_ms() >= 0.0
        assert spec_o.average_time_ms() >= 0.0

    def test_missing_move_propagates(self):
        battle = GameAlgorithmBattle(Nim((1, 1)), {
            0: AlgorithmSpec(Resigner),
            1: AlgorithmSpec(AlphaBetaEngine),
        })
        with pytest.raises(NoMoveFoundError):
            battle.battle()

    @pytest.mark.parametrize("time_limit_ms", [0, 200])
    def test_missing_move_is_logged(self, caplog, time_limit_ms):
        battle = GameAlgorithmBattle(Nim((1, 1)), {
            0: AlgorithmSpec(Resigner, time_limit_ms=time_limit_ms),
            1: AlgorithmSpec(AlphaBetaEngine),
        })
        with caplog.at_level(logging.ERROR, logger="alpha_beta_light.arena.battle"):
            with pytest.raises(NoMoveFoundError):
                battle.battle()

        assert any("Resigner" in record.getMessage() and record.levelno == logging.ERROR
                   for record in caplog.records)

    def test_spec_defaults(self):
        spec = AlgorithmSpec(MTDf)
        assert spec.name == "MTDf"
        assert spec.average_time_ms() is None
        with pytest.raises(ConfigurationError):
            AlgorithmSpec(MTDf, time_limit_ms=-1)


class TestTournament:
    """Test repeated battles."""

    def setup_method(self):
        self.alpha_beta = AlgorithmSpec(AlphaBetaEngine, SearchSettings(depth_limit=2))
        self.mtdf = AlgorithmSpec(MTDf, SearchSettings(depth_limit=2), time_limit_ms=5000)

    def test_win_count_matches_rounds(self):
        tournament = Tournament(TicTacToe(), {'X': self.alpha_beta, 'O': self.mtdf},
                                show_progress=False)
        tournament.battle_phase(4)

        assert sum(tournament.scoreboard.values()) == 4
        assert tournament.orders_played == [
            (self.alpha_beta, self.mtdf),
            (self.mtdf, self.alpha_beta),
            (self.alpha_beta, self.mtdf),
            (self.mtdf, self.alpha_beta),
        ]

    def test_perfect_players_split_wins(self):
        """The first mover wins this Nim position, so seats decide the result."""
        first = AlgorithmSpec(AlphaBetaEngine, name="first")
        second = AlgorithmSpec(AlphaBetaEngine, name="second")
        tournament = Tournament(Nim((1, 2, 4)), {0: first, 1: second}, show_progress=False)

        tournament.battle_phase(2)

        assert tournament.scoreboard == {first: 1, second: 1}

    def test_later_seat_wins_ties(self):
        tournament = Tournament(TicTacToe(), {'X': self.alpha_beta, 'O': self.mtdf},
                                show_progress=False)
        draw = TicTacToe.from_moves([0, 1, 2, 4, 3, 5, 7, 6, 8])

        assert tournament.winning_seat(draw) == 'O'
        assert tournament.winning_seat(TicTacToe.from_moves([0, 3, 1, 4, 2])) == 'X'

    def test_scoreboard_lists_every_participant(self):
        tournament = Tournament(TicTacToe(), {'X': self.alpha_beta, 'O': self.mtdf},
                                show_progress=False)
        assert tournament.scoreboard == {self.alpha_beta: 0, self.mtdf: 0}
        assert tournament.winner() in (self.alpha_beta, self.mtdf)

    def test_needs_two_participants(self):
        with pytest.raises(ConfigurationError):
            Tournament(TicTacToe(), {'X': self.alpha_beta})
        with pytest.raises(ConfigurationError):
            Tournament(None, None)

    def test_needs_at_least_one_game(self):
        tournament = Tournament(TicTacToe(), {'X': self.alpha_beta, 'O': self.mtdf},
                                show_progress=False)
        with pytest.raises(ConfigurationError):
            tournament.battle_phase(0)

    def test_games_start_from_fresh_copies(self):
        start = TicTacToe()
        tournament = Tournament(start, {'X': self.alpha_beta, 'O': self.mtdf},
                                show_progress=False)
        tournament.battle_phase(1)

        assert start == TicTacToe()
