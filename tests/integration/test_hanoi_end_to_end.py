"""
End-to-end: solve Towers of Hanoi by repeated alpha-beta searches.

The puzzle is searched to full depth without a heuristic; the exact utility
at terminal positions makes the optimal solution the only best line, so the
search with and without the transposition table must play the same moves.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from alpha_beta_light.config import SearchSettings
from alpha_beta_light.engine import AlphaBetaEngine, MemorySavingMode
from alpha_beta_light.game import Hanoi


def solve(num_disks, settings):
    """Play best moves until the game ends; returns (final game, moves)."""
    game = Hanoi(num_disks)
    sequence = []
    while not game.terminal():
        move = AlphaBetaEngine(game, settings).best_move()
        sequence.append(move)
        game.apply(move)
    return game, sequence


class TestHanoiEndToEnd:
    """Alpha-beta solves Hanoi optimally."""

    @pytest.mark.parametrize("num_disks", [1, 2, 3])
    def test_optimal_move_count(self, num_disks):
        game, sequence = solve(num_disks, SearchSettings())

        assert game.is_solved()
        assert len(sequence) == Hanoi.optimal_move_count(num_disks)

    @pytest.mark.parametrize("num_disks", [2, 3])
    def test_same_sequence_with_transposition_table(self, num_disks):
        _, plain = solve(num_disks, SearchSettings())
        _, memo = solve(num_disks, SearchSettings(use_transposition_table=True))

        assert memo == plain

    def test_root_score_is_optimal_move_count(self):
        result = AlphaBetaEngine(Hanoi(3)).search()

        assert result.score == -Hanoi.optimal_move_count(3)
        assert result.best_move == (0, 2)

    def test_looser_budget_still_finds_optimum(self):
        game = Hanoi(2, max_moves=5)
        result = AlphaBetaEngine(game, SearchSettings(use_transposition_table=True)).search()

        assert result.score == -3

    def test_memory_saving_mode_does_not_change_solution(self):
        _, plain = solve(3, SearchSettings())
        _, shared = solve(3, SearchSettings(
            memory_saving_mode=MemorySavingMode.SHARE_UNCHANGED.value
        ))

        assert shared == plain
