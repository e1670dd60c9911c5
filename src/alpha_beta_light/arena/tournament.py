"""
Repeated battles between algorithms with rotating seat assignments.
"""

import itertools
import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from tqdm import tqdm

from alpha_beta_light.arena.battle import AlgorithmSpec, GameAlgorithmBattle
from alpha_beta_light.engine.time_limit import DEFAULT_POLL_INTERVAL_MS
from alpha_beta_light.errors import ConfigurationError

logger = logging.getLogger(__name__)


class PermutationScheduler:
    """
    Yields seat orders so that all k! orders of the participants are used
    once before any order repeats. The cycle then starts over.
    """

    def __init__(self, participants: Sequence):
        self.participants = tuple(participants)
        self.all_orders: List[Tuple] = list(itertools.permutations(self.participants))
        self._position = 0

    def next_order(self) -> Tuple:
        order = self.all_orders[self._position]
        self._position = (self._position + 1) % len(self.all_orders)
        return order

    def __iter__(self) -> Iterator[Tuple]:
        while True:
            yield self.next_order()

    def __len__(self):
        return len(self.all_orders)


class Tournament:
    """
    Lets the given algorithms play a game against each other many times.

    Every participant starts on the scoreboard with zero wins, so even an
    algorithm that never wins shows up in the results.
    """

    def __init__(self, game, algorithms: Dict[object, AlgorithmSpec],
                 poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
                 show_progress: bool = True):
        """
        Args:
            game: Initial position; each battle plays on a fresh copy
            algorithms: Seat (player) -> participating algorithm
            poll_interval_ms: Polling interval for time-limited algorithms
            show_progress: Show a tqdm progress bar during battle_phase()
        """
        if game is None or algorithms is None or len(algorithms) < 2:
            raise ConfigurationError("A tournament needs a game and at least two algorithms")
        self.game = game
        self.algorithms = dict(algorithms)
        self.seats = list(self.algorithms.keys())
        self.poll_interval_ms = poll_interval_ms
        self.show_progress = show_progress

        self.scoreboard: Dict[AlgorithmSpec, int] = {spec: 0 for spec in self.algorithms.values()}
        self.scheduler = PermutationScheduler(list(self.algorithms.values()))
        self.orders_played: List[Tuple[AlgorithmSpec, ...]] = []

    def battle_phase(self, number_of_games: int):
        """
        Play `number_of_games` games and update the scoreboard.

        Raises:
            ConfigurationError: number_of_games < 1
        """
        if number_of_games < 1:
            raise ConfigurationError(
                f"The number of games must be at least 1, got {number_of_games}"
            )

        games = range(number_of_games)
        if self.show_progress:
            games = tqdm(games, desc="Battles", ncols=80)
        for _ in games:
            order = self.scheduler.next_order()
            self.orders_played.append(order)
            play_order = dict(zip(self.seats, order))

            finished = GameAlgorithmBattle(
                self.game.copy(), play_order, self.poll_interval_ms
            ).battle()
            winner = self.winning_seat(finished)
            self.scoreboard[play_order[winner]] += 1

        self.log_scoreboard()

    def winning_seat(self, finished_game):
        """Seat with the highest utility; the later seat wins ties."""
        winner = None
        best = None
        for seat in self.seats:
            utility = finished_game.player_utility(seat)
            if winner is None or best <= utility:
                winner = seat
                best = utility
        return winner

    def standings(self) -> List[Tuple[AlgorithmSpec, int]]:
        """Scoreboard entries in placing order (stable for equal win counts)."""
        return sorted(self.scoreboard.items(), key=lambda item: item[1], reverse=True)

    def winner(self) -> Optional[AlgorithmSpec]:
        return self.standings()[0][0]

    def log_scoreboard(self):
        for place, (spec, wins) in enumerate(self.standings(), start=1):
            logger.info("Place %d: %s (Wins: %d)", place, spec.name, wins)
