"""
Single game between configured algorithms.

Each seat of the game is assigned an AlgorithmSpec. The battle asks the
AlgorithmSpec of the player to move for a fresh algorithm instance, lets it
pick a move (under a wall-clock budget when one is set) and applies the move
to the shared game until the game is over.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from alpha_beta_light.config import SearchSettings
from alpha_beta_light.engine.time_limit import DEFAULT_POLL_INTERVAL_MS, run_with_time_limit
from alpha_beta_light.errors import ConfigurationError, NoMoveFoundError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class AlgorithmSpec:
    """
    An algorithm class together with how to run it.

    Attributes:
        algorithm: Class taking (game, settings), e.g. AlphaBetaEngine or MTDf
        settings: Search settings passed to every instance
        time_limit_ms: Wall-clock budget per move (0 = unbounded)
        name: Display name (defaults to the algorithm's name)
        times_per_run: Elapsed nanoseconds of every move made so far
    """
    algorithm: type
    settings: SearchSettings = field(default_factory=SearchSettings)
    time_limit_ms: int = 0
    name: Optional[str] = None
    times_per_run: List[int] = field(default_factory=list)

    def __post_init__(self):
        if self.algorithm is None:
            raise ConfigurationError("algorithm must not be None")
        if self.time_limit_ms < 0:
            raise ConfigurationError(f"time_limit_ms must be >= 0, got {self.time_limit_ms}")
        if self.name is None:
            self.name = getattr(self.algorithm, 'name', self.algorithm.__name__)

    def instantiate(self, game):
        """New algorithm instance searching from `game`."""
        return self.algorithm(game, self.settings)

    def average_time_ms(self) -> Optional[float]:
        if not self.times_per_run:
            return None
        return float(np.mean(self.times_per_run)) / 1e6

    def __repr__(self):
        return (f"AlgorithmSpec({self.name}, depth_limit={self.settings.depth_limit}, "
                f"time_limit_ms={self.time_limit_ms})")


class GameAlgorithmBattle:
    """
    Plays one game to the end with one algorithm per seat.
    """

    def __init__(self, game, algorithms: Dict[object, AlgorithmSpec],
                 poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS):
        """
        Args:
            game: Game to play on (mutated in place)
            algorithms: Player -> spec of the algorithm choosing its moves
            poll_interval_ms: Polling interval for time-limited specs
        """
        if game is None or not algorithms:
            raise ConfigurationError("A game and at least one algorithm are required")
        self.game = game
        self.algorithms = algorithms
        self.poll_interval_ms = poll_interval_ms
        self.moves_played = 0

    def battle(self):
        """
        Alternate moves until the game is terminal.

        Returns:
            The finished game

        Raises:
            NoMoveFoundError: an algorithm failed to produce a move
        """
        while not self.game.terminal():
            player = self.game.current_player()
            spec = self.algorithms[player]
            algorithm = spec.instantiate(self.game)

            if spec.time_limit_ms > 0:
                try:
                    result, elapsed_ns = run_with_time_limit(
                        algorithm.search, spec.time_limit_ms, self.poll_interval_ms
                    )
                except NoMoveFoundError:
                    logger.error("Algorithm %s returned no move within %d ms",
                                 spec.name, spec.time_limit_ms)
                    raise
            else:
                start = time.perf_counter_ns()
                result = algorithm.search()
                elapsed_ns = time.perf_counter_ns() - start
                if result.best_move is None:
                    logger.error("Algorithm %s returned no move", spec.name)
                    raise NoMoveFoundError(f"Algorithm {spec.name} returned no move")

            spec.times_per_run.append(elapsed_ns)
            self.game.apply(result.best_move)
            self.moves_played += 1

        self.log_results()
        return self.game

    def log_results(self):
        logger.info("Final position:\n%s", self.game)
        logger.info("Average time usages of the algorithms:")
        for player, spec in self.algorithms.items():
            average = spec.average_time_ms()
            if average is None:
                logger.info("No time usages have been recorded for algorithm %s.", spec.name)
                continue
            logger.info("Algorithm %s (player %s) used an average time of %.1f ms per run.",
                        spec.name, player, average)
