"""
MTD(f) search with iterative deepening.

MTD(f) finds the minimax value with a sequence of null-window alpha-beta
searches, each one either raising a lower bound or lowering an upper bound
until both meet. The transposition table carries the bounds between passes,
which is what makes the repeated passes cheap.

    def mtdf(root, f, depth):
        g, lower, upper = f, -inf, +inf
        while lower < upper:
            beta = g + 1 if g == lower else g
            g = alphabeta_with_memory(root, beta - 1, beta, depth)
            if g < beta: upper = g
            else:        lower = g
        return g

Iterative deepening feeds each depth's value in as the next first guess and
stops early when the search is cancelled.
"""

import dataclasses
import logging
import math
import threading
import time
from typing import Optional, Tuple

from alpha_beta_light.config import SearchSettings
from alpha_beta_light.engine.alphabeta import AlphaBetaEngine, SearchResult
from alpha_beta_light.engine.node import Node
from alpha_beta_light.errors import CapabilityError, NoMoveFoundError
from alpha_beta_light.game.game import Capability, capabilities_of

logger = logging.getLogger(__name__)


class MTDf:
    """
    MTD(f) driver around AlphaBetaEngine.with_memory.

    Needs everything alpha-beta needs plus a player-relative heuristic,
    since every depth before the last ends in heuristic leaves.
    """

    name = "MTDf"
    DEFAULT_DEPTH_LIMIT = 15

    def __init__(self, game, settings: Optional[SearchSettings] = None, max_player=None):
        """
        Args:
            game: Position to search from
            settings: Search settings; a depth limit of 0 means DEFAULT_DEPTH_LIMIT
            max_player: Maximizing player; must be the player to move

        Raises:
            ConfigurationError: max_player is not the player to move
        """
        self.check_applicable(game)
        settings = settings if settings is not None else SearchSettings()
        if settings.depth_limit <= 0:
            settings = dataclasses.replace(settings, depth_limit=self.DEFAULT_DEPTH_LIMIT)
        self.settings = settings
        self.alpha_beta = AlphaBetaEngine(game, settings, max_player)
        self.depth_reached = 0

    @staticmethod
    def is_applicable(game) -> bool:
        return (AlphaBetaEngine.is_applicable(game)
                and Capability.PLAYER_HEURISTIC in capabilities_of(game))

    @classmethod
    def check_applicable(cls, game):
        if not cls.is_applicable(game):
            raise CapabilityError(
                f"{cls.name} needs a two-player game with a player heuristic; "
                f"{type(game).__name__} does not qualify"
            )

    def search(self, cancel: Optional[threading.Event] = None) -> SearchResult:
        """
        Iterative deepening from depth 1 to the depth limit.

        A depth interrupted by cancellation still reports its move when it
        found one; otherwise the previous depth's move is kept.
        """
        start = time.perf_counter()
        engine = self.alpha_beta
        engine.reset_stats()
        root = Node.root(engine.game)

        first_guess = 0.0
        best_move = None
        score = first_guess
        self.depth_reached = 0
        for depth in range(1, self.settings.depth_limit + 1):
            guess, move = self._mtdf(root, first_guess, depth, cancel)
            if move is not None:
                best_move = move
                score = guess
            if cancel is not None and cancel.is_set():
                break
            first_guess = guess
            self.depth_reached = depth

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("%s: move=%r score=%s depth=%d nodes=%d time=%dms",
                     self.name, best_move, score, self.depth_reached,
                     engine.nodes_searched, elapsed_ms)
        best_move_heuristic = None
        if best_move is not None:
            best_move_heuristic = float(
                engine.game.successor(best_move).player_heuristic(engine.max_player)
            )
        return SearchResult(
            best_move=best_move,
            score=score,
            nodes_searched=engine.nodes_searched,
            deepest_depth=engine.deepest_depth,
            time_ms=elapsed_ms,
            cancelled=cancel is not None and cancel.is_set(),
            best_move_heuristic=best_move_heuristic,
            tt_stats=engine.transposition_table.get_stats(),
        )

    def best_move(self, cancel: Optional[threading.Event] = None):
        result = self.search(cancel)
        if result.best_move is None:
            raise NoMoveFoundError(f"{self.name} failed to produce a move")
        return result.best_move

    def _mtdf(self, root: Node, f: float, depth: int,
              cancel: Optional[threading.Event]) -> Tuple[float, object]:
        """
        Converge on the minimax value of `root` searched to `depth`.

        Returns:
            (value, move) where move comes from the last fail-high pass,
            or from the last pass if none failed high
        """
        engine = self.alpha_beta
        engine.clear_transposition_table()
        g = f
        upper_bound = math.inf
        lower_bound = -math.inf
        move = None
        last_move = None
        while lower_bound < upper_bound:
            beta = g + 1 if g == lower_bound else g
            engine.clear_best_move()
            g = engine.with_memory(root, beta - 1, beta, cancel, depth_limit=depth)
            last_move = engine.last_best_move
            if g < beta:
                upper_bound = g
            else:
                lower_bound = g
                if last_move is not None:
                    move = last_move
            if cancel is not None and cancel.is_set():
                break
        return g, move if move is not None else last_move
