"""
Alpha-beta minimax search for two-player games.

The engine searches from the position it was constructed with and returns the
best move for the player to move at construction time (the maximizing player).
Every score is taken from that player's perspective.

Key features:
- Minimax with alpha-beta pruning (fail-hard window updates)
- Optional move ordering by heuristic (see move_ordering.py)
- Optional transposition table with bound tightening (fail-soft bounds)
- Depth limit, and cooperative cancellation through a threading.Event

Algorithm overview (plain variant):

    def alphabeta(node, alpha, beta):
        if terminal:
            return utility(max_player)
        if depth limit reached or cancelled:
            return heuristic(max_player)      # or +/-inf without a heuristic
        if max node:
            for child in ordered successors:
                alpha = max(alpha, alphabeta(child, alpha, beta))
                if alpha >= beta:
                    break                     # Beta cutoff
            return alpha
        else:
            ... symmetric on beta

Cancellation is checked at the top of every call and turns the call into a
leaf evaluation, so a cancelled search still finishes with a valid value.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

from alpha_beta_light.config import SearchSettings
from alpha_beta_light.engine.move_ordering import HeuristicComparator, order_nodes
from alpha_beta_light.engine.node import MemorySavingMode, Node
from alpha_beta_light.engine.transposition_table import TranspositionTable
from alpha_beta_light.errors import CapabilityError, ConfigurationError, NoMoveFoundError
from alpha_beta_light.game.game import Capability, capabilities_of

logger = logging.getLogger(__name__)

SCORE_INF = math.inf


@dataclass
class SearchResult:
    """Result of one search invocation."""
    best_move: object
    score: float
    nodes_searched: int
    deepest_depth: int
    time_ms: int
    cancelled: bool = False
    best_move_heuristic: Optional[float] = None
    tt_stats: dict = field(default_factory=dict)


class AlphaBetaEngine:
    """
    Alpha-beta search engine.

    Usable only for games with exactly two players that expose the current
    player and a player-relative utility. A player-relative heuristic is
    needed for meaningful results under a depth limit or cancellation, and
    enables move ordering.
    """

    name = "A-B-Pruning"

    def __init__(self, game, settings: Optional[SearchSettings] = None, max_player=None):
        """
        Initialize alpha-beta engine.

        Args:
            game: Position to search from (copied, never mutated)
            settings: Search settings (defaults from config.SEARCH_CONFIG)
            max_player: Maximizing player; must be the player to move

        Raises:
            CapabilityError: the game does not satisfy the preconditions
            ConfigurationError: max_player is not the player to move
        """
        self.check_applicable(game)
        to_move = game.current_player()
        if max_player is not None and max_player != to_move:
            raise ConfigurationError(
                f"The root is searched for the player to move ({to_move!r}), "
                f"got max_player={max_player!r}"
            )
        self.settings = settings if settings is not None else SearchSettings()
        self.game = game.copy()
        self.max_player = to_move
        self.depth_limit = self.settings.depth_limit
        self.memory_saving_mode = MemorySavingMode(self.settings.memory_saving_mode)

        caps = capabilities_of(game)
        self.has_heuristic = Capability.PLAYER_HEURISTIC in caps
        self.comparator = None
        if self.settings.move_ordering:
            if self.has_heuristic:
                self.comparator = HeuristicComparator.for_game(game, self.max_player)
            else:
                logger.debug("%s has no player heuristic, move ordering disabled",
                             type(game).__name__)

        self.transposition_table = None
        if self.settings.use_transposition_table:
            self.transposition_table = TranspositionTable(self.settings.tt_size)

        # Search statistics
        self.nodes_searched = 0
        self.deepest_depth = 0
        self._best_move = None

    @staticmethod
    def is_applicable(game) -> bool:
        """True if the game has two players, a current player and a player utility."""
        caps = capabilities_of(game)
        required = Capability.PLAYER | Capability.PLAYER_UTILITY | Capability.PLAYERS
        return (caps & required) == required and game.player_count() == 2

    @classmethod
    def check_applicable(cls, game):
        if not cls.is_applicable(game):
            raise CapabilityError(
                f"{cls.name} needs a two-player game with current_player(), "
                f"players() and player_utility(); {type(game).__name__} does not qualify"
            )

    def search(self, cancel: Optional[threading.Event] = None) -> SearchResult:
        """
        Search the root position.

        Args:
            cancel: Set by another thread to stop the search early

        Returns:
            SearchResult; `best_move` is None when no move improved on the
            initial window (e.g. cancelled before the first child was scored)
        """
        start = time.perf_counter()
        self.reset_stats()
        root = Node.root(self.game)

        if self.transposition_table is not None:
            self.transposition_table.clear()
            score = self.with_memory(root, -SCORE_INF, SCORE_INF, cancel)
        else:
            score = self._alphabeta(root, -SCORE_INF, SCORE_INF, cancel)

        return self._result(score, start, cancel)

    def best_move(self, cancel: Optional[threading.Event] = None):
        """
        Best move for the maximizing player.

        Raises:
            NoMoveFoundError: the search produced no move
        """
        result = self.search(cancel)
        if result.best_move is None:
            raise NoMoveFoundError(f"{self.name} failed to produce a move")
        return result.best_move

    def _result(self, score: float, start: float,
                cancel: Optional[threading.Event]) -> SearchResult:
        best_move_heuristic = None
        if self._best_move is not None and self.has_heuristic:
            best_move_heuristic = float(
                self.game.successor(self._best_move).player_heuristic(self.max_player)
            )
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        tt_stats = {}
        if self.transposition_table is not None:
            tt_stats = self.transposition_table.get_stats()
        logger.debug(
            "%s: move=%r score=%s nodes=%d depth=%d time=%dms",
            self.name, self._best_move, score, self.nodes_searched,
            self.deepest_depth, elapsed_ms,
        )
        return SearchResult(
            best_move=self._best_move,
            score=score,
            nodes_searched=self.nodes_searched,
            deepest_depth=self.deepest_depth,
            time_ms=elapsed_ms,
            cancelled=cancel is not None and cancel.is_set(),
            best_move_heuristic=best_move_heuristic,
            tt_stats=tt_stats,
        )

    def reset_stats(self):
        self.nodes_searched = 0
        self.deepest_depth = 0
        self._best_move = None

    def _visit(self, node: Node):
        self.nodes_searched += 1
        if node.depth > self.deepest_depth:
            self.deepest_depth = node.depth

    def _is_max_node(self, node: Node) -> bool:
        return node.game.current_player() == self.max_player

    def _cutoff(self, node: Node, depth_limit: int, cancel: Optional[threading.Event]) -> bool:
        if cancel is not None and cancel.is_set():
            return True
        return depth_limit > 0 and node.depth >= depth_limit

    def _cutoff_value(self, node: Node, maximizing: bool) -> float:
        """
        Leaf value at the depth limit or after cancellation.

        Without a heuristic the side to move gets its best possible value.
        This keeps pruning working but is not a minimax value.
        """
        if self.has_heuristic:
            return float(node.game.player_heuristic(self.max_player))
        return SCORE_INF if maximizing else -SCORE_INF

    def _successors(self, node: Node, maximizing: bool) -> List[Node]:
        successors = node.successors(self.memory_saving_mode)
        if self.comparator is not None:
            successors = order_nodes(successors, self.comparator, descending=maximizing)
        return successors

    def _alphabeta(self, node: Node, alpha: float, beta: float,
                   cancel: Optional[threading.Event]) -> float:
        """
        Plain alpha-beta, fail-hard.

        Returns:
            Score of `node` for the maximizing player, clamped to [alpha, beta]
        """
        self._visit(node)
        if node.is_terminal:
            return float(node.game.player_utility(self.max_player))

        maximizing = self._is_max_node(node)
        if self._cutoff(node, self.depth_limit, cancel):
            return self._cutoff_value(node, maximizing)

        if maximizing:
            max_score = alpha
            for successor in self._successors(node, maximizing):
                score = self._alphabeta(successor, max_score, beta, cancel)
                if score > max_score:
                    max_score = score
                    if max_score >= beta:
                        break
                    if node.is_root:
                        self._best_move = successor.action
            return max_score

        min_score = beta
        for successor in self._successors(node, maximizing):
            score = self._alphabeta(successor, alpha, min_score, cancel)
            if score < min_score:
                min_score = score
                if min_score <= alpha:
                    break
        return min_score

    def with_memory(self, node: Node, alpha: float, beta: float,
                    cancel: Optional[threading.Event] = None,
                    depth_limit: Optional[int] = None) -> float:
        """
        Alpha-beta with transposition table and bound tightening.

        Cached (lower, upper) bounds cut the search short when they already
        decide the window, and otherwise narrow it. The result is stored as
        an upper bound (fail-low), an exact value, or a lower bound
        (fail-high), keeping the other side of any cached bound.

        Args:
            node: Node to search
            alpha: Lower end of the window
            beta: Upper end of the window
            cancel: Cancellation flag
            depth_limit: Overrides the settings' depth limit (used by MTD(f))

        Returns:
            Score of `node` for the maximizing player
        """
        if self.transposition_table is None:
            self.transposition_table = TranspositionTable(self.settings.tt_size)
        if depth_limit is None:
            depth_limit = self.depth_limit
        table = self.transposition_table

        self._visit(node)
        bounds = table.get(node.game)
        if bounds is not None:
            lower, upper = bounds
            if lower >= beta:
                return lower
            if upper <= alpha:
                return upper
            alpha = max(alpha, lower)
            beta = min(beta, upper)

        if node.is_terminal:
            best_score = float(node.game.player_utility(self.max_player))
        else:
            maximizing = self._is_max_node(node)
            if self._cutoff(node, depth_limit, cancel):
                best_score = self._cutoff_value(node, maximizing)
            elif maximizing:
                best_score = -SCORE_INF
                a = alpha
                for successor in self._successors(node, maximizing):
                    score = self.with_memory(successor, a, beta, cancel, depth_limit)
                    if score > best_score:
                        best_score = score
                        a = max(a, best_score)
                        if node.is_root:
                            self._best_move = successor.action
                        if best_score >= beta:
                            break
            else:
                best_score = SCORE_INF
                b = beta
                for successor in self._successors(node, maximizing):
                    score = self.with_memory(successor, alpha, b, cancel, depth_limit)
                    if score < best_score:
                        best_score = score
                        b = min(b, best_score)
                        if best_score <= alpha:
                            break

        if best_score <= alpha:
            # Fail-low: upper bound
            lower_entry = -SCORE_INF if bounds is None else bounds[0]
            table.put_bounds(node.game, lower_entry, best_score, node.depth)
        if alpha < best_score < beta:
            table.put_bounds(node.game, best_score, best_score, node.depth)
        if best_score >= beta:
            # Fail-high: lower bound
            upper_entry = SCORE_INF if bounds is None else bounds[1]
            table.put_bounds(node.game, best_score, upper_entry, node.depth)
        return best_score

    def clear_best_move(self):
        self._best_move = None

    @property
    def last_best_move(self):
        """Root move recorded by the most recent search pass."""
        return self._best_move

    def clear_transposition_table(self):
        if self.transposition_table is not None:
            self.transposition_table.clear()

    def get_stats(self) -> dict:
        """Get search statistics."""
        stats = {
            'nodes_searched': self.nodes_searched,
            'deepest_depth': self.deepest_depth,
        }
        if self.transposition_table is not None:
            stats['tt_stats'] = self.transposition_table.get_stats()
            stats['tt_fill_rate'] = self.transposition_table.get_fill_rate()
        return stats
