"""
Move ordering for alpha-beta search.

Good move ordering is critical for alpha-beta pruning efficiency: searching
the strongest successors first makes cutoffs happen earlier. Ordering never
changes the value a search returns, only how fast it gets there.

Ranking rule (HeuristicComparator), from the maximizing player's view:
1. Both nodes terminal: compare exact utilities
2. One node terminal: compare its utility against the other's heuristic
3. Neither terminal: compare heuristic evaluations
"""

import functools
from typing import Callable, List

from alpha_beta_light.engine.node import Node
from alpha_beta_light.errors import CapabilityError
from alpha_beta_light.game.game import Capability, capabilities_of


def _cmp(a: float, b: float) -> int:
    return (a > b) - (a < b)


class HeuristicComparator:
    """
    Ranks nodes by how good their position is.

    For games with a player-relative heuristic every evaluation is taken from
    the fixed `max_player` perspective. Games with only a single-player
    heuristic are ranked with `utility()`/`heuristic()`; that branch refuses
    games with more than one player.
    """

    def __init__(self, max_player=None):
        """
        Args:
            max_player: Perspective used for player-relative evaluations
        """
        self.max_player = max_player

    @classmethod
    def for_game(cls, game, max_player=None) -> 'HeuristicComparator':
        """
        Build a comparator after checking that `game` can be ranked by it.

        Raises:
            CapabilityError: no usable heuristic, a player heuristic without
                a maximizing player, or a single-player heuristic on a game
                with several players
        """
        caps = capabilities_of(game)
        if Capability.PLAYER_HEURISTIC in caps:
            if max_player is None:
                raise CapabilityError(
                    "A maximizing player is required for games with a player heuristic"
                )
        elif Capability.HEURISTIC in caps:
            count = game.player_count()
            if count is not None and count > 1:
                raise CapabilityError(
                    f"Single-player heuristic cannot rank a {count}-player game"
                )
        else:
            raise CapabilityError(f"{type(game).__name__} offers no heuristic to order moves by")
        return cls(max_player)

    def compare(self, a: Node, b: Node) -> int:
        """Returns -1, 0 or 1 as `a` ranks below, equal to or above `b`."""
        caps_a = capabilities_of(a.game)
        caps_b = capabilities_of(b.game)

        # Multiplayer game
        if Capability.PLAYER_HEURISTIC in caps_a and Capability.PLAYER_HEURISTIC in caps_b:
            if self.max_player is None:
                raise CapabilityError(
                    "A maximizing player is required for games with a player heuristic"
                )
            player = self.max_player
            if Capability.PLAYER_UTILITY in caps_a and Capability.PLAYER_UTILITY in caps_b:
                return self._compare_values(
                    a, b,
                    lambda node: node.game.player_utility(player),
                    lambda node: node.game.player_heuristic(player),
                )
            return _cmp(a.game.player_heuristic(player), b.game.player_heuristic(player))

        # Single-player game
        for node in (a, b):
            count = node.game.player_count()
            if count is not None and count > 1:
                raise CapabilityError(
                    f"Single-player heuristic cannot rank a {count}-player game"
                )
        if Capability.HEURISTIC not in caps_a or Capability.HEURISTIC not in caps_b:
            raise CapabilityError("Both nodes need a heuristic to be ranked")
        if Capability.UTILITY in caps_a and Capability.UTILITY in caps_b:
            return self._compare_values(
                a, b,
                lambda node: node.game.utility(),
                lambda node: node.game.heuristic(),
            )
        return _cmp(a.game.heuristic(), b.game.heuristic())

    @staticmethod
    def _compare_values(a: Node, b: Node, utility: Callable, heuristic: Callable) -> int:
        value_a = utility(a) if a.is_terminal else heuristic(a)
        value_b = utility(b) if b.is_terminal else heuristic(b)
        return _cmp(float(value_a), float(value_b))

    def __call__(self, a: Node, b: Node) -> int:
        return self.compare(a, b)

    def key(self):
        """Sort key adapter for `sorted`/`list.sort`."""
        return functools.cmp_to_key(self.compare)


def order_nodes(nodes: List[Node], comparator: HeuristicComparator,
                descending: bool) -> List[Node]:
    """
    Sort successor nodes, best first for MAX nodes (`descending=True`) and
    worst first for MIN nodes. The sort is stable, so equally ranked nodes
    keep their generation order.
    """
    return sorted(nodes, key=comparator.key(), reverse=descending)

