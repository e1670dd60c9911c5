"""
Search tree nodes.

A node wraps its own copy of a game state together with the search depth and
the action that produced it. Nodes never share mutable state with siblings:
each successor is built from an independent copy of its parent's game.

Memory saving modes control how that copy is made. They are a memory policy
only and never change which states are reachable or how they compare.
"""

import enum
from typing import List, Optional

import numpy as np

from alpha_beta_light.game.game import Game


class MemorySavingMode(enum.Enum):
    """How successor states are copied from their parent."""
    NONE = 'none'                        # Full independent copy
    SHARE_UNCHANGED = 'share_unchanged'  # Reuse parent attributes the action left equal


def _same_value(a, b) -> bool:
    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        return (isinstance(a, np.ndarray) and isinstance(b, np.ndarray)
                and a.shape == b.shape and np.array_equal(a, b))
    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


def share_unchanged(parent: Game, child: Game) -> None:
    """
    Point every attribute of `child` that equals the parent's at the parent's
    object, so unchanged structure is stored once.
    """
    parent_attrs = getattr(parent, '__dict__', {})
    for name, value in vars(child).items():
        if name in parent_attrs:
            parent_value = parent_attrs[name]
            if value is not parent_value and _same_value(value, parent_value):
                setattr(child, name, parent_value)


def make_successor(game: Game, action, mode: MemorySavingMode) -> Game:
    """Copy of `game` with `action` applied, built according to `mode`."""
    child = game.successor(action)
    if mode is MemorySavingMode.SHARE_UNCHANGED:
        share_unchanged(game, child)
    return child


class Node:
    """
    Search tree node.

    Attributes:
        game: State owned by this node
        depth: Distance from the root (0 for the root)
        action: Action that produced this node (None for the root)
        is_terminal: Terminal flag, computed once at construction
    """

    __slots__ = ('game', 'depth', 'action', 'is_terminal')

    def __init__(self, game: Game, depth: int = 0, action=None):
        self.game = game
        self.depth = depth
        self.action = action
        self.is_terminal = game.terminal()

    @classmethod
    def root(cls, game: Game) -> 'Node':
        """Root node wrapping a defensive copy of `game`."""
        return cls(game.copy())

    @property
    def is_root(self) -> bool:
        return self.depth == 0

    def available_actions(self) -> list:
        return self.game.actions()

    def successor(self, action, mode: MemorySavingMode = MemorySavingMode.NONE) -> 'Node':
        return Node(make_successor(self.game, action, mode), self.depth + 1, action)

    def successors(self, mode: MemorySavingMode = MemorySavingMode.NONE) -> List['Node']:
        return [self.successor(action, mode) for action in self.game.actions()]

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return (self.game == other.game and self.depth == other.depth
                and self.action == other.action)

    def __hash__(self):
        return hash((self.game, self.depth))

    def __repr__(self):
        return f"Node(depth={self.depth}, action={self.action!r}, game={self.game!r})"


class LinkedNode(Node):
    """Node that remembers its predecessor, so a path can be replayed."""

    __slots__ = ('predecessor',)

    def __init__(self, game: Game, depth: int = 0, action=None,
                 predecessor: Optional['LinkedNode'] = None):
        super().__init__(game, depth, action)
        self.predecessor = predecessor

    def successor(self, action, mode: MemorySavingMode = MemorySavingMode.NONE) -> 'LinkedNode':
        return LinkedNode(make_successor(self.game, action, mode), self.depth + 1, action, self)

    def action_sequence(self) -> list:
        """Actions leading from the root to this node, root first."""
        actions = []
        current = self
        while current.predecessor is not None and current.action is not None:
            actions.append(current.action)
            current = current.predecessor
        actions.reverse()
        return actions
