import copy
import enum
import functools
from abc import ABC, abstractmethod


class Capability(enum.Flag):
    """Optional capabilities a concrete game may offer to the search core."""
    NONE = 0
    TERMINAL = enum.auto()
    UTILITY = enum.auto()
    PLAYER_UTILITY = enum.auto()
    PLAYER = enum.auto()
    PLAYERS = enum.auto()
    HEURISTIC = enum.auto()
    PLAYER_HEURISTIC = enum.auto()


# Optional method name -> capability flag it provides
_OPTIONAL_METHODS = {
    'is_terminal': Capability.TERMINAL,
    'utility': Capability.UTILITY,
    'player_utility': Capability.PLAYER_UTILITY,
    'current_player': Capability.PLAYER,
    'players': Capability.PLAYERS,
    'heuristic': Capability.HEURISTIC,
    'player_heuristic': Capability.PLAYER_HEURISTIC,
}


class Game(ABC):
    """
    Abstract Base Class for a searchable problem state.

    A game is a mutable object describing one configuration of the problem.
    The search never mutates a game it did not create: successors are built
    from copies. Equality and hashing go through `state_key()`.

    Only `actions`, `apply` and `state_key` are required. Every other query is
    an optional capability; `capabilities_of()` tells which ones a concrete
    class implements and callers must check before calling.
    """

    @abstractmethod
    def actions(self):
        """
        Returns the legal actions of this state.
        """
        pass

    @abstractmethod
    def apply(self, action):
        """
        Applies an action obtained from `actions()` in place.
        """
        pass

    @abstractmethod
    def state_key(self):
        """
        Returns a hashable value identifying this state.
        """
        pass

    def copy(self):
        """
        Returns an independent copy of this state.
        """
        return copy.deepcopy(self)

    def successor(self, action):
        """
        Returns a copy of this state with the action applied.
        """
        game = self.copy()
        game.apply(action)
        return game

    def terminal(self):
        """
        Terminal test used by the search: the terminal capability when
        present, otherwise "no legal actions left".
        """
        if Capability.TERMINAL in capabilities_of(type(self)):
            return self.is_terminal()
        return not self.actions()

    def player_count(self):
        """Number of seats, or None when the game does not list its players."""
        if Capability.PLAYERS in capabilities_of(type(self)):
            return len(self.players())
        return None

    # Optional capabilities

    def is_terminal(self):
        raise NotImplementedError

    def utility(self):
        raise NotImplementedError

    def player_utility(self, player):
        raise NotImplementedError

    def current_player(self):
        raise NotImplementedError

    def players(self):
        raise NotImplementedError

    def heuristic(self):
        raise NotImplementedError

    def player_heuristic(self, player):
        raise NotImplementedError

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.state_key() == other.state_key()

    def __hash__(self):
        return hash(self.state_key())


@functools.lru_cache(maxsize=None)
def _capabilities_of_class(cls):
    caps = Capability.NONE
    for name, flag in _OPTIONAL_METHODS.items():
        if getattr(cls, name) is not getattr(Game, name):
            caps |= flag
    return caps


def capabilities_of(game_or_class):
    """
    Returns the `Capability` flags of a game instance or class.

    The probe runs once per class; overriding an optional method of `Game`
    is what makes a capability present.
    """
    cls = game_or_class if isinstance(game_or_class, type) else type(game_or_class)
    return _capabilities_of_class(cls)
