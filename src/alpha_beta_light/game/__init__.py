# Game module

from .game import Game, Capability, capabilities_of
from .hanoi import Hanoi, HanoiMove
from .tictactoe import TicTacToe
from .nim import Nim
from .connect_four import ConnectFour

__all__ = [
    'Game', 'Capability', 'capabilities_of',
    'Hanoi', 'HanoiMove', 'TicTacToe', 'Nim', 'ConnectFour',
]
