from collections import namedtuple

from alpha_beta_light.game.game import Game


HanoiMove = namedtuple('HanoiMove', ['source', 'target'])


class Hanoi(Game):
    """
    Towers of Hanoi with a move budget, exposed as a two-seat game.

    Board: 3 towers, disks numbered 1 (smallest) to num_disks
    Goal: move the whole stack from the first tower to the last one
    Actions: HanoiMove(source, target) - top disk of source onto target

    Only the "solver" seat ever moves; the "spectator" seat exists so the
    two-player searches accept the puzzle. The game ends when the stack is
    rebuilt or when `max_moves` moves have been made, which keeps the game
    tree finite without a depth limit. The move count is part of the state.

    Utility for the solver is `-moves` when solved and `-(max_moves + 1)`
    otherwise, so the best reachable score is `-(2**num_disks - 1)`.
    """

    TOWER_COUNT = 3
    SOLVER = 'solver'
    SPECTATOR = 'spectator'

    def __init__(self, num_disks=3, max_moves=None):
        if num_disks < 1:
            raise ValueError("Hanoi must contain at least 1 disk")
        self.num_disks = num_disks
        self.max_moves = max_moves if max_moves is not None else 2 ** num_disks - 1
        if self.max_moves < 1:
            raise ValueError(f"max_moves must be positive, got {self.max_moves}")
        # Each tower lists its disks bottom to top
        self.towers = (tuple(range(num_disks, 0, -1)), (), ())
        self.moves = 0

    def __repr__(self):
        return f"Hanoi(towers={self.towers}, moves={self.moves}/{self.max_moves})"

    def copy(self):
        game = Hanoi.__new__(Hanoi)
        game.num_disks = self.num_disks
        game.max_moves = self.max_moves
        game.towers = self.towers
        game.moves = self.moves
        return game

    @staticmethod
    def optimal_move_count(num_disks):
        return 2 ** num_disks - 1

    def is_solved(self):
        return len(self.towers[-1]) == self.num_disks

    def _can_move(self, source, target):
        if source == target or not self.towers[source]:
            return False
        target_tower = self.towers[target]
        return not target_tower or target_tower[-1] > self.towers[source][-1]

    def actions(self):
        if self.is_terminal():
            return []
        return [
            HanoiMove(source, target)
            for source in range(self.TOWER_COUNT)
            for target in range(self.TOWER_COUNT)
            if self._can_move(source, target)
        ]

    def apply(self, action):
        source, target = action
        if not self._can_move(source, target):
            raise ValueError(f"Illegal move {action} in {self!r}")
        towers = list(self.towers)
        disk = towers[source][-1]
        towers[source] = towers[source][:-1]
        towers[target] = towers[target] + (disk,)
        self.towers = tuple(towers)
        self.moves += 1

    def state_key(self):
        return (self.towers, self.moves)

    def is_terminal(self):
        return self.is_solved() or self.moves >= self.max_moves

    def players(self):
        return (self.SOLVER, self.SPECTATOR)

    def current_player(self):
        return self.SOLVER

    def player_utility(self, player):
        score = -self.moves if self.is_solved() else -(self.max_moves + 1)
        return score if player == self.SOLVER else -score
