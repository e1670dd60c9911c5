from alpha_beta_light.game.game import Game


class Nim(Game):
    """
    Normal-play Nim: players alternately remove stones from one pile, the
    player taking the last stone wins.

    Actions: (pile_index, stones_taken), at most `max_take` stones per move
    Piles are kept as a tuple; the position is reachable through many move
    orders, which makes it a good workload for transposition tables.
    """

    def __init__(self, piles=(1, 2, 3), max_take=None, to_move=0):
        if any(p < 0 for p in piles):
            raise ValueError(f"Pile sizes must be non-negative, got {piles}")
        self.piles = tuple(piles)
        self.max_take = max_take
        self.to_move = to_move

    def __repr__(self):
        return f"Nim(piles={self.piles}, to_move={self.to_move})"

    def copy(self):
        return Nim(self.piles, self.max_take, self.to_move)

    def actions(self):
        moves = []
        for index, size in enumerate(self.piles):
            limit = size if self.max_take is None else min(size, self.max_take)
            for taken in range(1, limit + 1):
                moves.append((index, taken))
        return moves

    def apply(self, action):
        index, taken = action
        if taken < 1 or taken > self.piles[index]:
            raise ValueError(f"Cannot take {taken} from pile {index} of {self.piles}")
        piles = list(self.piles)
        piles[index] -= taken
        self.piles = tuple(piles)
        self.to_move = 1 - self.to_move

    def state_key(self):
        return (self.piles, self.to_move)

    def is_terminal(self):
        return sum(self.piles) == 0

    def players(self):
        return (0, 1)

    def current_player(self):
        return self.to_move

    def player_utility(self, player):
        if not self.is_terminal():
            return 0
        # The player who has to move from an empty board lost
        return -1 if self.to_move == player else 1
