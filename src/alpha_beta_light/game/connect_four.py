import numpy as np

from alpha_beta_light.engine.zobrist import get_zobrist_hasher
from alpha_beta_light.game.game import Game


class ConnectFour(Game):
    """
    Connect Four (Four in a Row) game implementation.

    Board: row_count x column_count numpy array, values in {1, -1, 0}
    Win condition: win_length in a row (horizontal, vertical, or diagonal)
    Actions: Column index - disc drops to lowest empty row
    Players: 1 moves first, -1 second

    The Zobrist hash of the position is maintained incrementally and used as
    the hash of the game; equality compares boards and side to move.
    """

    def __init__(self, row_count=6, column_count=7, win_length=4):
        self.row_count = row_count
        self.column_count = column_count
        self.win_length = win_length
        self.board = np.zeros((row_count, column_count), dtype=np.int8)
        self.to_move = 1
        self.last_action = None
        self.hasher = get_zobrist_hasher(row_count, column_count)
        self.zobrist_hash = self.hasher.hash_position(self.board, self.to_move)

    def __repr__(self):
        return f"ConnectFour({self.row_count}x{self.column_count}, win={self.win_length})"

    def __str__(self):
        symbols = {1: 'X', -1: 'O', 0: '.'}
        rows = [' '.join(symbols[int(cell)] for cell in row) for row in self.board]
        rows.append(' '.join(str(col) for col in range(self.column_count)))
        return '\n'.join(rows)

    @classmethod
    def from_moves(cls, moves, **kwargs):
        game = cls(**kwargs)
        for move in moves:
            game.apply(move)
        return game

    def copy(self):
        game = ConnectFour.__new__(ConnectFour)
        game.row_count = self.row_count
        game.column_count = self.column_count
        game.win_length = self.win_length
        game.board = self.board.copy()
        game.to_move = self.to_move
        game.last_action = self.last_action
        game.hasher = self.hasher
        game.zobrist_hash = self.zobrist_hash
        return game

    def get_valid_moves(self):
        """
        Returns mask of valid column choices.

        A column is valid if its top row is empty.
        """
        return (self.board[0, :] == 0).astype(np.uint8)

    def actions(self):
        if self.is_terminal():
            return []
        return [int(col) for col in np.flatnonzero(self.get_valid_moves())]

    def apply(self, action):
        """
        Apply gravity-based move: drop disc in column to lowest empty row.
        """
        column = action
        for row in range(self.row_count - 1, -1, -1):
            if self.board[row, column] == 0:
                self.board[row, column] = self.to_move
                self.zobrist_hash = self.hasher.incremental_hash(
                    self.zobrist_hash, row, column, self.to_move
                )
                self.last_action = column
                self.to_move = -self.to_move
                return

        # Column is full - this should not happen with proper actions() checking
        raise ValueError(f"Column {column} is full")

    def state_key(self):
        return (self.board.tobytes(), self.to_move)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.to_move == other.to_move and np.array_equal(self.board, other.board)

    def __hash__(self):
        return self.zobrist_hash

    def check_win(self, action):
        """
        Check if the last disc dropped in column=action completed a line.
        """
        if action is None or action < 0 or action >= self.column_count:
            return False

        # Topmost disc of the column is the one placed last
        column = action
        occupied = np.flatnonzero(self.board[:, column])
        if occupied.size == 0:
            return False
        row = int(occupied[0])
        player = self.board[row, column]

        for d_row, d_col in ((0, 1), (1, 0), (1, 1), (1, -1)):
            count = 1
            for sign in (1, -1):
                r, c = row + sign * d_row, column + sign * d_col
                while (0 <= r < self.row_count and 0 <= c < self.column_count
                       and self.board[r, c] == player):
                    count += 1
                    r += sign * d_row
                    c += sign * d_col
            if count >= self.win_length:
                return True

        return False

    def winner(self):
        if self.check_win(self.last_action):
            # The player who made the last move is no longer to move
            return -self.to_move
        return None

    def is_terminal(self):
        return self.winner() is not None or not self.get_valid_moves().any()

    def players(self):
        return (1, -1)

    def current_player(self):
        return self.to_move

    def player_utility(self, player):
        winner = self.winner()
        if winner is None:
            return 0
        return 1000 if winner == player else -1000

    def player_heuristic(self, player):
        """
        Simple position evaluation: central discs are worth more.
        """
        winner = self.winner()
        if winner is not None:
            return 1000.0 if winner == player else -1000.0
        center = (self.column_count - 1) / 2
        weights = self.win_length - np.abs(np.arange(self.column_count) - center)
        return float(10 * np.sum((self.board == player) * weights)
                     - 10 * np.sum((self.board == -player) * weights))
