from alpha_beta_light.game.game import Game


LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)


class TicTacToe(Game):
    """
    Tic-tac-toe on a 3x3 board.

    Board: tuple of 9 cells, each 'X', 'O' or None (row-major)
    Actions: cell index (0-8)
    Utility: +1 win, -1 loss, 0 draw from the given player's perspective
    Heuristic: lines still open for the player minus lines open for the opponent
    """

    PLAYERS = ('X', 'O')

    def __init__(self, board=None, to_move='X'):
        self.board = tuple(board) if board is not None else (None,) * 9
        if len(self.board) != 9:
            raise ValueError("TicTacToe board must have 9 cells")
        self.to_move = to_move

    def __repr__(self):
        rows = [
            ''.join(cell or '.' for cell in self.board[r * 3:r * 3 + 3])
            for r in range(3)
        ]
        return f"TicTacToe({'/'.join(rows)}, to_move={self.to_move})"

    @classmethod
    def from_moves(cls, moves):
        game = cls()
        for move in moves:
            game.apply(move)
        return game

    def copy(self):
        return TicTacToe(self.board, self.to_move)

    @staticmethod
    def opponent(player):
        return 'O' if player == 'X' else 'X'

    def winner(self):
        for a, b, c in LINES:
            if self.board[a] is not None and self.board[a] == self.board[b] == self.board[c]:
                return self.board[a]
        return None

    def actions(self):
        if self.winner() is not None:
            return []
        return [i for i, cell in enumerate(self.board) if cell is None]

    def apply(self, action):
        if self.board[action] is not None:
            raise ValueError(f"Cell {action} is occupied")
        board = list(self.board)
        board[action] = self.to_move
        self.board = tuple(board)
        self.to_move = self.opponent(self.to_move)

    def state_key(self):
        return (self.board, self.to_move)

    def is_terminal(self):
        return self.winner() is not None or all(cell is not None for cell in self.board)

    def players(self):
        return self.PLAYERS

    def current_player(self):
        return self.to_move

    def player_utility(self, player):
        winner = self.winner()
        if winner is None:
            return 0
        return 1 if winner == player else -1

    def player_heuristic(self, player):
        winner = self.winner()
        if winner is not None:
            return 10.0 if winner == player else -10.0
        opponent = self.opponent(player)
        score = 0.0
        for line in LINES:
            cells = [self.board[i] for i in line]
            if opponent not in cells:
                score += 0.1 * (1 + cells.count(player))
            if player not in cells:
                score -= 0.1 * (1 + cells.count(opponent))
        return score
