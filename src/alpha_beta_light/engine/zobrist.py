"""
Zobrist hashing for Connect Four positions.

Zobrist hashing gives a cheap, well-distributed hash for each board so that
positions can be used as transposition table keys. The hash is updated
incrementally after each move instead of being recomputed from the board.

Implementation:
- Pre-generate random 63-bit keys for each (row, col, player) combination
- Hash = XOR of all keys corresponding to occupied squares
- Incremental update: hash ^= key[row][col][player] ^ side_to_move
"""

from typing import Dict, Tuple

import numpy as np


class ZobristHasher:
    """
    Zobrist hashing for Connect Four board positions.

    Features:
    - Deterministic key generation (seeded RNG, stable across runs)
    - Fast incremental hash updates (XOR operation)
    - Keys stay below 2**63 so hashes fit a signed 64-bit integer
    """

    def __init__(self, row_count: int = 6, column_count: int = 7, seed: int = 42):
        """
        Initialize Zobrist hash table with random keys.

        Args:
            row_count: Number of rows in the board
            column_count: Number of columns in the board
            seed: Random seed for reproducibility
        """
        self.row_count = row_count
        self.column_count = column_count

        rng = np.random.RandomState(seed)

        # Zobrist keys: [row, col, player_idx], player_idx 0 for -1 and 1 for 1
        self.zobrist_table = rng.randint(
            0, 2**63 - 1,
            size=(row_count, column_count, 2),
            dtype=np.int64
        )

        # XORed in whenever player -1 is to move
        self.side_to_move_hash = int(rng.randint(0, 2**63 - 1, dtype=np.int64))

    def hash_position(self, board: np.ndarray, player: int = 1) -> int:
        """
        Compute Zobrist hash for a board from scratch.

        Args:
            board: Board (row_count, column_count) with values in {-1, 0, 1}
            player: Player to move (1 or -1)

        Returns:
            Hash value (int)
        """
        hash_value = 0

        rows, cols = np.nonzero(board)
        for row, col in zip(rows, cols):
            player_idx = 0 if board[row, col] == -1 else 1
            hash_value ^= int(self.zobrist_table[row, col, player_idx])

        if player == -1:
            hash_value ^= self.side_to_move_hash

        return hash_value

    def incremental_hash(self, current_hash: int, row: int, col: int, player: int) -> int:
        """
        Hash after `player` dropped a disc on (row, col).

        XOR is its own inverse, so the same call also undoes a move.
        The side to move always flips.
        """
        player_idx = 0 if player == -1 else 1
        new_hash = current_hash ^ int(self.zobrist_table[row, col, player_idx])
        new_hash ^= self.side_to_move_hash
        return new_hash

    def verify_hash(self, board: np.ndarray, player: int, claimed_hash: int) -> bool:
        """
        Check an incrementally maintained hash against a full recomputation.
        """
        return self.hash_position(board, player) == claimed_hash


_hashers: Dict[Tuple[int, int, int], ZobristHasher] = {}


def get_zobrist_hasher(
    row_count: int = 6,
    column_count: int = 7,
    seed: int = 42
) -> ZobristHasher:
    """
    Get or create the shared hasher for a board shape.

    The key tables are read-only after construction, so every game of the
    same shape can share one instance.
    """
    key = (row_count, column_count, seed)
    hasher = _hashers.get(key)
    if hasher is None:
        hasher = ZobristHasher(row_count, column_count, seed)
        _hashers[key] = hasher
    return hasher
