"""Bounded undo history kept as a ring of (board, score) snapshots."""

from typing import Optional, Tuple

import numpy as np

from board import DIM, Board

# Number of snapshots kept. One slot always holds the current position, so
# a player can undo at most UNDO_CAPACITY - 1 moves.
UNDO_CAPACITY = 4


class UndoHistory:
    """Ring buffer of board and score snapshots.

    ``write_index`` points at the most recent snapshot and ``count`` is the
    number of valid snapshots, never more than ``capacity``. Pushing past
    capacity overwrites the oldest snapshot.
    """

    def __init__(self, capacity: int = UNDO_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("Undo capacity must be at least 1")
        self.capacity = capacity
        self.tiles = np.zeros((capacity, DIM, DIM), dtype=np.int32)
        self.scores = np.zeros(capacity, dtype=np.int32)
        self.write_index = 0
        self.count = 0

    def __len__(self) -> int:
        return self.count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UndoHistory):
            return NotImplemented
        return (
            self.capacity == other.capacity
            and self.write_index == other.write_index
            and self.count == other.count
            and np.array_equal(self.tiles, other.tiles)
            and np.array_equal(self.scores, other.scores)
        )

    __hash__ = None

    def push(self, board: Board, score: int) -> None:
        self.write_index = (self.write_index + 1) % self.capacity
        if self.count < self.capacity:
            self.count += 1
        self.tiles[self.write_index] = board.cells()
        self.scores[self.write_index] = score

    def can_undo(self) -> bool:
        return self.count > 1

    def pop(self) -> Optional[Tuple[Board, int]]:
        """Step back to the snapshot before the most recent one.

        Returns a fresh board and the score stored with it, or None when
        only the current snapshot is left.
        """
        if not self.can_undo():
            return None
        prior = (self.write_index - 1) % self.capacity
        board = Board(self.tiles[prior].copy())
        score = int(self.scores[prior])
        self.write_index = prior
        self.count -= 1
        return board, score

    def clear(self) -> None:
        self.tiles.fill(0)
        self.scores.fill(0)
        self.write_index = 0
        self.count = 0

    def copy(self) -> "UndoHistory":
        other = UndoHistory(self.capacity)
        other.tiles[...] = self.tiles
        other.scores[...] = self.scores
        other.write_index = self.write_index
        other.count = self.count
        return other

    def __repr__(self) -> str:
        return (
            f"UndoHistory(capacity={self.capacity}, write_index={self.write_index}, "
            f"count={self.count})"
        )


__all__ = ["UNDO_CAPACITY", "UndoHistory"]
