"""Binary save format for a complete game.

A save is a flat run of little-endian signed 32-bit integers:

    board cells         DIM * DIM, row-major
    score               1
    undo tiles          UNDO_CAPACITY * DIM * DIM, slot-major then row-major
    undo scores         UNDO_CAPACITY
    undo write index    1
    undo count          1

Every save has the same length, so a truncated or padded file is rejected
before any of it is interpreted.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field

import numpy as np

from board import DIM, Board, is_tile_value
from undo_history import UNDO_CAPACITY, UndoHistory

logger = logging.getLogger(__name__)

SAVE_DTYPE = np.dtype("<i4")

_BOARD_INTS = DIM * DIM
_HISTORY_TILE_INTS = UNDO_CAPACITY * DIM * DIM
SAVE_INTS = _BOARD_INTS + 1 + _HISTORY_TILE_INTS + UNDO_CAPACITY + 2
SAVE_SIZE = SAVE_INTS * SAVE_DTYPE.itemsize


class SaveFormatError(ValueError):
    """Raised when bytes do not hold a valid save."""


@dataclass
class GameState:
    board: Board = field(default_factory=Board)
    score: int = 0
    history: UndoHistory = field(default_factory=UndoHistory)

    def copy(self) -> "GameState":
        return GameState(self.board.clone(), self.score, self.history.copy())


def serialize(state: GameState) -> bytes:
    history = state.history
    if history.capacity != UNDO_CAPACITY:
        raise ValueError(
            f"Undo history capacity {history.capacity} cannot be saved; expected {UNDO_CAPACITY}"
        )
    parts = [
        state.board.cells().ravel(),
        [state.score],
        history.tiles.ravel(),
        history.scores,
        [history.write_index, history.count],
    ]
    return np.concatenate([np.asarray(p, dtype=np.int64) for p in parts]).astype(SAVE_DTYPE).tobytes()


def _check_tiles(values: np.ndarray, what: str) -> None:
    for value in values:
        if not is_tile_value(value):
            raise SaveFormatError(f"Invalid tile value {int(value)} in {what}")


def deserialize(data: bytes) -> GameState:
    """Decode a save into a new GameState, raising SaveFormatError if invalid."""
    if len(data) != SAVE_SIZE:
        raise SaveFormatError(f"Save must be exactly {SAVE_SIZE} bytes, got {len(data)}")

    values = np.frombuffer(data, dtype=SAVE_DTYPE).astype(np.int32)
    offset = 0

    def take(count: int) -> np.ndarray:
        nonlocal offset
        chunk = values[offset:offset + count]
        offset += count
        return chunk

    board_values = take(_BOARD_INTS)
    score = int(take(1)[0])
    history_tiles = take(_HISTORY_TILE_INTS)
    history_scores = take(UNDO_CAPACITY)
    write_index, count = (int(v) for v in take(2))

    _check_tiles(board_values, "board")
    _check_tiles(history_tiles, "undo history")
    if score < 0 or (history_scores < 0).any():
        raise SaveFormatError("Scores cannot be negative")
    if not 0 <= write_index < UNDO_CAPACITY:
        raise SaveFormatError(f"Undo write index {write_index} out of range")
    if not 0 <= count <= UNDO_CAPACITY:
        raise SaveFormatError(f"Undo count {count} out of range")

    history = UndoHistory(UNDO_CAPACITY)
    history.tiles[...] = history_tiles.reshape(UNDO_CAPACITY, DIM, DIM)
    history.scores[...] = history_scores
    history.write_index = write_index
    history.count = count

    return GameState(Board(board_values.reshape(DIM, DIM).copy()), score, history)


def write_save(path: str, state: GameState) -> None:
    """Write a save atomically; on failure any existing file is left intact."""
    payload = serialize(state)
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(prefix=".nc2048-", suffix=".tmp", dir=directory)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            logger.debug("Could not remove temporary save %s", tmp_path)
        raise
    logger.debug("Wrote %d bytes to %s", len(payload), path)


def read_save(path: str) -> GameState:
    with open(path, "rb") as fh:
        data = fh.read(SAVE_SIZE + 1)
    return deserialize(data)


__all__ = [
    "GameState",
    "SAVE_SIZE",
    "SaveFormatError",
    "deserialize",
    "read_save",
    "serialize",
    "write_save",
]
