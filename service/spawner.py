"""Placing new tiles on the board after a move."""

from enum import Enum
from typing import Optional, Union

import numpy as np

from board import Board, Cell

FOUR_PROBABILITY = 0.1


class SpawnMode(str, Enum):
    DETERMINISTIC = "deterministic"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: Union[str, "SpawnMode"]) -> "SpawnMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown spawn mode: {value}") from None


def spawn_tile(
    board: Board,
    mode: SpawnMode = SpawnMode.RANDOM,
    rng: Optional[np.random.Generator] = None,
) -> Optional[Cell]:
    """Place a new tile on an empty cell and return where it went.

    Deterministic mode always puts a 2 on the first empty cell in row-major
    order. Random mode picks an empty cell uniformly and places a 2 with
    probability 0.9, otherwise a 4. A full board is left alone and None is
    returned.
    """
    empty = board.empty_cells()
    if not empty:
        return None

    if SpawnMode.parse(mode) is SpawnMode.RANDOM:
        if rng is None:
            rng = np.random.default_rng()
        row, col = empty[int(rng.integers(len(empty)))]
        value = 4 if rng.random() < FOUR_PROBABILITY else 2
    else:
        row, col = empty[0]
        value = 2

    board.set(row, col, value)
    return row, col


__all__ = ["FOUR_PROBABILITY", "SpawnMode", "spawn_tile"]
