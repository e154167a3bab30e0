"""Fixed-size square board of tile values."""

from typing import Iterable, List, Optional, Tuple

import numpy as np

DIM = 4

Cell = Tuple[int, int]


def is_tile_value(value: int) -> bool:
    """True for 0 (empty) or a power of two no smaller than 2."""
    value = int(value)
    return value == 0 or (value >= 2 and value & (value - 1) == 0)


class Board:
    """A DIM x DIM grid of tiles, 0 meaning empty.

    Only bounds are checked here; keeping every tile a power of two is the
    job of the move rules and the spawner.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[np.ndarray] = None) -> None:
        if cells is None:
            cells = np.zeros((DIM, DIM), dtype=np.int32)
        self._cells = cells

    @classmethod
    def from_grid(cls, grid: Iterable[Iterable[int]]) -> "Board":
        cells = np.array(grid, dtype=np.int32)
        if cells.shape != (DIM, DIM):
            raise ValueError(f"Expected {DIM}x{DIM} grid, received shape {cells.shape}")
        return cls(cells)

    @staticmethod
    def _check(row: int, col: int) -> None:
        if not (0 <= row < DIM and 0 <= col < DIM):
            raise IndexError(f"Cell ({row}, {col}) is outside the {DIM}x{DIM} board")

    def get(self, row: int, col: int) -> int:
        self._check(row, col)
        return int(self._cells[row, col])

    def set(self, row: int, col: int, value: int) -> None:
        self._check(row, col)
        self._cells[row, col] = value

    def count_empty(self) -> int:
        return int(np.count_nonzero(self._cells == 0))

    def empty_cells(self) -> List[Cell]:
        """Empty cells in row-major order."""
        rows, cols = np.nonzero(self._cells == 0)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def max_tile(self) -> int:
        return int(self._cells.max())

    def is_well_formed(self) -> bool:
        return all(is_tile_value(v) for v in self._cells.flat)

    def clear(self) -> None:
        self._cells.fill(0)

    def clone(self) -> "Board":
        return Board(self._cells.copy())

    def equals(self, other: "Board") -> bool:
        return bool(np.array_equal(self._cells, other._cells))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # mutable

    def view(self) -> np.ndarray:
        """Read-only view of the cells; reflects later changes to the board."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def cells(self) -> np.ndarray:
        """The live cell array. Writes go straight to the board."""
        return self._cells

    def tolist(self) -> List[List[int]]:
        return self._cells.tolist()

    def __repr__(self) -> str:
        return f"Board({self.tolist()})"


__all__ = ["Board", "Cell", "DIM", "is_tile_value"]
