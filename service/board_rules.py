"""Core 2048 board mechanics shared by the game session, the server and tests."""

from typing import Callable, Dict, Iterable, List, Sequence, Tuple

import numpy as np

from board import DIM, Board, Cell

DIRECTION_NAMES: Sequence[str] = ("UP", "RIGHT", "DOWN", "LEFT")

MoveResult = Tuple[bool, int]


def _rows(reverse: bool) -> List[List[Cell]]:
    cols = range(DIM - 1, -1, -1) if reverse else range(DIM)
    return [[(row, col) for col in cols] for row in range(DIM)]


def _columns(reverse: bool) -> List[List[Cell]]:
    rows = range(DIM - 1, -1, -1) if reverse else range(DIM)
    return [[(row, col) for row in rows] for col in range(DIM)]


# Each line lists its cells starting at the edge the tiles travel towards.
_LINES: Dict[str, List[List[Cell]]] = {
    "LEFT": _rows(reverse=False),
    "RIGHT": _rows(reverse=True),
    "UP": _columns(reverse=False),
    "DOWN": _columns(reverse=True),
}


def slide_line(values: Iterable[int]) -> Tuple[List[int], int, bool]:
    """Push one line of tiles towards index 0, merging equal neighbours once.

    Returns the new line, the points scored by merges and whether anything
    moved. For example [2, 2, 2, 2] becomes [4, 4, 0, 0], never [8, 0, 0, 0],
    and [2, 4, 4, 2] becomes [2, 8, 2, 0].
    """
    line = [int(v) for v in values]
    size = len(line)
    zeros = 0
    unmerged = 0
    gained = 0
    changed = False

    # Writes only ever land behind the scan position, so line[idx] is still
    # the original value when it is read.
    for idx in range(size):
        value = line[idx]
        if value == 0:
            zeros += 1
        elif value == unmerged:
            line[idx - zeros - 1] = unmerged * 2
            gained += unmerged * 2
            changed = True
            zeros += 1
            unmerged = 0
        elif unmerged:
            if zeros:
                changed = True
            line[idx - zeros - 1] = unmerged
            unmerged = value
        else:
            unmerged = value

    if unmerged and line[size - zeros - 1] != unmerged:
        changed = True
        line[size - zeros - 1] = unmerged

    for idx in range(size - zeros, size):
        line[idx] = 0

    return line, gained, changed


def _apply(board: Board, direction: str) -> MoveResult:
    cells = board.cells()
    changed_any = False
    gained = 0
    for line in _LINES[direction]:
        values = [cells[pos] for pos in line]
        new_values, points, changed = slide_line(values)
        if changed:
            changed_any = True
            for pos, value in zip(line, new_values):
                cells[pos] = value
        gained += points
    return changed_any, gained


def move_left(board: Board) -> MoveResult:
    """Push every row left in place. Returns (changed, points gained)."""
    return _apply(board, "LEFT")


def move_right(board: Board) -> MoveResult:
    """Push every row right in place. Returns (changed, points gained)."""
    return _apply(board, "RIGHT")


def move_up(board: Board) -> MoveResult:
    """Push every column up in place. Returns (changed, points gained)."""
    return _apply(board, "UP")


def move_down(board: Board) -> MoveResult:
    """Push every column down in place. Returns (changed, points gained)."""
    return _apply(board, "DOWN")


_MOVES: Dict[str, Callable[[Board], MoveResult]] = {
    "UP": move_up,
    "RIGHT": move_right,
    "DOWN": move_down,
    "LEFT": move_left,
}


def normalize_direction(direction: str) -> str:
    name = str(direction).strip().upper()
    if name not in _MOVES:
        raise ValueError(f"Unknown direction: {direction}")
    return name


def move(board: Board, direction: str) -> MoveResult:
    return _MOVES[normalize_direction(direction)](board)


def has_available_move(board: Board) -> bool:
    """True while an empty cell or two equal adjacent tiles remain."""
    cells = board.cells()
    for row in range(DIM):
        for col in range(DIM):
            value = cells[row, col]
            if value == 0:
                return True
            if row < DIM - 1 and value == cells[row + 1, col]:
                return True
            if col < DIM - 1 and value == cells[row, col + 1]:
                return True
    return False


def simulate_move(grid: Sequence[Sequence[int]], direction: str) -> Tuple[np.ndarray, bool]:
    board = Board.from_grid(grid)
    changed, _ = move(board, direction)
    return board.cells(), changed


def valid_moves(grid: Sequence[Sequence[int]]) -> List[str]:
    allowed: List[str] = []
    for direction in DIRECTION_NAMES:
        _, changed = simulate_move(grid, direction)
        if changed:
            allowed.append(direction)
    return allowed


__all__ = [
    "DIRECTION_NAMES",
    "has_available_move",
    "move",
    "move_down",
    "move_left",
    "move_right",
    "move_up",
    "normalize_direction",
    "simulate_move",
    "slide_line",
    "valid_moves",
]
