"""A single game: board, score, undo history and the rules that drive them."""

import logging
from typing import Any, Dict, Optional, Union

import numpy as np

import board_rules
from board import Board
from persistence import GameState, SaveFormatError, read_save, write_save
from spawner import SpawnMode, spawn_tile
from undo_history import UndoHistory

logger = logging.getLogger(__name__)

WINNING_TILE = 2048


class GameSession:
    """Owns one game's state. Each method returns with the state consistent."""

    def __init__(
        self,
        spawn_mode: Union[str, SpawnMode] = SpawnMode.RANDOM,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.spawn_mode = SpawnMode.parse(spawn_mode)
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.board = Board()
        self.score = 0
        self.history = UndoHistory()

    def start_new_game(self, mode: Union[str, SpawnMode, None] = None) -> None:
        if mode is not None:
            self.spawn_mode = SpawnMode.parse(mode)
        self.board.clear()
        self.score = 0
        self.history.clear()
        self.spawn_tile()
        self.history.push(self.board, self.score)
        logger.info("Started new game (%s spawns)", self.spawn_mode.value)

    def set_spawn_mode(self, mode: Union[str, SpawnMode]) -> None:
        self.spawn_mode = SpawnMode.parse(mode)

    def apply_move(self, direction: str) -> bool:
        """Slide the tiles without spawning or recording a snapshot."""
        changed, gained = board_rules.move(self.board, direction)
        self.score += gained
        return changed

    def spawn_tile(self, mode: Union[str, SpawnMode, None] = None):
        return spawn_tile(self.board, self.spawn_mode if mode is None else mode, self.rng)

    def play(self, direction: str) -> bool:
        """Play one turn. A move that changes the board spawns a tile and is
        recorded for undo; a move that changes nothing returns False."""
        changed = self.apply_move(direction)
        if changed:
            self.spawn_tile()
            self.history.push(self.board, self.score)
        return changed

    def undo(self) -> bool:
        restored = self.history.pop()
        if restored is None:
            logger.debug("No undos available")
            return False
        board, self.score = restored
        self.board.cells()[...] = board.cells()
        return True

    def has_available_move(self) -> bool:
        return board_rules.has_available_move(self.board)

    def is_game_over(self) -> bool:
        return not self.has_available_move()

    def has_won(self) -> bool:
        return self.board.max_tile() >= WINNING_TILE

    def current_score(self) -> int:
        return self.score

    def board_snapshot(self) -> np.ndarray:
        return self.board.view()

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def state(self) -> GameState:
        return GameState(self.board.clone(), self.score, self.history.copy())

    def restore(self, state: GameState) -> None:
        self.board.cells()[...] = state.board.cells()
        self.score = state.score
        self.history = state.history.copy()

    def save_to_file(self, path: str) -> bool:
        try:
            write_save(path, self.state())
        except OSError as exc:
            logger.warning("Error saving game to %s: %s", path, exc)
            return False
        logger.info("Game saved to %s", path)
        return True

    def load_from_file(self, path: str) -> bool:
        # Decode into a scratch state first; the live game only changes once
        # the whole file has been read and validated.
        try:
            loaded = read_save(path)
        except (OSError, SaveFormatError) as exc:
            logger.warning("Error loading game from %s: %s", path, exc)
            return False
        self.restore(loaded)
        logger.info("Game loaded from %s", path)
        return True

    def to_dict(self) -> Dict[str, Any]:
        grid = self.board.tolist()
        return {
            "grid": grid,
            "score": self.score,
            "game_over": self.is_game_over(),
            "won": self.has_won(),
            "spawn_mode": self.spawn_mode.value,
            "can_undo": self.can_undo(),
            "valid_moves": board_rules.valid_moves(grid),
        }


__all__ = ["GameSession", "WINNING_TILE"]
