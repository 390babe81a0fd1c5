"""Game-state engine for a terminal falling-block puzzle game."""

from .board import Board
from .tetromino import Tetromino, TetrominoType, shape_blocks
from .config import DEFAULT_CONFIG, GameConfig
from .snapshot import GameSnapshot, GameStatus, GameView
from .game import Command, Game
from .persistence import (
    PersistenceError,
    SaveIOError,
    SaveNotFoundError,
    SaveParseError,
    load_game,
    read_high_score,
    save_game,
    write_high_score,
)
from .utils import can_move, can_place, gravity_interval_ms, render_grid

__all__ = [
    "Board",
    "Tetromino",
    "TetrominoType",
    "GameConfig",
    "DEFAULT_CONFIG",
    "GameSnapshot",
    "GameStatus",
    "GameView",
    "Command",
    "Game",
    "PersistenceError",
    "SaveIOError",
    "SaveNotFoundError",
    "SaveParseError",
    "load_game",
    "save_game",
    "read_high_score",
    "write_high_score",
    "can_move",
    "can_place",
    "gravity_interval_ms",
    "render_grid",
    "shape_blocks",
]
