"""Immutable views of a game used for persistence and rendering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from .board import Rows
from .tetromino import Tetromino, TetrominoType


class GameStatus(str, Enum):
    """Lifecycle state of a game."""

    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameSnapshot:
    """Everything needed to restore a game exactly."""

    width: int
    height: int
    grid: Rows
    active: Optional[Tetromino]
    upcoming: TetrominoType
    score: int
    level: int
    lines: int
    state: GameStatus


@dataclass(frozen=True)
class GameView:
    """Read-only data a renderer needs to draw one frame.

    ``grid`` already contains the active piece so simple renderers can draw a
    single matrix; ``active_cells`` lets richer renderers highlight it.
    """

    grid: List[List[int]]
    active_cells: FrozenSet[Tuple[int, int]]
    active_kind: Optional[TetrominoType]
    next_kind: TetrominoType
    score: int
    level: int
    lines: int
    state: GameStatus
    message: Optional[str] = None
