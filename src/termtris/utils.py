"""Utility helpers for the Tetris engine."""

from __future__ import annotations

from typing import Optional, List

from .board import Board, PIECE_VALUES
from .config import DEFAULT_CONFIG, GameConfig
from .tetromino import Tetromino


def gravity_interval_ms(level: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    """Return the fall interval in milliseconds for ``level``.

    The interval decreases as the level rises, speeding up the falling
    pieces, but never drops below ``config.min_gravity_ms``.
    """

    # Exponentially decrease the delay but keep a practical lower bound
    steps = max(0, level - 1)
    return max(config.min_gravity_ms, config.base_gravity_ms * (config.gravity_decay ** steps))


def line_clear_score(lines: int, level: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Return the points awarded for clearing ``lines`` rows in one lock."""

    if not 0 <= lines < len(config.line_scores):
        raise ValueError(f"Cannot clear {lines} rows with a single tetromino")
    return config.line_scores[lines] * level


def level_for_lines(lines: int, config: GameConfig = DEFAULT_CONFIG) -> int:
    """Return the level reached after clearing ``lines`` rows in total."""

    return 1 + lines // config.lines_per_level


def can_place(board: Board, tetromino: Tetromino) -> bool:
    """Return ``True`` if every block of ``tetromino`` is on an empty cell."""

    return all(board.is_empty(row, col) for row, col in tetromino.occupied_cells())


def can_move(board: Board, tetromino: Tetromino, dx: int, dy: int) -> bool:
    """Return ``True`` if ``tetromino`` can move by ``dx`` and ``dy`` on ``board``.

    The function checks that translating the piece by the provided offsets would
    keep all of its blocks within the board's boundaries and that none of the
    destination cells are already occupied.
    """

    return can_place(board, tetromino.translate(dx, dy))


def render_grid(board: Board, active: Optional[Tetromino] = None) -> List[List[int]]:
    """Return a copy of the board grid with the active piece overlaid.

    This is a convenience for renderers that want a single 2D array to draw
    without mutating the underlying board state (i.e. without locking the
    piece). Cells occupied by the active piece receive the mapped integer
    value for the piece's shape.
    """

    grid = [[int(value) for value in row] for row in board.grid]
    if active is not None:
        for r, c in active.occupied_cells():
            if board.in_bounds(r, c):
                grid[r][c] = PIECE_VALUES[active.shape]
    return grid
