"""Board representation for the Tetris playfield."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .tetromino import Tetromino, TetrominoType


# Dimensions of the standard Tetris board.
WIDTH = 10
HEIGHT = 20

Grid = NDArray[np.uint8]

# Mapping from ``TetrominoType`` to the integer stored in the grid.  The
# specific numeric values are not important as long as ``0`` represents an empty
# cell.
PIECE_VALUES = {t: i + 1 for i, t in enumerate(TetrominoType)}
VALUE_PIECES = {v: t for t, v in PIECE_VALUES.items()}

CellValue = Union[TetrominoType, int, None]
Rows = Tuple[Tuple[Optional[TetrominoType], ...], ...]


def create_empty_grid(width: int = WIDTH, height: int = HEIGHT) -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((height, width), dtype=np.uint8)


def _cell_value(value: CellValue) -> int:
    if value is None:
        return 0
    if isinstance(value, TetrominoType):
        return PIECE_VALUES[value]
    if value != 0 and value not in VALUE_PIECES:
        raise ValueError(f"Unknown cell value: {value!r}")
    return int(value)


class Board:
    """Tetris board holding the occupied cells and their colour tags."""

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Board dimensions must be positive")
        self.width = width
        self.height = height
        self.grid: Grid = create_empty_grid(width, height)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[TetrominoType]]]) -> "Board":
        """Build a board from a matrix of nullable tetromino types."""

        height = len(rows)
        width = len(rows[0]) if rows else 0
        board = cls(width, height)
        for r, row in enumerate(rows):
            if len(row) != width:
                raise ValueError("Rows must all have the same length")
            for c, kind in enumerate(row):
                board.grid[r, c] = _cell_value(kind)
        return board

    def to_rows(self) -> Rows:
        """Return the grid as a tuple matrix of ``TetrominoType`` or ``None``."""

        return tuple(
            tuple(VALUE_PIECES.get(int(value)) for value in row) for row in self.grid
        )

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get_cell(self, row: int, col: int) -> int:
        """Safely return the value at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            return int(self.grid[row, col])
        raise IndexError("Cell out of bounds")

    def set_cell(self, row: int, col: int, value: CellValue) -> None:
        """Safely set the value at ``(row, col)``.

        ``value`` may be a :class:`TetrominoType`, ``None`` to empty the cell,
        or a raw grid value.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            self.grid[row, col] = np.uint8(_cell_value(value))
        else:
            raise IndexError("Cell out of bounds")

    def color_at(self, row: int, col: int) -> Optional[TetrominoType]:
        """Return the tetromino type stored at ``(row, col)``, if any."""

        return VALUE_PIECES.get(self.get_cell(row, col))

    def is_occupied(self, row: int, col: int) -> bool:
        """Return ``True`` if ``(row, col)`` holds a locked block.

        Coordinates outside the board are simply reported as unoccupied.
        """

        return self.in_bounds(row, col) and bool(self.grid[row, col] != 0)

    def is_empty(self, row: int, col: int) -> bool:
        """Return ``True`` if the cell at ``(row, col)`` is empty.

        Any coordinates outside the board are treated as occupied.  This makes
        collision detection simpler as off-board positions are automatically
        rejected.
        """

        if self.in_bounds(row, col):
            return bool(self.grid[row, col] == 0)
        return False

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def lock_piece(self, tetromino: Tetromino) -> None:
        """Lock the tetromino's blocks into the board grid."""

        coordinates = np.asarray(sorted(tetromino.occupied_cells()), dtype=np.int16)
        if coordinates.size == 0:
            return

        rows, cols = coordinates.T
        if (
            np.any(rows < 0)
            or np.any(rows >= self.height)
            or np.any(cols < 0)
            or np.any(cols >= self.width)
        ):
            raise IndexError("Block out of bounds")

        value = np.uint8(PIECE_VALUES[tetromino.shape])
        self.grid[rows, cols] = value

    def is_row_full(self, row: int) -> bool:
        if not 0 <= row < self.height:
            return False
        return bool(np.all(self.grid[row] != 0))

    def is_top_row_blocked(self) -> bool:
        """Return ``True`` if any cell of the spawn row is occupied."""

        return bool(np.any(self.grid[0] != 0))

    def find_full_rows(self) -> List[int]:
        """Return the indices of completely filled rows in ascending order."""

        full_rows = np.all(self.grid != 0, axis=1)
        return [int(r) for r in np.flatnonzero(full_rows)]

    def clear_row(self, row: int) -> None:
        """Remove ``row`` and shift every row above it down by one.

        A new empty row is inserted at the top of the board.
        """

        if not 0 <= row < self.height:
            raise IndexError("Row out of bounds")
        remaining = np.delete(self.grid, row, axis=0)
        new_row = np.zeros((1, self.width), dtype=self.grid.dtype)
        self.grid = np.vstack((new_row, remaining))

    def clear_rows(self, rows: Iterable[int]) -> int:
        """Clear ``rows`` and return how many were removed.

        Rows are cleared in ascending order.  Clearing a row only moves the
        rows with smaller indices, so the indices still to be cleared remain
        valid without compensation.
        """

        cleared = 0
        for row in sorted(set(rows)):
            self.clear_row(row)
            cleared += 1
        return cleared

    def clear_full_rows(self) -> int:
        """Clear completed rows and return how many were removed."""

        return self.clear_rows(self.find_full_rows())
