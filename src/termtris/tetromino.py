"""Tetromino definitions and basic behaviour.

Pieces are immutable: :meth:`Tetromino.rotate` and :meth:`Tetromino.translate`
return candidate pieces which the game validates against the board before
committing them.  Rotation states come from a fixed lookup table so collision
checks stay in exact integer coordinates.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Set, Tuple

RotationState = List[Tuple[int, int]]

ROTATIONS = 4


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    O = "O"
    T = "T"
    S = "S"
    Z = "Z"
    J = "J"
    L = "L"


# Clockwise rotation states as ``(row, col)`` offsets.  Each state is
# normalised so that its minimum row and column are zero, i.e. the piece's
# position is the top-left corner of its bounding box.
TETROMINO_SHAPES: Dict[TetrominoType, List[RotationState]] = {
    TetrominoType.I: [
        [(0, 0), (0, 1), (0, 2), (0, 3)],
        [(0, 0), (1, 0), (2, 0), (3, 0)],
        [(0, 0), (0, 1), (0, 2), (0, 3)],
        [(0, 0), (1, 0), (2, 0), (3, 0)],
    ],
    TetrominoType.O: [
        [(0, 0), (0, 1), (1, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 0), (1, 1)],
        [(0, 0), (0, 1), (1, 0), (1, 1)],
    ],
    TetrominoType.T: [
        [(0, 0), (0, 1), (0, 2), (1, 1)],
        [(0, 1), (1, 0), (1, 1), (2, 1)],
        [(0, 1), (1, 0), (1, 1), (1, 2)],
        [(0, 0), (1, 0), (1, 1), (2, 0)],
    ],
    TetrominoType.S: [
        [(0, 1), (0, 2), (1, 0), (1, 1)],
        [(0, 0), (1, 0), (1, 1), (2, 1)],
        [(0, 1), (0, 2), (1, 0), (1, 1)],
        [(0, 0), (1, 0), (1, 1), (2, 1)],
    ],
    TetrominoType.Z: [
        [(0, 0), (0, 1), (1, 1), (1, 2)],
        [(0, 1), (1, 0), (1, 1), (2, 0)],
        [(0, 0), (0, 1), (1, 1), (1, 2)],
        [(0, 1), (1, 0), (1, 1), (2, 0)],
    ],
    TetrominoType.J: [
        [(0, 0), (1, 0), (1, 1), (1, 2)],
        [(0, 0), (0, 1), (1, 0), (2, 0)],
        [(0, 0), (0, 1), (0, 2), (1, 2)],
        [(0, 1), (1, 1), (2, 0), (2, 1)],
    ],
    TetrominoType.L: [
        [(0, 2), (1, 0), (1, 1), (1, 2)],
        [(0, 0), (1, 0), (2, 0), (2, 1)],
        [(0, 0), (0, 1), (0, 2), (1, 0)],
        [(0, 0), (0, 1), (1, 1), (2, 1)],
    ],
}


def shape_blocks(shape: TetrominoType, rotation: int) -> RotationState:
    """Return the block offsets for ``shape`` at ``rotation``.

    Parameters
    ----------
    shape:
        The :class:`TetrominoType` to query.
    rotation:
        Index of the desired rotation state.  Values are wrapped so any integer
        is accepted.
    """

    states = TETROMINO_SHAPES[shape]
    return states[rotation % len(states)]


def shape_width(shape: TetrominoType, rotation: int = 0) -> int:
    """Return the number of columns spanned by ``shape`` at ``rotation``."""

    return max(dc for _, dc in shape_blocks(shape, rotation)) + 1


def random_type(rng: random.Random) -> TetrominoType:
    """Pick a tetromino type uniformly at random using ``rng``."""

    return rng.choice(list(TetrominoType))


@dataclass(frozen=True)
class Tetromino:
    """Falling piece: a shape, a rotation state and a top-left anchor."""

    shape: TetrominoType
    rotation: int = 0
    position: Tuple[int, int] = (0, 0)  # (row, col)

    @classmethod
    def at_spawn(cls, shape: TetrominoType, width: int) -> "Tetromino":
        """Return ``shape`` in its spawn orientation centred on the top row."""

        col = (width - shape_width(shape)) // 2
        return cls(shape, rotation=0, position=(0, col))

    @classmethod
    def spawn(cls, rng: random.Random, width: int) -> "Tetromino":
        """Spawn a piece of a uniformly chosen type.

        Each call is an independent draw from ``rng``; there is no bag
        randomiser, so repeats are possible.
        """

        return cls.at_spawn(random_type(rng), width)

    def rotate(self, direction: int = 1) -> "Tetromino":
        """Return a copy rotated by a quarter turn.

        Positive ``direction`` rotates clockwise, negative counter-clockwise.
        The anchor is left unchanged; there is no wall-kick correction.
        """

        step = 1 if direction > 0 else -1
        return replace(self, rotation=(self.rotation + step) % ROTATIONS)

    def translate(self, dx: int, dy: int) -> "Tetromino":
        """Return a copy moved ``dx`` columns and ``dy`` rows."""

        row, col = self.position
        return replace(self, position=(row + dy, col + dx))

    def occupied_cells(self) -> Set[Tuple[int, int]]:
        """Return the global ``(row, col)`` cells covered by this piece."""

        row, col = self.position
        return {(row + dr, col + dc) for dr, dc in shape_blocks(self.shape, self.rotation)}
