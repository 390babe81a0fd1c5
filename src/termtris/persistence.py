"""Save-game and high-score files.

Games are stored as indented JSON so a save can be inspected by hand::

    {
      "width": 10,
      "height": 20,
      "grid": [[null, "T", ...], ...],
      "active": {"kind": "I", "rotation": 0, "row": 0, "col": 3},
      "next": "O",
      "score": 300,
      "level": 1,
      "lines": 2,
      "state": "running"
    }

Unknown keys are ignored when loading.  Every listed key is required; a save
that is missing one, or that describes an impossible game, is rejected as a
whole.  The high-score file holds a single integer.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .board import Board
from .snapshot import GameSnapshot, GameStatus
from .tetromino import ROTATIONS, Tetromino, TetrominoType


LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]

REQUIRED_FIELDS = ("width", "height", "grid", "active", "next", "score", "level", "lines", "state")


class PersistenceError(Exception):
    """Base class for save/load failures."""


class SaveNotFoundError(PersistenceError):
    """The requested file does not exist."""


class SaveParseError(PersistenceError):
    """The file exists but does not describe a valid game."""


class SaveIOError(PersistenceError):
    """The file could not be read or written."""


def _kind(value: Any, field: str) -> TetrominoType:
    try:
        return TetrominoType(value)
    except (TypeError, ValueError):
        raise SaveParseError(f"{field}: unknown tetromino kind {value!r}") from None


def _integer(data: Mapping[str, Any], field: str, minimum: int = 0) -> int:
    value = data[field]
    if isinstance(value, bool) or not isinstance(value, int):
        raise SaveParseError(f"{field}: expected an integer, got {value!r}")
    if value < minimum:
        raise SaveParseError(f"{field}: must be >= {minimum}, got {value}")
    return value


def _piece_to_dict(piece: Optional[Tetromino]) -> Optional[Dict[str, Any]]:
    if piece is None:
        return None
    row, col = piece.position
    return {"kind": piece.shape.value, "rotation": piece.rotation, "row": row, "col": col}


def _piece_from_dict(data: Any) -> Tetromino:
    if not isinstance(data, dict):
        raise SaveParseError("active: expected an object")
    missing = [key for key in ("kind", "rotation", "row", "col") if key not in data]
    if missing:
        raise SaveParseError(f"active: missing {', '.join(missing)}")
    rotation = _integer(data, "rotation")
    if rotation >= ROTATIONS:
        raise SaveParseError(f"active: rotation {rotation} is not in 0..{ROTATIONS - 1}")
    for key in ("row", "col"):
        if isinstance(data[key], bool) or not isinstance(data[key], int):
            raise SaveParseError(f"active: {key} must be an integer")
    return Tetromino(_kind(data["kind"], "active.kind"), rotation, (data["row"], data["col"]))


def snapshot_to_dict(snapshot: GameSnapshot) -> Dict[str, Any]:
    """Return the JSON-ready representation of ``snapshot``."""

    return {
        "width": snapshot.width,
        "height": snapshot.height,
        "grid": [[kind.value if kind else None for kind in row] for row in snapshot.grid],
        "active": _piece_to_dict(snapshot.active),
        "next": snapshot.upcoming.value,
        "score": snapshot.score,
        "level": snapshot.level,
        "lines": snapshot.lines,
        "state": snapshot.state.value,
    }


def snapshot_from_dict(
    data: Any, width: Optional[int] = None, height: Optional[int] = None
) -> GameSnapshot:
    """Validate ``data`` and convert it into a :class:`GameSnapshot`.

    When ``width``/``height`` are given the saved board must have exactly those
    dimensions.

    Raises:
        SaveParseError: If a field is missing, malformed or inconsistent.
    """

    if not isinstance(data, dict):
        raise SaveParseError("Save data must be a JSON object")
    missing = [key for key in REQUIRED_FIELDS if key not in data]
    if missing:
        raise SaveParseError(f"Missing fields: {', '.join(missing)}")

    saved_width = _integer(data, "width", minimum=1)
    saved_height = _integer(data, "height", minimum=1)
    if (width is not None and saved_width != width) or (height is not None and saved_height != height):
        raise SaveParseError(
            f"Board is {saved_width}x{saved_height}, expected {width}x{height}"
        )

    grid = data["grid"]
    if not isinstance(grid, list) or len(grid) != saved_height:
        raise SaveParseError(f"grid: expected {saved_height} rows")
    rows = []
    for r, row in enumerate(grid):
        if not isinstance(row, list) or len(row) != saved_width:
            raise SaveParseError(f"grid: row {r} must have {saved_width} cells")
        rows.append(
            tuple(None if cell is None else _kind(cell, f"grid[{r}]") for cell in row)
        )
    board = Board.from_rows(rows)
    full_rows = board.find_full_rows()
    if full_rows:
        raise SaveParseError(f"grid: row {full_rows[0]} is full and should have been cleared")

    try:
        state = GameStatus(data["state"])
    except (TypeError, ValueError):
        raise SaveParseError(f"state: unknown value {data['state']!r}") from None

    active = None if data["active"] is None else _piece_from_dict(data["active"])
    if active is None and state is not GameStatus.GAME_OVER:
        raise SaveParseError("active: required unless the game is over")
    if active is not None:
        for row, col in active.occupied_cells():
            if not board.is_empty(row, col):
                raise SaveParseError("active: piece overlaps the grid or leaves the board")

    return GameSnapshot(
        width=saved_width,
        height=saved_height,
        grid=board.to_rows(),
        active=active,
        upcoming=_kind(data["next"], "next"),
        score=_integer(data, "score"),
        level=_integer(data, "level", minimum=1),
        lines=_integer(data, "lines"),
        state=state,
    )


def save_game(path: PathLike, snapshot: GameSnapshot) -> None:
    """Write ``snapshot`` to ``path``, replacing any existing file.

    Raises:
        SaveIOError: If the file cannot be written.
    """

    payload = json.dumps(snapshot_to_dict(snapshot), indent=2)
    try:
        Path(path).write_text(payload + "\n", encoding="utf-8")
    except OSError as exc:
        raise SaveIOError(f"Cannot write {path}: {exc.strerror or exc}") from exc
    LOGGER.info("Saved game to %s", path)


def load_game(
    path: PathLike, width: Optional[int] = None, height: Optional[int] = None
) -> GameSnapshot:
    """Read a snapshot previously written by :func:`save_game`.

    Raises:
        SaveNotFoundError: If ``path`` does not exist.
        SaveIOError: If ``path`` cannot be read.
        SaveParseError: If the contents are not a valid save.
    """

    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SaveNotFoundError(f"No save file at {path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise SaveIOError(f"Cannot read {path}: {exc}") from exc
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as exc:
        reason = exc.msg if isinstance(exc, json.JSONDecodeError) else exc
        raise SaveParseError(f"{path} is not valid JSON: {reason}") from exc
    snapshot = snapshot_from_dict(data, width=width, height=height)
    LOGGER.info("Loaded game from %s", path)
    return snapshot


def read_high_score(path: PathLike) -> int:
    """Return the stored high score, or ``0`` when there is none.

    Unparsable contents are logged and treated as no high score.

    Raises:
        SaveIOError: If the file exists but cannot be read.
    """

    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return 0
    except (OSError, UnicodeDecodeError) as exc:
        raise SaveIOError(f"Cannot read {path}: {exc}") from exc
    try:
        value = int(text.strip())
    except ValueError:
        LOGGER.warning("Ignoring malformed high score file %s", path)
        return 0
    if value < 0:
        LOGGER.warning("Ignoring negative high score in %s", path)
        return 0
    return value


def write_high_score(path: PathLike, value: int) -> None:
    """Store ``value`` as the high score, overwriting the previous record.

    Raises:
        ValueError: If ``value`` is negative.
        SaveIOError: If the file cannot be written.
    """

    if value < 0:
        raise ValueError("High score cannot be negative")
    try:
        Path(path).write_text(f"{value}\n", encoding="utf-8")
    except OSError as exc:
        raise SaveIOError(f"Cannot write {path}: {exc.strerror or exc}") from exc
    LOGGER.info("New high score %d written to %s", value, path)
