"""High level game state container and command handling."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .board import Board
from .config import DEFAULT_CONFIG, GameConfig
from .persistence import (
    PersistenceError,
    load_game,
    read_high_score,
    save_game,
    write_high_score,
)
from .snapshot import GameSnapshot, GameStatus, GameView
from .tetromino import Tetromino, TetrominoType, random_type
from .utils import can_move, can_place, gravity_interval_ms, level_for_lines, line_clear_score, render_grid


LOGGER = logging.getLogger(__name__)


class Command(str, Enum):
    """Discrete player inputs forwarded by a front-end."""

    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    ROTATE_CW = "rotate_cw"
    SOFT_DROP = "soft_drop"
    HARD_DROP = "hard_drop"
    PAUSE = "pause"
    RESUME = "resume"
    SAVE = "save"
    LOAD = "load"
    QUIT = "quit"


@dataclass
class Game:
    """Mutable state for a Tetris game session.

    A game owns its board, the falling piece and the identifier of the next
    piece.  Randomness comes from ``rng`` so a seeded :class:`random.Random`
    yields a reproducible piece sequence.  Front-ends forward player input
    through :meth:`apply`, call :meth:`tick` every :meth:`tick_interval_ms`
    and draw :meth:`view`.
    """

    config: GameConfig = DEFAULT_CONFIG
    rng: random.Random = field(default_factory=random.Random)
    board: Board = field(init=False)
    active: Optional[Tetromino] = field(init=False, default=None)
    upcoming: TetrominoType = field(init=False)
    score: int = field(init=False, default=0)
    level: int = field(init=False, default=1)
    lines: int = field(init=False, default=0)
    state: GameStatus = field(init=False, default=GameStatus.RUNNING)
    message: Optional[str] = field(init=False, default=None)
    quit_requested: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        self.reset_game()

    def reset_game(self) -> None:
        """Reset the entire game state for a new game."""

        self.board = Board(self.config.width, self.config.height)
        self.active = Tetromino.spawn(self.rng, self.board.width)
        self.upcoming = random_type(self.rng)
        self.score = 0
        self.level = 1
        self.lines = 0
        self.state = GameStatus.RUNNING
        self.message = None
        self.quit_requested = False
        LOGGER.info("New %dx%d game started", self.board.width, self.board.height)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def apply(self, command: Command) -> bool:
        """Apply ``command`` and return ``True`` if the game changed.

        Commands that make no sense in the current state, and moves blocked by
        the board, are ignored and return ``False``.
        """

        if command is Command.QUIT:
            self.quit_requested = True
            if self.state is not GameStatus.RUNNING:
                self.record_high_score()
            return True
        if command is Command.SAVE:
            return self.save()
        if command is Command.LOAD:
            return self.load()

        if self.state is GameStatus.GAME_OVER:
            LOGGER.debug("Ignoring %s after game over", command.value)
            return False

        if command is Command.PAUSE:
            if self.state is GameStatus.PAUSED:
                return self._resume()
            self.state = GameStatus.PAUSED
            LOGGER.info("Paused")
            return True
        if command is Command.RESUME:
            return self._resume()

        if self.state is GameStatus.PAUSED or self.active is None:
            return False

        if command is Command.MOVE_LEFT:
            return self._try_commit(self.active.translate(-1, 0))
        if command is Command.MOVE_RIGHT:
            return self._try_commit(self.active.translate(1, 0))
        if command is Command.ROTATE_CW:
            return self._try_commit(self.active.rotate(1))
        if command is Command.SOFT_DROP:
            return self._try_commit(self.active.translate(0, 1))
        if command is Command.HARD_DROP:
            self.hard_drop()
            return True
        raise ValueError(f"Unhandled command: {command!r}")

    def _resume(self) -> bool:
        if self.state is not GameStatus.PAUSED:
            return False
        self.state = GameStatus.RUNNING
        LOGGER.info("Resumed")
        return True

    def _try_commit(self, candidate: Tetromino) -> bool:
        if not can_place(self.board, candidate):
            return False
        self.active = candidate
        return True

    def hard_drop(self) -> int:
        """Drop the active piece to the floor, lock it and return the rows cleared."""

        if self.active is None:
            return 0
        while can_move(self.board, self.active, 0, 1):
            self.active = self.active.translate(0, 1)
        return self._lock_active()

    def tick(self) -> bool:
        """Advance gravity by one row.

        When the piece cannot fall any further it is locked in place.  Returns
        ``True`` if anything happened, ``False`` when the game is not running.
        """

        if self.state is not GameStatus.RUNNING or self.active is None:
            return False
        if can_move(self.board, self.active, 0, 1):
            self.active = self.active.translate(0, 1)
        else:
            self._lock_active()
        return True

    def tick_interval_ms(self) -> float:
        """Return the delay between gravity ticks at the current level."""

        return gravity_interval_ms(self.level, self.config)

    def _lock_active(self) -> int:
        """Lock the active piece, clear rows and spawn the next piece."""

        if self.active is None:
            return 0
        self.board.lock_piece(self.active)

        cleared = self.board.clear_full_rows()
        if cleared:
            self.score += line_clear_score(cleared, self.level, self.config)
            self.lines += cleared
            level = max(self.level, level_for_lines(self.lines, self.config))
            if level != self.level:
                LOGGER.info("Level up: %d", level)
            self.level = level
            LOGGER.info("Cleared %d row(s). Score: %d", cleared, self.score)

        self.active = Tetromino.at_spawn(self.upcoming, self.board.width)
        self.upcoming = random_type(self.rng)
        if not can_place(self.board, self.active):
            self.active = None
            self.state = GameStatus.GAME_OVER
            LOGGER.info("Game over. Final score: %d", self.score)
        return cleared

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def save(self, path: Union[str, Path, None] = None) -> bool:
        """Write the game to ``path`` (default: the configured save file).

        Failures are reported through :attr:`message`; the game itself is
        never changed by saving.
        """

        target = self.config.save_path if path is None else Path(path)
        try:
            save_game(target, self.snapshot())
        except PersistenceError as exc:
            LOGGER.warning("Save failed: %s", exc)
            self.message = f"Save failed: {exc}"
            return False
        self.message = "Game saved"
        return True

    def load(self, path: Union[str, Path, None] = None) -> bool:
        """Replace the game with the one stored at ``path``.

        The current game is left untouched unless the whole file is valid.
        """

        source = self.config.save_path if path is None else Path(path)
        try:
            snapshot = load_game(source, width=self.board.width, height=self.board.height)
        except PersistenceError as exc:
            LOGGER.warning("Load failed: %s", exc)
            self.message = f"Load failed: {exc}"
            return False
        self.restore(snapshot)
        self.message = "Game loaded"
        return True

    def record_high_score(self) -> bool:
        """Persist the score if it beats the stored high score.

        Returns ``True`` when a new record was written.
        """

        path = self.config.high_score_path
        try:
            if self.score <= read_high_score(path):
                return False
            write_high_score(path, self.score)
        except PersistenceError as exc:
            LOGGER.warning("High score not saved: %s", exc)
            self.message = f"High score not saved: {exc}"
            return False
        return True

    def snapshot(self) -> GameSnapshot:
        """Return an immutable copy of the persistent game state."""

        return GameSnapshot(
            width=self.board.width,
            height=self.board.height,
            grid=self.board.to_rows(),
            active=self.active,
            upcoming=self.upcoming,
            score=self.score,
            level=self.level,
            lines=self.lines,
            state=self.state,
        )

    def restore(self, snapshot: GameSnapshot) -> None:
        """Replace the game state with ``snapshot``.

        Raises:
            ValueError: If the snapshot's board size differs from this game's.
        """

        if (snapshot.width, snapshot.height) != (self.board.width, self.board.height):
            raise ValueError(
                f"Snapshot board is {snapshot.width}x{snapshot.height}, "
                f"game board is {self.board.width}x{self.board.height}"
            )
        self.board = Board.from_rows(snapshot.grid)
        self.active = snapshot.active
        self.upcoming = snapshot.upcoming
        self.score = snapshot.score
        self.level = snapshot.level
        self.lines = snapshot.lines
        self.state = snapshot.state
        self.quit_requested = False

    def view(self) -> GameView:
        """Return the read-only data a renderer draws."""

        cells = frozenset(self.active.occupied_cells()) if self.active else frozenset()
        return GameView(
            grid=render_grid(self.board, self.active),
            active_cells=cells,
            active_kind=self.active.shape if self.active else None,
            next_kind=self.upcoming,
            score=self.score,
            level=self.level,
            lines=self.lines,
            state=self.state,
            message=self.message,
        )
