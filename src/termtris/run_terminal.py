"""Curses front-end for the Tetris engine.

The loop waits for input with a short timeout so gravity keeps running while
no key is pressed.  All game rules live in :class:`termtris.game.Game`; this
module only decodes keys, paces ticks and draws :meth:`Game.view`.
"""

from __future__ import annotations

import curses
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from .board import VALUE_PIECES
from .config import DEFAULT_CONFIG, GameConfig
from .game import Command, Game
from .persistence import PersistenceError, read_high_score
from .snapshot import GameStatus, GameView
from .tetromino import TetrominoType, shape_blocks


LOGGER = logging.getLogger(__name__)

# Upper bound on how long a single input wait may block
FRAME_MS = 16
# How long save/load status messages stay on screen
MESSAGE_MS = 2000

ESCAPE = 27

KEY_COMMANDS: Dict[int, Command] = {
    curses.KEY_LEFT: Command.MOVE_LEFT,
    curses.KEY_RIGHT: Command.MOVE_RIGHT,
    curses.KEY_UP: Command.ROTATE_CW,
    curses.KEY_DOWN: Command.SOFT_DROP,
    ord(" "): Command.HARD_DROP,
    ord("p"): Command.PAUSE,
    ord("P"): Command.PAUSE,
    ord("s"): Command.SAVE,
    ord("S"): Command.SAVE,
    ord("l"): Command.LOAD,
    ord("L"): Command.LOAD,
    ord("q"): Command.QUIT,
    ord("Q"): Command.QUIT,
    ESCAPE: Command.QUIT,
}

SHAPE_COLORS = {
    TetrominoType.I: curses.COLOR_CYAN,
    TetrominoType.O: curses.COLOR_YELLOW,
    TetrominoType.T: curses.COLOR_MAGENTA,
    TetrominoType.S: curses.COLOR_GREEN,
    TetrominoType.Z: curses.COLOR_RED,
    TetrominoType.J: curses.COLOR_BLUE,
    TetrominoType.L: curses.COLOR_WHITE,
}

CONTROLS = (
    "Controls",
    "<-/->: Move",
    "   Up: Rotate",
    " Down: Soft Drop",
    "Space: Hard Drop",
    "    P: Pause",
    "    S: Save",
    "    L: Load",
    "    Q: Quit",
)

CELL = "[]"
EMPTY = " ."


def decode_key(key: int) -> Optional[Command]:
    """Return the command bound to ``key`` or ``None``."""

    return KEY_COMMANDS.get(key)


@dataclass
class Runner:
    """Per-game loop state: gravity pacing and status message expiry."""

    game: Game
    drop_accum: float = 0.0
    message_age: float = 0.0
    _shown_message: Optional[str] = field(default=None, repr=False)

    @property
    def running(self) -> bool:
        return not self.game.quit_requested and self.game.state is not GameStatus.GAME_OVER

    def handle_key(self, key: int) -> Optional[Command]:
        """Forward ``key`` to the game and return the decoded command."""

        command = decode_key(key)
        if command is None:
            return None
        changed = self.game.apply(command)
        # A manual drop or a freshly loaded game restarts the gravity timer.
        if changed and command in (Command.SOFT_DROP, Command.HARD_DROP, Command.LOAD):
            self.drop_accum = 0.0
        # Saving or loading again shows the message for a full period even
        # when its text has not changed.
        if command in (Command.SAVE, Command.LOAD):
            self._shown_message = self.game.message
            self.message_age = 0.0
        return command

    def advance(self, dt_ms: float) -> bool:
        """Account for ``dt_ms`` elapsed milliseconds; return ``True`` on a tick."""

        self._age_message(dt_ms)
        if self.game.state is not GameStatus.RUNNING:
            return False
        self.drop_accum += dt_ms
        if self.drop_accum < self.game.tick_interval_ms():
            return False
        self.drop_accum = 0.0
        return self.game.tick()

    def _age_message(self, dt_ms: float) -> None:
        if self.game.message != self._shown_message:
            self._shown_message = self.game.message
            self.message_age = 0.0
            return
        if self._shown_message is None:
            return
        self.message_age += dt_ms
        if self.message_age >= MESSAGE_MS:
            self.game.message = None
            self._shown_message = None
            self.message_age = 0.0


# ----------------------------------------------------------------------
# Drawing
# ----------------------------------------------------------------------
def safe_addstr(stdscr, y: int, x: int, text: str, attr: int = 0) -> None:
    """Write ``text`` at ``(y, x)`` ignoring writes outside the window."""

    height, width = stdscr.getmaxyx()
    if y < 0 or y >= height or x >= width:
        return
    try:
        stdscr.addstr(y, max(0, x), text[: max(0, width - x - 1)], attr)
    except curses.error:
        pass


def _init_colors() -> None:
    if not curses.has_colors():
        return
    curses.start_color()
    try:
        curses.use_default_colors()
        background = -1
    except curses.error:
        background = curses.COLOR_BLACK
    for kind, color in SHAPE_COLORS.items():
        curses.init_pair(_pair_number(kind), color, background)


def _pair_number(kind: TetrominoType) -> int:
    return list(TetrominoType).index(kind) + 1


def _kind_attr(kind: TetrominoType) -> int:
    if not curses.has_colors():
        return curses.A_BOLD
    return curses.color_pair(_pair_number(kind)) | curses.A_BOLD


def _centered(stdscr, y: int, text: str, attr: int = 0) -> None:
    _, width = stdscr.getmaxyx()
    safe_addstr(stdscr, y, (width - len(text)) // 2, text, attr)


def draw_frame(stdscr, view: GameView, high_score: int) -> None:
    """Draw the board, the side panel and any banner for ``view``."""

    stdscr.erase()
    rows = len(view.grid)
    cols = len(view.grid[0]) if rows else 0
    top, left = 1, 1

    safe_addstr(stdscr, top - 1, left, "+" + "-" * (cols * 2) + "+")
    for r, row in enumerate(view.grid):
        y = top + r
        safe_addstr(stdscr, y, left, "|")
        for c, value in enumerate(row):
            kind = VALUE_PIECES.get(value)
            if kind is None:
                safe_addstr(stdscr, y, left + 1 + c * 2, EMPTY, curses.A_DIM)
            else:
                safe_addstr(stdscr, y, left + 1 + c * 2, CELL, _kind_attr(kind))
        safe_addstr(stdscr, y, left + 1 + cols * 2, "|")
    safe_addstr(stdscr, top + rows, left, "+" + "-" * (cols * 2) + "+")

    panel = left + cols * 2 + 4
    safe_addstr(stdscr, 1, panel, "Score", curses.A_BOLD)
    safe_addstr(stdscr, 2, panel, f"{view.score:08d}")
    safe_addstr(stdscr, 3, panel, f"High  {high_score}")
    safe_addstr(stdscr, 4, panel, f"Level {view.level}")
    safe_addstr(stdscr, 5, panel, f"Lines {view.lines}")

    safe_addstr(stdscr, 7, panel, "Next", curses.A_BOLD)
    for dr, dc in shape_blocks(view.next_kind, 0):
        safe_addstr(stdscr, 8 + dr, panel + dc * 2, CELL, _kind_attr(view.next_kind))

    for i, line in enumerate(CONTROLS):
        safe_addstr(stdscr, 12 + i, panel, line, curses.A_BOLD if i == 0 else 0)

    banner = None
    if view.state is GameStatus.PAUSED:
        banner = "PAUSED"
    elif view.state is GameStatus.GAME_OVER:
        banner = "GAME OVER"
    if banner:
        safe_addstr(stdscr, top + rows // 2, left + 1 + (cols * 2 - len(banner)) // 2, banner, curses.A_REVERSE)
    if view.message:
        safe_addstr(stdscr, top + rows + 1, left, view.message)
    stdscr.refresh()


def show_start_screen(stdscr) -> int:
    """Display the title and block until a key is pressed."""

    stdscr.erase()
    height, _ = stdscr.getmaxyx()
    _centered(stdscr, height // 2 - 2, "TERMTRIS", curses.A_BOLD)
    _centered(stdscr, height // 2, "Press any key to start")
    stdscr.refresh()
    stdscr.timeout(-1)
    key = stdscr.getch()
    stdscr.timeout(FRAME_MS)
    return key


def show_end_screen(stdscr, score: int, high_score: int, new_record: bool, message: Optional[str] = None) -> int:
    """Display the final score and wait for ``R``, ``L`` or ``Q``."""

    stdscr.erase()
    height, _ = stdscr.getmaxyx()
    _centered(stdscr, height // 2 - 3, "GAME OVER", curses.A_BOLD)
    _centered(stdscr, height // 2 - 1, f"Final Score: {score}")
    _centered(stdscr, height // 2, f"High Score: {high_score}")
    if new_record:
        _centered(stdscr, height // 2 + 1, "New high score!", curses.A_REVERSE)
    _centered(stdscr, height // 2 + 3, "R: Restart, L: Load, Q: Quit")
    if message:
        _centered(stdscr, height // 2 + 5, message)
    stdscr.refresh()
    stdscr.timeout(-1)
    try:
        while True:
            key = stdscr.getch()
            if key in (ord("r"), ord("R"), ord("l"), ord("L"), ord("q"), ord("Q"), ESCAPE):
                return key
    finally:
        stdscr.timeout(FRAME_MS)


# ----------------------------------------------------------------------
# Loop
# ----------------------------------------------------------------------
def _drain_input(stdscr) -> None:
    stdscr.nodelay(True)
    try:
        while stdscr.getch() != -1:
            pass
    finally:
        stdscr.nodelay(False)
        stdscr.timeout(FRAME_MS)


def play(stdscr, runner: Runner, high_score: int) -> None:
    """Run ``runner`` until the player quits or the game ends."""

    last = time.monotonic()
    while runner.running:
        key = stdscr.getch()
        if key != -1:
            runner.handle_key(key)
        now = time.monotonic()
        runner.advance((now - last) * 1000.0)
        last = now
        draw_frame(stdscr, runner.game.view(), max(high_score, runner.game.score))


def run(stdscr, config: GameConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None) -> None:
    """Start screen, game, end screen; repeat until the player quits."""

    rng = rng or random.Random()
    curses.curs_set(0)
    stdscr.keypad(True)
    stdscr.timeout(FRAME_MS)
    _init_colors()

    try:
        high_score = read_high_score(config.high_score_path)
    except PersistenceError as exc:
        LOGGER.warning("Could not read high score: %s", exc)
        high_score = 0

    restart = True
    while restart:
        show_start_screen(stdscr)
        _drain_input(stdscr)
        runner = Runner(Game(config, rng))
        while True:
            play(stdscr, runner, high_score)
            game = runner.game
            if game.state is not GameStatus.GAME_OVER:
                # Quit mid-game
                return
            new_record = game.record_high_score()
            high_score = max(high_score, game.score)
            key = show_end_screen(stdscr, game.score, high_score, new_record, game.message)
            if key in (ord("l"), ord("L")):
                # A failed load keeps the finished game, so the end screen returns.
                runner.handle_key(key)
                continue
            if key in (ord("q"), ord("Q"), ESCAPE):
                game.apply(Command.QUIT)
                restart = False
            break
        _drain_input(stdscr)


def main(config: GameConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None) -> None:
    curses.wrapper(run, config, rng)
