"""Simple pygame front-end for the Tetris engine.

A windowed alternative to :mod:`termtris.run_terminal`.  It shares the same
:class:`~termtris.game.Game` commands and flow: start screen, play, end screen
with restart.  ``pygame`` is an optional dependency (``pip install
termtris[pygame]``).
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Optional

import pygame

from .board import VALUE_PIECES
from .config import DEFAULT_CONFIG, GameConfig
from .game import Command, Game
from .persistence import PersistenceError, read_high_score
from .snapshot import GameStatus, GameView
from .tetromino import TetrominoType, shape_blocks

LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 30
# Width of the score/next-piece panel in pixels
PANEL_WIDTH = 180
# Frames per second to run the game loop at
FPS = 60

# Colours for each tetromino type
SHAPE_COLORS = {
    TetrominoType.I: (0, 255, 255),
    TetrominoType.O: (255, 255, 0),
    TetrominoType.T: (128, 0, 128),
    TetrominoType.S: (0, 255, 0),
    TetrominoType.Z: (255, 0, 0),
    TetrominoType.J: (0, 0, 255),
    TetrominoType.L: (255, 165, 0),
}

# Mapping from the integer stored in the board grid to a colour
CELL_COLORS = {0: (0, 0, 0)}
for value, shape in VALUE_PIECES.items():
    CELL_COLORS[value] = SHAPE_COLORS[shape]

KEY_COMMANDS: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_UP: Command.ROTATE_CW,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
    pygame.K_p: Command.PAUSE,
    pygame.K_s: Command.SAVE,
    pygame.K_l: Command.LOAD,
    pygame.K_q: Command.QUIT,
    pygame.K_ESCAPE: Command.QUIT,
}


def draw_board(screen: pygame.Surface, view: GameView) -> None:
    """Render the grid, including the active piece."""

    for r, row in enumerate(view.grid):
        for c, value in enumerate(row):
            rect = pygame.Rect(c * CELL_SIZE, r * CELL_SIZE, CELL_SIZE, CELL_SIZE)
            pygame.draw.rect(screen, CELL_COLORS[value], rect)
            pygame.draw.rect(screen, (50, 50, 50), rect, 1)


def draw_panel(screen: pygame.Surface, font: pygame.font.Font, view: GameView, high_score: int) -> None:
    """Render score, level, next piece and status text beside the board."""

    x = len(view.grid[0]) * CELL_SIZE + 15
    lines = [
        f"Score: {view.score}",
        f"High: {high_score}",
        f"Level: {view.level}",
        f"Lines: {view.lines}",
        "Next:",
    ]
    for i, text in enumerate(lines):
        screen.blit(font.render(text, True, (255, 255, 255)), (x, 10 + i * 24))
    size = CELL_SIZE // 2
    for dr, dc in shape_blocks(view.next_kind, 0):
        rect = pygame.Rect(x + dc * size, 140 + dr * size, size, size)
        pygame.draw.rect(screen, SHAPE_COLORS[view.next_kind], rect)
    if view.state is GameStatus.PAUSED:
        screen.blit(font.render("PAUSED", True, (0, 255, 255)), (x, 200))
    if view.message:
        screen.blit(font.render(view.message, True, (0, 255, 0)), (x, 230))


class GameRunner:
    """Own one window and run games in it until the player quits."""

    def __init__(self, config: GameConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None) -> None:
        self.config = config
        self.rng = rng or random.Random()
        self._screen: Optional[pygame.Surface] = None
        self._font: Optional[pygame.font.Font] = None
        self._clock: Optional[pygame.time.Clock] = None
        self._drop_timer = 0.0
        self.high_score = 0

    def _wait_for_key(self) -> Optional[int]:
        while True:
            event = pygame.event.wait()
            if event.type == pygame.QUIT:
                return None
            if event.type == pygame.KEYDOWN:
                return event.key

    def _show_lines(self, lines: list[str]) -> None:
        assert self._screen is not None and self._font is not None
        self._screen.fill((0, 0, 0))
        width, height = self._screen.get_size()
        for i, text in enumerate(lines):
            surface = self._font.render(text, True, (255, 255, 255))
            y = height // 2 - 40 + i * 28
            self._screen.blit(surface, ((width - surface.get_width()) // 2, y))
        pygame.display.flip()

    def _handle_key(self, game: Game, key: int) -> None:
        command = KEY_COMMANDS.get(key)
        if command is None:
            return
        if game.apply(command) and command in (Command.SOFT_DROP, Command.HARD_DROP, Command.LOAD):
            self._drop_timer = 0.0

    def _play(self, game: Game) -> None:
        assert self._screen is not None and self._font is not None and self._clock is not None
        self._drop_timer = 0.0
        while not game.quit_requested and game.state is not GameStatus.GAME_OVER:
            dt = self._clock.tick(FPS)
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.apply(Command.QUIT)
                elif event.type == pygame.KEYDOWN:
                    self._handle_key(game, event.key)

            if game.state is GameStatus.RUNNING:
                self._drop_timer += dt
                if self._drop_timer >= game.tick_interval_ms():
                    self._drop_timer = 0.0
                    game.tick()

            view = game.view()
            self._screen.fill((0, 0, 0))
            draw_board(self._screen, view)
            draw_panel(self._screen, self._font, view, max(self.high_score, view.score))
            pygame.display.flip()

    def run(self) -> None:
        pygame.init()
        try:
            board_px = self.config.width * CELL_SIZE + PANEL_WIDTH
            board_py = self.config.height * CELL_SIZE
            self._screen = pygame.display.set_mode((board_px, board_py))
            pygame.display.set_caption("termtris")
            self._font = pygame.font.SysFont(None, 26)
            self._clock = pygame.time.Clock()
            try:
                self.high_score = read_high_score(self.config.high_score_path)
            except PersistenceError as exc:
                LOGGER.warning("Could not read high score: %s", exc)

            while True:
                self._show_lines(["TERMTRIS", "Press any key to start"])
                if self._wait_for_key() is None:
                    return
                game = Game(self.config, self.rng)
                while True:
                    self._play(game)
                    if game.state is not GameStatus.GAME_OVER:
                        return
                    new_record = game.record_high_score()
                    self.high_score = max(self.high_score, game.score)
                    lines = ["GAME OVER", f"Final Score: {game.score}", f"High Score: {self.high_score}"]
                    if new_record:
                        lines.append("New high score!")
                    lines.append("R: Restart, L: Load, Q: Quit")
                    if game.message:
                        lines.append(game.message)
                    self._show_lines(lines)
                    key = self._wait_for_key()
                    if key in (None, pygame.K_q, pygame.K_ESCAPE):
                        game.apply(Command.QUIT)
                        return
                    if key == pygame.K_l:
                        game.apply(Command.LOAD)
                        continue
                    if key == pygame.K_r:
                        break
        finally:
            pygame.quit()
            LOGGER.info("Window closed")


def main(config: GameConfig = DEFAULT_CONFIG, rng: Optional[random.Random] = None) -> None:
    GameRunner(config, rng).run()
