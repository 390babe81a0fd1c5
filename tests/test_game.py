from __future__ import annotations

import random

import pytest

from termtris.config import GameConfig
from termtris.game import Command, Game
from termtris.snapshot import GameStatus
from termtris.tetromino import Tetromino, TetrominoType
from termtris.utils import can_move, line_clear_score


def make_game(tmp_path, seed: int = 0) -> Game:
    config = GameConfig(
        save_path=tmp_path / "save.json",
        high_score_path=tmp_path / "highscore.txt",
    )
    return Game(config, random.Random(seed))


def drop(game: Game, piece: Tetromino) -> int:
    """Make ``piece`` the active piece and hard-drop it."""

    game.active = piece
    game.upcoming = TetrominoType.O
    lines_before = game.lines
    assert game.apply(Command.HARD_DROP)
    return game.lines - lines_before


def test_new_game_starts_running_with_empty_board(tmp_path) -> None:
    game = make_game(tmp_path)
    assert game.state is GameStatus.RUNNING
    assert game.score == 0
    assert game.level == 1
    assert game.lines == 0
    assert game.board.occupied_count() == 0
    assert game.active is not None
    assert game.active.position[0] == 0
    assert game.upcoming in TetrominoType


def test_same_seed_gives_independent_identical_games(tmp_path) -> None:
    first = make_game(tmp_path, seed=9)
    second = make_game(tmp_path, seed=9)
    for _ in range(10):
        first.apply(Command.HARD_DROP)
        second.apply(Command.HARD_DROP)
    assert first.snapshot() == second.snapshot()
    assert first.board is not second.board


def test_moves_are_rejected_at_the_wall(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.O, position=(0, 0))

    assert game.apply(Command.MOVE_LEFT) is False
    assert game.active.position == (0, 0)
    assert game.apply(Command.MOVE_RIGHT) is True
    assert game.active.position == (0, 1)


def test_rotation_is_rejected_when_blocked(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.I, position=(0, 3))
    game.board.set_cell(2, 3, TetrominoType.Z)

    assert game.apply(Command.ROTATE_CW) is False
    assert game.active.rotation == 0


def test_four_rotations_in_open_space_restore_cells(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.T, position=(5, 4))
    cells = game.active.occupied_cells()

    for _ in range(4):
        assert game.apply(Command.ROTATE_CW) is True

    assert game.active.occupied_cells() == cells


def test_soft_drop_never_locks(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.O, position=(18, 4))

    assert game.apply(Command.SOFT_DROP) is False
    assert game.apply(Command.SOFT_DROP) is False
    assert game.active.position == (18, 4)
    assert game.board.occupied_count() == 0


def test_soft_drop_moves_one_row(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.L, position=(0, 3))
    assert game.apply(Command.SOFT_DROP) is True
    assert game.active.position == (1, 3)


def test_tick_moves_down_then_locks(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.O, position=(17, 0))
    game.upcoming = TetrominoType.T

    assert game.tick()
    assert game.active.position == (18, 0)
    assert game.tick()

    assert game.board.occupied_count() == 4
    assert game.active == Tetromino.at_spawn(TetrominoType.T, game.board.width)


def test_hard_drop_locks_into_previously_empty_cells(tmp_path) -> None:
    game = make_game(tmp_path)
    game.board.set_cell(19, 3, TetrominoType.I)
    game.board.set_cell(15, 4, TetrominoType.I)
    piece = Tetromino(TetrominoType.T, position=(0, 3))
    landed = piece
    while can_move(game.board, landed, 0, 1):
        landed = landed.translate(0, 1)
    empty_before = {
        (r, c)
        for r in range(game.board.height)
        for c in range(game.board.width)
        if not game.board.is_occupied(r, c)
    }

    assert drop(game, piece) == 0

    filled = {
        (r, c)
        for r in range(game.board.height)
        for c in range(game.board.width)
        if game.board.is_occupied(r, c)
    }
    new_cells = filled - ({(19, 3), (15, 4)})
    assert new_cells == landed.occupied_cells()
    assert new_cells <= empty_before
    assert landed.position == (13, 3)


def test_single_line_clear_from_successive_locks(tmp_path) -> None:
    game = make_game(tmp_path)

    drop(game, Tetromino(TetrominoType.I, position=(0, 4)))
    drop(game, Tetromino(TetrominoType.O, position=(0, 8)))
    before_clear = game.board.to_rows()
    assert game.score == 0

    assert drop(game, Tetromino(TetrominoType.I, position=(0, 0))) == 1

    assert game.lines == 1
    assert game.score == line_clear_score(1, 1, game.config) == 100
    assert game.board.to_rows()[19] == before_clear[18]
    assert game.board.color_at(19, 8) is TetrominoType.O
    assert game.board.occupied_count() == 2


def test_four_line_clear_pays_tetris_bonus(tmp_path) -> None:
    game = make_game(tmp_path)
    for row in range(16, 20):
        for col in range(1, game.board.width):
            game.board.set_cell(row, col, TetrominoType.J)

    assert drop(game, Tetromino(TetrominoType.I, rotation=1, position=(0, 0))) == 4

    assert game.score == 800
    assert game.score > 4 * line_clear_score(1, 1, game.config)
    assert game.board.occupied_count() == 0


def test_level_rises_every_ten_lines_and_scales_score(tmp_path) -> None:
    game = make_game(tmp_path)
    game.lines = 9
    for col in range(4, game.board.width):
        game.board.set_cell(19, col, TetrominoType.S)

    drop(game, Tetromino(TetrominoType.I, position=(0, 0)))

    assert game.lines == 10
    assert game.level == 2
    assert game.score == 100

    for col in range(4, game.board.width):
        game.board.set_cell(19, col, TetrominoType.S)
    drop(game, Tetromino(TetrominoType.I, position=(0, 0)))
    assert game.score == 100 + 200


def test_tick_interval_shrinks_with_level(tmp_path) -> None:
    game = make_game(tmp_path)
    slow = game.tick_interval_ms()
    game.level = 5
    assert game.tick_interval_ms() < slow


def test_pause_blocks_movement_and_gravity(tmp_path) -> None:
    game = make_game(tmp_path)
    piece = game.active

    assert game.apply(Command.PAUSE)
    assert game.state is GameStatus.PAUSED
    for command in (Command.MOVE_LEFT, Command.MOVE_RIGHT, Command.ROTATE_CW, Command.SOFT_DROP, Command.HARD_DROP):
        assert game.apply(command) is False
    assert game.tick() is False
    assert game.active == piece

    assert game.apply(Command.RESUME)
    assert game.state is GameStatus.RUNNING
    assert game.apply(Command.RESUME) is False


def test_pause_toggles(tmp_path) -> None:
    game = make_game(tmp_path)
    game.apply(Command.PAUSE)
    game.apply(Command.PAUSE)
    assert game.state is GameStatus.RUNNING


def test_view_overlays_active_piece(tmp_path) -> None:
    game = make_game(tmp_path)
    game.active = Tetromino(TetrominoType.O, position=(0, 4))
    game.upcoming = TetrominoType.Z

    view = game.view()

    assert view.active_kind is TetrominoType.O
    assert view.next_kind is TetrominoType.Z
    assert view.active_cells == {(0, 4), (0, 5), (1, 4), (1, 5)}
    assert view.grid[0][4] != 0
    assert game.board.occupied_count() == 0


@pytest.mark.parametrize("lines", [1, 2, 3, 4])
def test_scoring_is_deterministic_and_monotonic(lines) -> None:
    config = GameConfig()
    for level in (1, 2, 7):
        assert line_clear_score(lines, level, config) == line_clear_score(lines, level, config)
        if lines > 1:
            assert line_clear_score(lines, level, config) > line_clear_score(lines - 1, level, config)
