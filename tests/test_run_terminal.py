import curses
import random

from termtris.config import GameConfig
from termtris.game import Command, Game
from termtris.run_terminal import MESSAGE_MS, Runner, decode_key
from termtris.snapshot import GameStatus
from termtris.tetromino import Tetromino, TetrominoType


def make_runner(tmp_path):
    config = GameConfig(
        save_path=tmp_path / "save.json",
        high_score_path=tmp_path / "highscore.txt",
    )
    return Runner(Game(config, random.Random(0)))


def test_decode_key_maps_controls():
    assert decode_key(curses.KEY_LEFT) is Command.MOVE_LEFT
    assert decode_key(curses.KEY_UP) is Command.ROTATE_CW
    assert decode_key(ord(" ")) is Command.HARD_DROP
    assert decode_key(ord("P")) is Command.PAUSE
    assert decode_key(27) is Command.QUIT
    assert decode_key(ord("x")) is None


def test_handle_key_forwards_to_game(tmp_path):
    runner = make_runner(tmp_path)
    runner.game.active = Tetromino(TetrominoType.O, position=(0, 4))

    assert runner.handle_key(curses.KEY_LEFT) is Command.MOVE_LEFT
    assert runner.game.active.position == (0, 3)
    assert runner.handle_key(ord("z")) is None


def test_advance_ticks_when_interval_elapsed(tmp_path):
    runner = make_runner(tmp_path)
    runner.game.active = Tetromino(TetrominoType.O, position=(0, 4))
    interval = runner.game.tick_interval_ms()

    assert runner.advance(interval - 1) is False
    assert runner.game.active.position == (0, 4)
    assert runner.advance(1) is True
    assert runner.game.active.position == (1, 4)
    assert runner.drop_accum == 0


def test_soft_drop_restarts_gravity_timer(tmp_path):
    runner = make_runner(tmp_path)
    runner.game.active = Tetromino(TetrominoType.O, position=(0, 4))
    runner.drop_accum = 500.0

    runner.handle_key(curses.KEY_DOWN)

    assert runner.drop_accum == 0
    assert runner.game.active.position == (1, 4)


def test_no_ticks_while_paused(tmp_path):
    runner = make_runner(tmp_path)
    piece = runner.game.active
    runner.handle_key(ord("p"))

    assert runner.game.state is GameStatus.PAUSED
    assert runner.advance(10_000) is False
    assert runner.game.active == piece


def test_quit_key_stops_runner(tmp_path):
    runner = make_runner(tmp_path)
    assert runner.running
    runner.handle_key(ord("q"))
    assert not runner.running


def test_status_message_expires(tmp_path):
    runner = make_runner(tmp_path)
    runner.handle_key(ord("s"))
    assert runner.game.message == "Game saved"

    runner.advance(0)
    runner.advance(MESSAGE_MS / 2)
    assert runner.game.message == "Game saved"
    runner.advance(MESSAGE_MS / 2)
    assert runner.game.message is None


def test_repeated_save_restarts_message_timer(tmp_path):
    runner = make_runner(tmp_path)
    runner.handle_key(ord("s"))
    runner.advance(MESSAGE_MS * 0.75)

    runner.handle_key(ord("s"))
    runner.advance(MESSAGE_MS / 2)

    assert runner.game.message == "Game saved"
    runner.advance(MESSAGE_MS / 2)
    assert runner.game.message is None
