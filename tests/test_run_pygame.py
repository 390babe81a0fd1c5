import pytest

pygame = pytest.importorskip("pygame")

from termtris.board import PIECE_VALUES
from termtris.game import Command
from termtris.run_pygame import CELL_COLORS, KEY_COMMANDS, SHAPE_COLORS


def test_every_command_but_resume_has_a_key():
    assert set(KEY_COMMANDS.values()) == set(Command) - {Command.RESUME}
    assert KEY_COMMANDS[pygame.K_SPACE] is Command.HARD_DROP


def test_cell_colours_cover_every_piece():
    for shape, value in PIECE_VALUES.items():
        assert CELL_COLORS[value] == SHAPE_COLORS[shape]
    assert CELL_COLORS[0] == (0, 0, 0)
