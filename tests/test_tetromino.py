import random

import pytest

from termtris.tetromino import Tetromino, TetrominoType, shape_blocks, shape_width


@pytest.mark.parametrize("shape", list(TetrominoType))
def test_four_rotations_restore_the_piece(shape):
    piece = Tetromino(shape, position=(5, 4))
    rotated = piece
    for _ in range(4):
        rotated = rotated.rotate()
    assert rotated == piece
    assert rotated.occupied_cells() == piece.occupied_cells()


@pytest.mark.parametrize("shape", list(TetrominoType))
def test_rotation_states_are_normalised_tetrominoes(shape):
    for rotation in range(4):
        cells = shape_blocks(shape, rotation)
        assert len(set(cells)) == 4
        assert min(r for r, _ in cells) == 0
        assert min(c for _, c in cells) == 0


def test_rotate_and_translate_return_new_pieces():
    piece = Tetromino(TetrominoType.T, position=(2, 3))

    moved = piece.translate(1, 2)
    turned = piece.rotate()

    assert piece.position == (2, 3)
    assert piece.rotation == 0
    assert moved.position == (4, 4)
    assert turned.rotation == 1
    assert piece.rotate(-1).rotation == 3


def test_occupied_cells_are_translated_offsets():
    piece = Tetromino(TetrominoType.I, rotation=1, position=(3, 7))
    assert piece.occupied_cells() == {(3, 7), (4, 7), (5, 7), (6, 7)}


def test_spawn_position_is_centred_on_top_row():
    assert Tetromino.at_spawn(TetrominoType.I, 10).position == (0, 3)
    assert Tetromino.at_spawn(TetrominoType.O, 10).position == (0, 4)
    assert Tetromino.at_spawn(TetrominoType.T, 10).position == (0, 3)
    assert shape_width(TetrominoType.I, 1) == 1


def test_spawn_sequence_is_reproducible_with_a_seed():
    first = random.Random(42)
    second = random.Random(42)
    a = [Tetromino.spawn(first, 10) for _ in range(30)]
    b = [Tetromino.spawn(second, 10) for _ in range(30)]
    assert a == b
    assert all(p.rotation == 0 and p.position[0] == 0 for p in a)


def test_spawn_draws_every_kind():
    rng = random.Random(1)
    kinds = {Tetromino.spawn(rng, 10).shape for _ in range(500)}
    assert kinds == set(TetrominoType)
