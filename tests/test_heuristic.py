import random

import numpy as np
import pytest

from heuristic import SNAKE_WEIGHTS, evaluate, score_grid, symmetries


def random_board(rng):
    return [[rng.choice([0, 0, 2, 4, 8, 16, 64, 256, 2048]) for _ in range(4)] for _ in range(4)]


def test_snake_weights_follow_serpentine_path():
    exponents = np.log(SNAKE_WEIGHTS) / np.log(4)
    assert np.allclose(exponents, [
        [0, 1, 2, 3],
        [7, 6, 5, 4],
        [8, 9, 10, 11],
        [15, 14, 13, 12],
    ])


def test_symmetries_are_the_eight_square_transforms():
    grid = np.arange(16).reshape(4, 4)
    transforms = symmetries(grid)
    assert len(transforms) == 8
    assert len({t.tobytes() for t in transforms}) == 8
    assert any(np.array_equal(t, grid.T) for t in transforms)


def test_empty_board_scores_zero():
    assert evaluate([[0] * 4 for _ in range(4)]) == 0


@pytest.mark.parametrize("position", [(0, 0), (0, 3), (3, 0), (3, 3)])
def test_single_tile_in_any_corner_gets_corner_weight(position):
    board = [[0] * 4 for _ in range(4)]
    board[position[0]][position[1]] = 2
    assert evaluate(board) == 2 * 4 ** 15


def test_edge_tile_next_to_corner():
    board = [[0] * 4 for _ in range(4)]
    board[0][1] = 2
    assert evaluate(board) == 2 * 4 ** 14


def test_evaluation_matches_explicit_dot_products():
    rng = random.Random(7)
    for _ in range(50):
        board = random_board(rng)
        expected = max(int((t.astype(np.int64) * SNAKE_WEIGHTS).sum()) for t in symmetries(board))
        assert evaluate(board) == expected


def test_evaluation_is_symmetry_invariant():
    rng = random.Random(8)
    for _ in range(50):
        board = random_board(rng)
        value = evaluate(board)
        for transformed in symmetries(board):
            assert evaluate(transformed) == value


def test_corner_chain_beats_scattered_board():
    chain = [
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [2, 4, 8, 16],
        [256, 128, 64, 32],
    ]
    scattered = [
        [0, 32, 0, 4],
        [16, 0, 256, 0],
        [0, 128, 0, 8],
        [2, 0, 64, 0],
    ]
    assert evaluate(chain) > evaluate(scattered)


def test_score_grid_skips_validation():
    assert score_grid(((2, 0, 0, 0),) + ((0,) * 4,) * 3) == 2 * 4 ** 15


def test_evaluate_rejects_bad_values():
    with pytest.raises(ValueError):
        evaluate([[3, 0, 0, 0]] + [[0] * 4] * 3)
