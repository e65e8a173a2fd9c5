"""
static board evaluation for the expectimax search

the board is scored against a "snake" weight matrix: powers of 4 laid out
along a serpentine path that ends in a corner. the largest tile in that
corner followed by a decreasing chain scores highest.

12 <- 13 <- 14 <- 15 (corner)
 |
11 -> 10 ->  9 ->  8
                   |
 4 <-  5 <-  6 <-  7
 |
 0 ->  1 ->  2 ->  3

(exponents of 4, drawn bottom row first)
"""
import numpy as np

from game import validate_board


SNAKE_WEIGHTS = np.array([
    [4 ** 0, 4 ** 1, 4 ** 2, 4 ** 3],
    [4 ** 7, 4 ** 6, 4 ** 5, 4 ** 4],
    [4 ** 8, 4 ** 9, 4 ** 10, 4 ** 11],
    [4 ** 15, 4 ** 14, 4 ** 13, 4 ** 12],
], dtype=np.int64)


def symmetries(grid):
    """
    the 8 symmetries of a square grid: 4 rotations of the grid and
    4 rotations of its horizontal mirror
    """
    grid = np.asarray(grid)
    mirrored = np.fliplr(grid)
    return [np.rot90(grid, k) for k in range(4)] + [np.rot90(mirrored, k) for k in range(4)]


# dot(T(board), W) == dot(board, T^-1(W)) and the set of symmetries is closed
# under inversion, so scoring the board against every transformed weight
# matrix is the same as scoring every transformed board against SNAKE_WEIGHTS
_WEIGHT_STACK = np.stack(symmetries(SNAKE_WEIGHTS))


def score_grid(board):
    """max snake score over all orientations, no validation"""
    values = np.asarray(board, dtype=np.int64)
    return int(np.tensordot(_WEIGHT_STACK, values, axes=([1, 2], [0, 1])).max())


def evaluate(board):
    """
    heuristic value of a board

    the ideal chain can sit in any corner with either handedness, so the
    board is matched against every symmetry of the weight matrix and the
    best fit is kept
    """
    return score_grid(validate_board(board))
