"""
core game logic and mechanics

the board is a 4x4 tuple of row tuples holding ints (0 = empty).
every function here returns a fresh board and never mutates its input,
so the search can call them freely on its own working copies.
"""
import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import NamedTuple, Optional, Tuple


SIZE = 4
WIN_TILE = 2048

# probability of spawning a 2 (otherwise a 4)
SPAWN_TWO_PROBABILITY = 0.9


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3

    @classmethod
    def parse(cls, value):
        """accept a Direction, its int value or a name like 'left'"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"unknown direction: {value!r}") from None
        return cls(value)


class MoveResult(NamedTuple):
    board: tuple
    score_delta: int
    changed: bool


# cell coordinates of every line, ordered toward the edge the tiles slide to.
# left/right walk the rows, up/down walk the columns (the transposed board)
LINES = {
    Direction.LEFT: tuple(tuple((r, c) for c in range(SIZE)) for r in range(SIZE)),
    Direction.RIGHT: tuple(tuple((r, c) for c in reversed(range(SIZE))) for r in range(SIZE)),
    Direction.UP: tuple(tuple((r, c) for r in range(SIZE)) for c in range(SIZE)),
    Direction.DOWN: tuple(tuple((r, c) for r in reversed(range(SIZE))) for c in range(SIZE)),
}


def new_board():
    """empty 4x4 board"""
    return tuple((0,) * SIZE for _ in range(SIZE))


def _is_tile_value(value):
    return value >= 2 and value & (value - 1) == 0


def validate_board(board):
    """
    normalise a 4x4 nested sequence into a tuple board

    raises ValueError for wrong dimensions or cell values that are not
    0 or a power of two >= 2
    """
    try:
        rows = [list(row) for row in board]
    except TypeError:
        raise ValueError("board must be a 4x4 grid") from None

    if len(rows) != SIZE or any(len(row) != SIZE for row in rows):
        raise ValueError(f"board must be {SIZE}x{SIZE}, got {[len(row) for row in rows]}")

    normalised = []
    for r, row in enumerate(rows):
        cells = []
        for c, value in enumerate(row):
            # numpy ints and plain ints, but not floats or bools
            if isinstance(value, bool) or not hasattr(value, '__index__'):
                raise ValueError(f"cell ({r}, {c}) is not an integer: {value!r}")
            value = int(value)
            if value != 0 and not _is_tile_value(value):
                raise ValueError(f"cell ({r}, {c}) is not a power of two: {value}")
            cells.append(value)
        normalised.append(tuple(cells))
    return tuple(normalised)


def empty_cells(board):
    """coordinates of all empty cells in row-major order"""
    return [(r, c) for r in range(SIZE) for c in range(SIZE) if board[r][c] == 0]


def max_tile(board):
    return max(max(row) for row in board)


def _slide_line(line):
    """
    compact a line toward index 0 and merge equal neighbours

    returns (values, points, sources) where sources[k] holds the input
    indices that ended up in output slot k (two of them for a merge).
    a merged value is never looked at again, so [2,2,2,2] -> [4,4,0,0]
    """
    occupied = [i for i, value in enumerate(line) if value]

    values = []
    sources = []
    points = 0
    j = 0
    while j < len(occupied):
        i = occupied[j]
        if j + 1 < len(occupied) and line[i] == line[occupied[j + 1]]:
            merged_value = line[i] * 2
            values.append(merged_value)
            sources.append((i, occupied[j + 1]))
            points += merged_value
            j += 2  # skip the partner, it is consumed
        else:
            values.append(line[i])
            sources.append((i,))
            j += 1

    values += [0] * (len(line) - len(values))
    return values, points, sources


def apply_move(board, direction, check=True):
    """
    slide every line of the board toward `direction` and merge

    returns MoveResult(board, score_delta, changed). changed compares the
    whole resulting board against the input, so a line that was already
    compacted reports no change
    """
    if check:
        board = validate_board(board)
        direction = Direction.parse(direction)

    grid = [[0] * SIZE for _ in range(SIZE)]
    points = 0
    for coords in LINES[direction]:
        values, line_points, _ = _slide_line([board[r][c] for r, c in coords])
        points += line_points
        for (r, c), value in zip(coords, values):
            grid[r][c] = value

    result = tuple(tuple(row) for row in grid)
    return MoveResult(result, points, result != tuple(tuple(row) for row in board))


def place_tile(board, row, col, value):
    """copy of the board with one cell set"""
    return tuple(
        tuple(value if (r, c) == (row, col) else cell for c, cell in enumerate(cells))
        for r, cells in enumerate(board)
    )


def add_random_tile(board, rng=None):
    """
    add a random tile (2 or 4) to an empty cell

    a full board is returned unchanged
    """
    board = validate_board(board)
    rng = rng or random

    empty = empty_cells(board)
    if not empty:
        return board

    row, col = rng.choice(empty)
    # 90% chance for 2 and 10% chance for 4
    value = 2 if rng.random() < SPAWN_TWO_PROBABILITY else 4
    return place_tile(board, row, col, value)


def is_game_over(board):
    """no empty cell and no two adjacent equal tiles"""
    board = validate_board(board)

    for r in range(SIZE):
        for c in range(SIZE):
            if board[r][c] == 0:
                return False

    # possible merges horizontally
    for r in range(SIZE):
        for c in range(SIZE - 1):
            if board[r][c] == board[r][c + 1]:
                return False

    # possible merges vertically
    for r in range(SIZE - 1):
        for c in range(SIZE):
            if board[r][c] == board[r + 1][c]:
                return False

    return True


def legal_moves(board):
    """directions that change the board, in Direction order"""
    board = validate_board(board)
    return [d for d in Direction if apply_move(board, d, check=False).changed]


def board_to_text(board):
    """rows of tab separated values, 0 for empty"""
    return "\n".join("\t".join(str(value) for value in row) for row in board)


# ---------------------------------------------------------------------------
# tile provenance, only used by presentation layers

@dataclass(frozen=True)
class Tile:
    value: int
    row: int
    col: int
    is_new: bool = field(default=False, compare=False)
    merged_from: Optional[Tuple['Tile', ...]] = field(default=None, compare=False)


def tiles_from_board(board):
    """wrap every occupied cell in a Tile"""
    return tuple(
        tuple(Tile(value, r, c) if value else None for c, value in enumerate(row))
        for r, row in enumerate(board)
    )


def board_from_tiles(tiles):
    return tuple(tuple(tile.value if tile else 0 for tile in row) for row in tiles)


def move_tiles(tiles, direction):
    """
    apply the move rule to a Tile grid

    merged tiles remember their two predecessors in merged_from, moved
    tiles get their new coordinates and lose is_new
    """
    direction = Direction.parse(direction)
    grid = [[None] * SIZE for _ in range(SIZE)]

    for coords in LINES[direction]:
        line = [tiles[r][c] for r, c in coords]
        values, _, sources = _slide_line([tile.value if tile else 0 for tile in line])
        for (r, c), value, source in zip(coords, values, sources):
            parents = tuple(line[i] for i in source)
            grid[r][c] = Tile(value, r, c, merged_from=parents if len(parents) == 2 else None)

    return tuple(tuple(row) for row in grid)


def add_random_tile_tiles(tiles, rng=None):
    """spawn on a Tile grid, the new tile is flagged is_new"""
    board = board_from_tiles(tiles)
    spawned = add_random_tile(board, rng)
    if spawned == board:
        return tiles

    grid = [list(row) for row in tiles]
    for r, c in empty_cells(board):
        if spawned[r][c]:
            grid[r][c] = Tile(spawned[r][c], r, c, is_new=True)
    return tuple(tuple(row) for row in grid)


# ---------------------------------------------------------------------------
# game session

class GameState(NamedTuple):
    board: tuple
    score: int = 0
    best_score: int = 0
    game_over: bool = False
    won: bool = False


class Game2048:
    def __init__(self, best_score=0, rng=None):
        """
        initialize a 4x4 2048 session

        args:
            best_score: high-water mark handed in by a persistence layer
            rng: random source for tile spawns (random.Random or similar)
        """
        self.size = SIZE
        self.rng = rng or random
        self._initial_best = best_score
        self.state = None
        self.reset()

    def reset(self):
        """start a new game with two random tiles, keeping the best score"""
        best = self.state.best_score if self.state else self._initial_best

        tiles = tiles_from_board(new_board())
        tiles = add_random_tile_tiles(tiles, self.rng)
        tiles = add_random_tile_tiles(tiles, self.rng)

        self.tiles = tiles
        self.state = GameState(board=board_from_tiles(tiles), score=0, best_score=best)

    @property
    def board(self):
        return self.state.board

    @property
    def score(self):
        return self.state.score

    @property
    def best_score(self):
        return self.state.best_score

    @property
    def game_over(self):
        return self.state.game_over

    @property
    def won(self):
        return self.state.won

    def make_move(self, direction):
        """
        make a move in the specified direction

        returns (moved, points). a move that changes nothing does not
        score and does not spawn a tile
        """
        if self.game_over:
            return False, 0

        direction = Direction.parse(direction)
        result = apply_move(self.board, direction, check=False)
        if not result.changed:
            return False, 0

        tiles = add_random_tile_tiles(move_tiles(self.tiles, direction), self.rng)
        board = board_from_tiles(tiles)
        score = self.score + result.score_delta

        self.tiles = tiles
        self.state = GameState(
            board=board,
            score=score,
            best_score=max(self.best_score, score),
            game_over=is_game_over(board),
            won=self.won or max_tile(board) >= WIN_TILE,
        )
        return True, result.score_delta

    def print_board(self):
        """print the board to console"""
        print(f"Score: {self.score}  Best: {self.best_score}")
        print("-" * 25)
        for row in self.board:
            print("|", end="")
            for cell in row:
                if cell == 0:
                    print("    |", end="")
                else:
                    print(f"{cell:4}|", end="")
            print()
        print("-" * 25)
        if self.game_over:
            print("GAME OVER!")
        print()
