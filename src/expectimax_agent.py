"""
Expectimax agent for 2048

player nodes take the best direction, chance nodes average over every
possible tile spawn. leaves are scored with the snake heuristic.
search depth adapts to the board: deeper once the big tiles show up and
deeper still when few empty cells keep the chance nodes small.
"""
from game import Direction, apply_move, empty_cells, max_tile, place_tile, validate_board
from heuristic import score_grid


# ranks below every real heuristic score, a position with no move is lost
LOSS_VALUE = -1e20

SPAWN_OUTCOMES = ((2, 0.9), (4, 0.1))

FALLBACK_DIRECTION = Direction.UP


class ExpectimaxAgent:
    """
    plays 2048 by depth limited expectimax search

    tie-break: directions are scanned in Direction order and the first
    strictly best one is kept. with an rng the order is shuffled first,
    which makes ties random but still reproducible for a seeded rng
    """

    def __init__(self,
                 base_depth=3,
                 deep_depth=4,
                 deepest_depth=5,
                 deep_tile=2048,
                 crowded_empty_cells=4,
                 rng=None,
                 evaluate=score_grid):
        """
        args:
            base_depth: search depth for ordinary boards
            deep_depth: depth once the max tile reaches deep_tile
            deepest_depth: depth once additionally empty cells <= crowded_empty_cells
            deep_tile: tile value that switches to the deeper search
            crowded_empty_cells: empty cell count that counts as crowded
            rng: random source used to shuffle ties (None = deterministic)
            evaluate: leaf evaluation, board -> number
        """
        self.base_depth = base_depth
        self.deep_depth = deep_depth
        self.deepest_depth = deepest_depth
        self.deep_tile = deep_tile
        self.crowded_empty_cells = crowded_empty_cells
        self.rng = rng
        self.evaluate = evaluate

        # details of the most recent choose_move call
        self.last_search = None
        self._nodes = 0

    def search_depth(self, board):
        """adaptive depth for the given board"""
        depth = self.base_depth
        if max_tile(board) >= self.deep_tile:
            depth = self.deep_depth
            if len(empty_cells(board)) <= self.crowded_empty_cells:
                depth = self.deepest_depth
        return depth

    def expectimax(self, board, depth, player_turn):
        """value of a board, player_turn selects max node vs chance node"""
        self._nodes += 1

        if depth == 0:
            return self.evaluate(board)

        if player_turn:
            best_value = None
            for direction in Direction:
                result = apply_move(board, direction, check=False)
                if result.changed:
                    value = self.expectimax(result.board, depth - 1, False)
                    if best_value is None or value > best_value:
                        best_value = value
            return LOSS_VALUE if best_value is None else best_value

        empty = empty_cells(board)
        if not empty:
            return self.evaluate(board)

        total = 0.0
        for row, col in empty:
            for value, probability in SPAWN_OUTCOMES:
                child = place_tile(board, row, col, value)
                total += probability * self.expectimax(child, depth - 1, True)
        return total / len(empty)

    def move_values(self, board, depth=None):
        """
        expectimax value of every direction that changes the board

        returns {direction: value}; the board after each move is searched
        as a chance node at `depth` (adaptive when None)
        """
        board = validate_board(board)
        if depth is None:
            depth = self.search_depth(board)

        directions = list(Direction)
        if self.rng is not None:
            self.rng.shuffle(directions)

        values = {}
        for direction in directions:
            result = apply_move(board, direction, check=False)
            if result.changed:
                values[direction] = self.expectimax(result.board, depth, False)
        return values

    def choose_move(self, board, depth=None):
        """
        best direction for the board

        a board without any legal move returns FALLBACK_DIRECTION; callers
        are expected to check for game over first
        """
        board = validate_board(board)
        if depth is None:
            depth = self.search_depth(board)

        self._nodes = 0
        values = self.move_values(board, depth)

        best_direction = FALLBACK_DIRECTION
        best_value = None
        # dict keeps the (possibly shuffled) scan order
        for direction, value in values.items():
            if best_value is None or value > best_value:
                best_value = value
                best_direction = direction

        self.last_search = {
            'depth': depth,
            'values': values,
            'best_value': best_value,
            'nodes': self._nodes,
        }
        return best_direction

    def choose_action(self, observation):
        """int action for a gymnasium host, see Game2048Env"""
        return int(self.choose_move(observation))
