import random

import gymnasium as gym
from gymnasium import spaces
import numpy as np

from game import Direction, Game2048, apply_move, board_to_text


class Game2048Env(gym.Env):
    """
    gymnasium environment for 2048 game

    actions are Direction values: 0 = up, 1 = right, 2 = down, 3 = left.
    info carries the afterstate (board after the move, before the random
    tile) so agents can look at the deterministic part of a step
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, render_mode="human", best_score=0, seed=None):
        super().__init__()

        self.render_mode = render_mode
        self.game = Game2048(best_score=best_score, rng=random.Random(seed))

        # actions -> 4 possible moves
        self.action_space = spaces.Discrete(4)

        # observation space -> 4x4 grid of raw tile values
        self.observation_space = spaces.Box(
            low=0,
            high=131072,  # up to 131072 tile (not reaching here anyways)
            shape=(4, 4),
            dtype=np.int32
        )

        # map actions to game directions
        self.action_to_direction = {int(d): d for d in Direction}

        # track afterstate (board after move, before random tile)
        self.last_afterstate = None

    def _get_observation(self):
        """convert the game board to an observation"""
        return np.array(self.game.board, dtype=np.int32)

    def _get_info(self, moved=False, points=0, afterstate=None):
        return {
            "score": self.game.score,
            "best_score": self.game.best_score,
            "moved": moved,
            "points_gained": points,
            "afterstate": afterstate,
            "max_tile": int(np.max(self._get_observation())),
        }

    def get_afterstate(self, action):
        """
        the board after `action` but before the random tile

        returns:
            afterstate_board: board after move (None if the move is invalid)
            reward: points earned from merging
            valid: if the move changed the board
        """
        result = apply_move(self.game.board, self.action_to_direction[int(action)], check=False)
        if not result.changed:
            return None, 0, False
        return np.array(result.board, dtype=np.int32), result.score_delta, True

    def reset(self, seed=None, options=None):
        """reset the game to start a new episode"""
        super().reset(seed=seed)
        if seed is not None:
            self.game.rng = random.Random(seed)

        self.game.reset()
        self.last_afterstate = None

        return self._get_observation(), self._get_info()

    def step(self, action):
        """
        take one step in the environment

        reward is the points earned by merging, an invalid move leaves the
        board as it is and earns nothing
        """
        afterstate_board, _, valid = self.get_afterstate(action)

        moved, points = self.game.make_move(self.action_to_direction[int(action)])
        reward = float(points) if moved else 0.0

        if valid:
            self.last_afterstate = afterstate_board

        terminated = self.game.game_over
        truncated = False

        info = self._get_info(moved, points, afterstate_board if valid else None)
        return self._get_observation(), reward, terminated, truncated, info

    def render(self):
        """display the game state"""
        if self.render_mode == "ansi":
            return board_to_text(self.game.board)
        if self.render_mode == "human":
            self.game.print_board()

    def close(self):
        """clean up resources"""
        pass
