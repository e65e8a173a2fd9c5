"""
run the expectimax agent over a number of games and report statistics

the best score survives between runs in a small text file
"""
import os
import time

import numpy as np

from expectimax_agent import ExpectimaxAgent
from game_gym import Game2048Env


def load_best_score(path):
    """best score stored in `path`, 0 if missing or unreadable"""
    if not path or not os.path.exists(path):
        return 0
    try:
        with open(path, "r") as f:
            return int(f.read().strip())
    except (OSError, ValueError):
        return 0


def save_best_score(path, best_score):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w") as f:
        f.write(str(best_score))


def play_game(env, agent, max_moves=None, verbose=False):
    """
    play one game to the end

    returns dict with score, max_tile and moves
    """
    observation, info = env.reset()
    moves = 0

    while True:
        if max_moves is not None and moves >= max_moves:
            break

        action = agent.choose_action(observation)
        observation, reward, terminated, truncated, info = env.step(action)
        moves += 1

        if verbose:
            search = agent.last_search
            print(f"Move {moves:4d} | {env.action_to_direction[action].name:5s} | "
                  f"Depth: {search['depth']} | Nodes: {search['nodes']:6d} | Score: {info['score']}")

        if terminated or truncated:
            break

    return {
        "score": info["score"],
        "max_tile": int(np.max(observation)),
        "moves": moves,
        "best_score": info["best_score"],
    }


def play_games(games=10,
               seed=None,
               best_score_file=None,
               max_moves=None,
               print_frequency=1,
               agent=None):
    """
    args:
        games: number of games to play
        seed: seed for tile spawns (None = random)
        best_score_file: text file holding the best score (None = don't persist)
        max_moves: stop a game after this many moves (None = play to the end)
        print_frequency: print a summary line every N games
        agent: agent to use (default ExpectimaxAgent())
    """
    best_score = load_best_score(best_score_file)
    env = Game2048Env(render_mode="ansi", best_score=best_score, seed=seed)
    agent = agent or ExpectimaxAgent()

    results = []
    tile_achievements = {}
    start_time = time.time()

    for game_number in range(1, games + 1):
        result = play_game(env, agent, max_moves=max_moves)
        results.append(result)
        tile_achievements[result["max_tile"]] = tile_achievements.get(result["max_tile"], 0) + 1

        if result["best_score"] > best_score:
            best_score = result["best_score"]
            if best_score_file:
                save_best_score(best_score_file, best_score)
            print(f"*** NEW BEST SCORE: {best_score:,} (Game {game_number}, Max Tile: {result['max_tile']}) ***")

        if print_frequency and game_number % print_frequency == 0:
            avg_score = sum(r["score"] for r in results) / len(results)
            elapsed = time.time() - start_time
            print(f"Game {game_number:4d} | Score: {result['score']:6d} | Avg: {avg_score:8.0f} | "
                  f"Tile: {result['max_tile']:5d} | Moves: {result['moves']:5d} | "
                  f"Best: {best_score:6d} | {elapsed:.1f}s")

    env.close()

    if results:
        print("\nMax Tiles Achieved:")
        for tile in sorted(tile_achievements.keys(), reverse=True):
            count = tile_achievements[tile]
            percentage = (count / len(results)) * 100
            print(f"  {tile:5d}: {count:3d} times ({percentage:5.1f}%)")

    return results


if __name__ == "__main__":
    # ===================================================================
    # CONFIGURATION
    # ===================================================================

    GAMES = 10

    # None for a different game every run
    SEED = None

    BEST_SCORE_FILE = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
                                   "scores", "best_score.txt")

    # None plays every game to the end
    MAX_MOVES = None

    PRINT_FREQUENCY = 1

    # ===================================================================

    print("\n" + "=" * 70)
    print("2048 AI - Expectimax Search")
    print("=" * 70 + "\n")

    try:
        play_games(
            games=GAMES,
            seed=SEED,
            best_score_file=BEST_SCORE_FILE,
            max_moves=MAX_MOVES,
            print_frequency=PRINT_FREQUENCY,
        )
    except KeyboardInterrupt:
        print("\n\nInterrupted by user (Ctrl+C)")
        print("Best score so far has been saved.")
