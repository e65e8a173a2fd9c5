from expectimax_agent import ExpectimaxAgent
from play import load_best_score, play_games, save_best_score


def test_missing_best_score_file_is_zero(tmp_path):
    assert load_best_score(str(tmp_path / "missing.txt")) == 0
    assert load_best_score(None) == 0


def test_unreadable_best_score_file_is_zero(tmp_path):
    path = tmp_path / "best.txt"
    path.write_text("not a number")
    assert load_best_score(str(path)) == 0


def test_best_score_round_trip(tmp_path):
    path = str(tmp_path / "scores" / "best.txt")
    save_best_score(path, 1234)
    assert load_best_score(path) == 1234


def test_play_games_persists_best_score(tmp_path):
    path = str(tmp_path / "best.txt")

    results = play_games(games=2, seed=1, best_score_file=path, max_moves=15,
                         agent=ExpectimaxAgent(base_depth=1))

    assert len(results) == 2
    assert all(r["moves"] <= 15 for r in results)
    best = max(r["best_score"] for r in results)
    assert best == max(r["score"] for r in results)
    assert load_best_score(path) == best


def test_play_games_starts_from_stored_best(tmp_path):
    path = str(tmp_path / "best.txt")
    save_best_score(path, 10 ** 9)

    results = play_games(games=1, seed=2, best_score_file=path, max_moves=5,
                         agent=ExpectimaxAgent(base_depth=1))

    assert results[0]["best_score"] == 10 ** 9
    assert load_best_score(path) == 10 ** 9
