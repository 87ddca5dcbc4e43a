"""
Tests for BatchEloRanker implementation.

Focus on accumulation, lazy refitting and derived statistics.
"""

import threading

import pytest

from elo_tournament.config import FitConfig
from elo_tournament.diagnostics import ListSink
from elo_tournament.models import GameResult
from elo_tournament.rankers.elo_ranker import BatchEloRanker


class TestBatchEloRanker:
    """Test BatchEloRanker behavior through public interface."""

    def test_winner_rated_above_loser(self) -> None:
        """Basic 2-way result should put the winner above the loser."""
        # Arrange
        ranker = BatchEloRanker()

        # Act
        ranker.add_result(GameResult("winner", "loser", 3.0, 1.0))

        # Assert
        assert ranker.get_score("winner") > 0.0, "Winner should rate above the anchor"
        assert ranker.get_score("loser") < 0.0, "Loser should rate below the anchor"
        assert ranker.predict_win_probability("winner", "loser") > 0.5

    def test_matches_reference_fit(self) -> None:
        """Ranker should reproduce the direct optimizer fit."""
        # Arrange
        ranker = BatchEloRanker(FitConfig(prior_wl=1.0, max_iters=1000, tolerance=1e-5))

        # Act
        ranker.add_results([
            GameResult("b", "c", 200.0, 0.0),
            GameResult("c", "b", 100.0, 0.0),
        ])

        # Assert
        assert ranker.get_score("b") == pytest.approx(59.9833, abs=0.01)
        assert ranker.get_score("c") == pytest.approx(-59.9834, abs=0.01)
        assert ranker.get_uncertainty("b") == pytest.approx(21.2381, abs=0.5)

    def test_refits_after_new_results(self) -> None:
        """Adding results should invalidate the previous fit."""
        ranker = BatchEloRanker()
        ranker.add_result(GameResult("a", "b", 5.0, 0.0))
        before = ranker.get_score("a")

        ranker.add_result(GameResult("b", "a", 10.0, 0.0))

        assert ranker.get_score("a") < before, "Losses should pull the rating down"

    def test_result_order_does_not_matter(self) -> None:
        """Same tallies in a different order should fit identically."""
        results = [GameResult("a", "b", 2.0, 1.0), GameResult("b", "c", 1.0, 1.0), GameResult("c", "a", 0.0, 3.0)]
        ranker1 = BatchEloRanker()
        ranker2 = BatchEloRanker()

        ranker1.add_results(results)
        for res in reversed(results):
            ranker2.add_result(GameResult(res.first_id, res.second_id, res.first_wins, res.second_wins))

        for player_id in ("a", "b", "c"):
            assert ranker1.get_score(player_id) == pytest.approx(ranker2.get_score(player_id), abs=0.01)

    def test_unseen_competitor_gets_anchor_rating(self) -> None:
        ranker = BatchEloRanker()
        ranker.add_result(GameResult("a", "b"))

        assert ranker.get_score("nobody") == 0.0
        assert ranker.get_uncertainty("nobody") == 0.0

    def test_stdevs_disabled(self) -> None:
        ranker = BatchEloRanker(FitConfig(compute_stdevs=False))
        ranker.add_result(GameResult("a", "b"))

        assert ranker.get_uncertainty("a") == 0.0
        assert ranker.get_score("a") > 0.0

    def test_counts_and_win_percentage(self) -> None:
        """Draw credit counts as fractional wins."""
        ranker = BatchEloRanker()
        ranker.add_results([
            GameResult("a", "b", 2.5, 1.5),
            GameResult("c", "a", 1.0, 0.0),
        ])

        assert ranker.get_total_game_count("a") == 5.0
        assert ranker.get_win_count("a") == 2.5
        assert ranker.get_win_percentage("a") == pytest.approx(50.0)
        assert ranker.get_win_percentage("nobody") == 0.0

    def test_all_scores_sorted(self) -> None:
        ranker = BatchEloRanker()
        ranker.add_results([GameResult("low", "mid", 0.0, 4.0), GameResult("mid", "high", 0.0, 4.0)])

        assert list(ranker.get_all_scores()) == ["high", "mid", "low"]
        stats = ranker.get_all_statistics()
        assert list(stats) == ["high", "mid", "low"]
        assert stats["mid"]["games"] == 8.0
        assert stats["high"]["uncertainty"] > 0.0

    def test_progress_sink_receives_lines(self) -> None:
        sink = ListSink()
        ranker = BatchEloRanker(out=sink)
        ranker.add_result(GameResult("a", "b", 3.0, 1.0))

        _ = ranker.fit()

        assert sink.lines and sink.lines[0].startswith("Iteration 0 maxEloDiff = ")

    def test_concurrent_add_result(self) -> None:
        """Results added from several threads should all be counted."""
        # Arrange
        ranker = BatchEloRanker()

        def worker() -> None:
            for _ in range(50):
                ranker.add_result(GameResult("a", "b", 1.0, 1.0))

        # Act
        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert ranker.get_total_game_count("a") == 400.0
        assert ranker.get_score("a") == pytest.approx(0.0, abs=0.01)

    def test_count_queries_while_adding(self) -> None:
        """Count queries should stay consistent while another thread adds new competitors."""
        # Arrange
        ranker = BatchEloRanker(FitConfig(compute_stdevs=False))
        ranker.add_result(GameResult("a0", "b0"))
        errors: list[Exception] = []
        done = threading.Event()

        def writer() -> None:
            try:
                for i in range(1, 2000):
                    ranker.add_result(GameResult(f"a{i}", f"b{i}"))
            finally:
                done.set()

        def reader() -> None:
            try:
                while not done.is_set():
                    assert ranker.get_total_game_count("a0") == 1.0
                    assert ranker.get_win_percentage("a0") == 100.0
                    _ = ranker.get_win_count("b0")
            except Exception as e:
                errors.append(e)

        # Act
        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Assert
        assert errors == [], f"Readers failed: {errors}"
        assert ranker.get_total_game_count("b1999") == 1.0
        assert ranker.get_win_count("a1999") == 1.0
