"""
Batch Elo ranker implementation.

Accumulates pairwise game results and fits static ratings with the compass
search optimizer, refitting lazily whenever new results arrive.
"""

import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING

from typing_extensions import override

if TYPE_CHECKING:
    from loguru import Logger

from ..config import FitConfig
from ..interfaces import CompetitorStatistics, DiagnosticSink, Ranker
from ..likelihood import prob_win
from ..logging_config import get_logger
from ..models import GameResult, WinMatrix, build_win_matrix
from .optimizer import compute_elos
from .uncertainty import compute_approx_elo_stdevs


class BatchEloRanker(Ranker):
    """
    Static Elo ranker over all results seen so far.

    Results are stored as tallies keyed by (first_id, second_id); every fit
    starts from scratch on the full tally, so the order results arrive in
    does not matter.

    Thread Safety: add_result and fitting are serialized by a lock, so results
    may be added from worker threads. Per-competitor game and win counts are
    updated under the same lock, so count queries are single lookups. Each fit
    works on its own matrix and rating vector.
    """

    def __init__(self, config: FitConfig | None = None, out: DiagnosticSink | None = None):
        """
        Initialize batch Elo ranker.

        Args:
            config: Fitting configuration (defaults to FitConfig())
            out: Optional sink for optimizer progress lines
        """
        self.config: FitConfig = config or FitConfig()
        self.out: DiagnosticSink | None = out

        # Tallies in insertion order of competitors
        self.player_ids = list[str]()
        self._known_players = set[str]()
        self.tallies = dict[tuple[str, str], tuple[float, float]]()
        self.game_counts = dict[str, float]()
        self.win_counts = dict[str, float]()

        # Fit results, invalidated by add_result
        self.ratings = dict[str, float]()
        self.stdevs = dict[str, float]()
        self._dirty: bool = False

        self._lock: threading.Lock = threading.Lock()

        self.logger: Logger = get_logger("elo_ranker")
        self.logger.info(
            f"Batch Elo ranker initialized: prior_wl={self.config.prior_wl}, max_iters={self.config.max_iters}, tolerance={self.config.tolerance}"
        )

    @override
    def add_result(self, res: GameResult) -> None:
        """Add a game result to the tallies. Thread-safe."""
        with self._lock:
            for player_id in (res.first_id, res.second_id):
                if player_id not in self._known_players:
                    self._known_players.add(player_id)
                    self.player_ids.append(player_id)
            key = (res.first_id, res.second_id)
            first_wins, second_wins = self.tallies.get(key, (0.0, 0.0))
            self.tallies[key] = (first_wins + res.first_wins, second_wins + res.second_wins)
            games = res.first_wins + res.second_wins
            self.game_counts[res.first_id] = self.game_counts.get(res.first_id, 0.0) + games
            self.game_counts[res.second_id] = self.game_counts.get(res.second_id, 0.0) + games
            self.win_counts[res.first_id] = self.win_counts.get(res.first_id, 0.0) + res.first_wins
            self.win_counts[res.second_id] = self.win_counts.get(res.second_id, 0.0) + res.second_wins
            self._dirty = True
        self.logger.debug(f"Added result {res.first_id} vs {res.second_id}: {res.first_wins}-{res.second_wins}")

    def add_results(self, results: Iterable[GameResult]) -> None:
        """Add several game results."""
        for res in results:
            self.add_result(res)

    def build_matrix(self) -> WinMatrix:
        """Win matrix indexed like player_ids."""
        with self._lock:
            return self._build_matrix_locked()

    def _build_matrix_locked(self) -> WinMatrix:
        results = [
            GameResult(first_id, second_id, first_wins, second_wins)
            for (first_id, second_id), (first_wins, second_wins) in self.tallies.items()
        ]
        _, matrix = build_win_matrix(results, self.player_ids)
        return matrix

    def fit(self) -> dict[str, float]:
        """Refit ratings (and stdevs, if configured) from all tallies."""
        with self._lock:
            self._fit_locked()
            return dict(self.ratings)

    def _fit_locked(self) -> None:
        num_players = len(self.player_ids)
        matrix = self._build_matrix_locked()
        self.logger.info(f"Fitting ratings for {num_players} competitors from {len(self.tallies)} pairings")

        elos = compute_elos(
            matrix,
            num_players,
            self.config.prior_wl,
            self.config.max_iters,
            self.config.tolerance,
            self.out,
        )
        self.ratings = dict(zip(self.player_ids, elos))

        if self.config.compute_stdevs:
            stdevs = compute_approx_elo_stdevs(elos, matrix, num_players, self.config.prior_wl)
            self.stdevs = dict(zip(self.player_ids, stdevs))
        else:
            self.stdevs = {}
        self._dirty = False

    def _ensure_fitted(self) -> None:
        with self._lock:
            if self._dirty:
                self._fit_locked()

    @override
    def get_score(self, player_id: str) -> float:
        """Get current rating; unseen competitors sit at the anchor, 0."""
        self._ensure_fitted()
        return self.ratings.get(player_id, 0.0)

    @override
    def get_uncertainty(self, player_id: str) -> float:
        """Get current rating stdev, or 0.0 when stdevs are disabled or the competitor is unseen."""
        self._ensure_fitted()
        return self.stdevs.get(player_id, 0.0)

    def predict_win_probability(self, first_id: str, second_id: str) -> float:
        """Probability that first_id beats second_id under the current fit."""
        return prob_win(self.get_score(first_id) - self.get_score(second_id))

    def get_all_scores(self) -> dict[str, float]:
        """Get all ratings, highest first."""
        self._ensure_fitted()
        return dict(sorted(self.ratings.items(), key=lambda item: item[1], reverse=True))

    @override
    def get_total_game_count(self, player_id: str) -> float:
        """Get total game count for a competitor."""
        return self.game_counts.get(player_id, 0.0)

    def get_win_count(self, player_id: str) -> float:
        """Get total (possibly fractional) wins for a competitor."""
        return self.win_counts.get(player_id, 0.0)

    @override
    def get_win_percentage(self, player_id: str) -> float:
        """Get win percentage for a competitor."""
        games = self.get_total_game_count(player_id)
        if games == 0:
            return 0.0
        return (self.get_win_count(player_id) / games) * 100.0

    def get_all_statistics(self) -> dict[str, CompetitorStatistics]:
        """Get all statistics for all competitors, highest rated first."""
        stats = dict[str, CompetitorStatistics]()
        for player_id in self.get_all_scores():
            stats[player_id] = {
                "score": self.get_score(player_id),
                "uncertainty": self.get_uncertainty(player_id),
                "games": self.get_total_game_count(player_id),
                "win_percentage": self.get_win_percentage(player_id),
            }
        return stats
