"""
Simulated tournament implementation.

Samples pairwise tallies from ground-truth ratings for testing and demos.
"""

import numpy as np
from collections.abc import Iterable, Sequence

from typing_extensions import override

from ..exceptions import ConfigurationError
from ..interfaces import ResultSource
from ..likelihood import prob_win
from ..models import GameResult


class SimulatedTournament(ResultSource):
    """
    Simulated round robin for testing purposes.

    Every unordered pair plays games_per_pair games; each game is won by the
    first party with probability prob_win(true_first - true_second).
    """

    def __init__(self, ground_truth: dict[str, float], games_per_pair: int = 10, seed: int | None = None):
        """
        Initialize simulated tournament.

        Args:
            ground_truth: Dict mapping competitor id to true rating
            games_per_pair: Games played by each pair of competitors
            seed: Seed for the random generator (None = nondeterministic)
        """
        if games_per_pair < 0:
            raise ConfigurationError(f"games_per_pair cannot be negative, got {games_per_pair}")
        self.ground_truth = dict(ground_truth)
        self.games_per_pair = games_per_pair
        self.rng = np.random.default_rng(seed)

    @classmethod
    def evenly_spread(
        cls, num_players: int, spread: float = 400.0, games_per_pair: int = 10, seed: int | None = None
    ) -> "SimulatedTournament":
        """Competitors player_0..player_{n-1} with true ratings evenly spaced over [-spread/2, spread/2]."""
        if num_players < 0:
            raise ConfigurationError(f"num_players cannot be negative, got {num_players}")
        ratings: Sequence[float] = [0.0]
        if num_players != 1:
            ratings = np.linspace(-spread / 2, spread / 2, num_players).tolist()
        ground_truth = {f"player_{i}": float(rating) for i, rating in enumerate(ratings)}
        return cls(ground_truth, games_per_pair=games_per_pair, seed=seed)

    @override
    def list_results(self) -> Iterable[GameResult]:
        """Play one round robin and return the tallies."""
        player_ids = list(self.ground_truth)
        results = []
        for i, first_id in enumerate(player_ids):
            for second_id in player_ids[i + 1:]:
                p = prob_win(self.ground_truth[first_id] - self.ground_truth[second_id])
                first_wins = int(self.rng.binomial(self.games_per_pair, p))
                results.append(
                    GameResult(first_id, second_id, float(first_wins), float(self.games_per_pair - first_wins))
                )
        return results

    def get_ground_truth(self) -> dict[str, float]:
        """Get ground truth ratings for debugging."""
        return self.ground_truth.copy()
