"""
Tests for the discretized-posterior standard deviation estimator.
"""

import math

import pytest

from elo_tournament.exceptions import ValidationError
from elo_tournament.models import WinMatrix
from elo_tournament.rankers.optimizer import compute_elos
from elo_tournament.rankers.uncertainty import GRID_RADIUS, compute_approx_elo_stdevs

OPT_TOLERANCE = 0.00001


class TestComputeApproxEloStdevs:
    """Test compute_approx_elo_stdevs behavior."""

    def test_flat_likelihood_is_uniform_over_grid(self) -> None:
        """With no games and no prior every grid point is equally likely."""
        # Act
        stdevs = compute_approx_elo_stdevs([0.0], WinMatrix(1), 1, 0.0)

        # Assert
        # variance of a discrete uniform on -R..R is R(R+1)/3
        expected = math.sqrt(GRID_RADIUS * (GRID_RADIUS + 1) / 3)
        assert stdevs[0] == pytest.approx(expected, rel=1e-9)

    def test_prior_only(self) -> None:
        """A lone competitor is constrained only by the weak prior."""
        # Arrange
        elos = compute_elos(WinMatrix(1), 1, 0.1, 1000, OPT_TOLERANCE)

        # Act
        stdevs = compute_approx_elo_stdevs(elos, WinMatrix(1), 1, 0.1)

        # Assert
        assert stdevs[0] == pytest.approx(780.104, abs=0.5)

    def test_reference_fit(self) -> None:
        """Heavily played pair is tight; the idle competitor is wide."""
        # Arrange
        matrix = WinMatrix(3)
        matrix.add(1, 2, 200.0, 0.0)
        matrix.add(2, 1, 100.0, 0.0)
        elos = compute_elos(matrix, 3, 1.0, 1000, OPT_TOLERANCE)

        # Act
        stdevs = compute_approx_elo_stdevs(elos, matrix, 3, 1.0)

        # Assert
        assert stdevs == pytest.approx([313.547, 21.2381, 21.2381], abs=0.5)

    def test_few_games(self) -> None:
        """Few games leave wide but distinct uncertainties."""
        # Arrange
        matrix = WinMatrix(3)
        matrix.add(0, 2, 0.0, 1.0)
        matrix.add(1, 2, 5.0, 0.0)
        matrix.add(2, 0, 0.0, 5.0)
        matrix.add(2, 1, 1.0, 0.0)
        elos = compute_elos(matrix, 3, 1.0, 1000, OPT_TOLERANCE)

        # Act
        stdevs = compute_approx_elo_stdevs(elos, matrix, 3, 1.0)

        # Assert
        assert stdevs == pytest.approx([162.965, 162.965, 123.894], abs=0.5)

    def test_many_even_games_beat_few_or_lopsided_games(self) -> None:
        """Many games at ~50% should give a smaller stdev than one game or a sweep."""
        # Arrange
        matrix = WinMatrix(4)
        matrix.add(0, 1, 100.0, 100.0)
        matrix.add(2, 0, 1.0, 0.0)
        matrix.add(3, 1, 20.0, 0.0)
        elos = compute_elos(matrix, 4, 1.0, 1000, OPT_TOLERANCE)

        # Act
        stdevs = compute_approx_elo_stdevs(elos, matrix, 4, 1.0)

        # Assert
        assert stdevs[0] < stdevs[2], "One game should be less certain than 201"
        assert stdevs[1] < stdevs[3], "A 20-0 sweep should be less certain than a 100-120 record"
        assert all(s >= 0 for s in stdevs)

    def test_idle_competitor_is_finite(self) -> None:
        """No games at all still gives a finite stdev thanks to the prior."""
        # Act
        stdevs = compute_approx_elo_stdevs([0.0, 0.0], WinMatrix(2), 2, 1.0)

        # Assert
        assert all(math.isfinite(s) and s > 0 for s in stdevs)
        assert stdevs[0] == pytest.approx(stdevs[1])

    def test_unfitted_ratings_do_not_overflow(self) -> None:
        """Ratings far from the optimum should still give a finite result."""
        # Arrange
        matrix = WinMatrix(2)
        matrix.add(0, 1, 500.0, 0.0)

        # Act
        stdevs = compute_approx_elo_stdevs([-1000.0, 1000.0], matrix, 2, 1.0)

        # Assert
        assert all(math.isfinite(s) for s in stdevs)

    def test_size_mismatch(self) -> None:
        with pytest.raises(ValidationError):
            _ = compute_approx_elo_stdevs([0.0], WinMatrix(2), 2, 1.0)
