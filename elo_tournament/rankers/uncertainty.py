"""
Uncertainty estimator.

Approximates each rating's standard deviation by discretizing the local
conditional likelihood (all other ratings held fixed) on a one-Elo grid and
taking the second moment around the fitted rating. The grid spans
GRID_RADIUS points either side; wider true uncertainty is truncated.
"""

from collections.abc import Sequence

import numpy as np

from ..exceptions import ValidationError
from ..likelihood import log_likelihood_of_wl_array
from ..logging_config import get_logger
from ..models import WinMatrix, WLRecord
from .optimizer import compute_local_log_likelihood

GRID_RADIUS = 1500
GRID_STEP = 1.0

# Module-level logger
logger = get_logger("uncertainty")


def _grid_log_likelihoods(
    player: int,
    elos: Sequence[float],
    win_matrix: WinMatrix,
    num_players: int,
    prior_record: WLRecord,
    grid: np.ndarray,
) -> np.ndarray:
    """Local log-likelihood of player at every candidate rating in grid."""
    log_likelihoods = np.zeros_like(grid)
    for y in range(num_players):
        if y == player:
            continue
        log_likelihoods += log_likelihood_of_wl_array(grid - elos[y], win_matrix[player, y])
        log_likelihoods += log_likelihood_of_wl_array(elos[y] - grid, win_matrix[y, player])
    log_likelihoods += log_likelihood_of_wl_array(grid - 0.0, prior_record)
    return log_likelihoods


def compute_approx_elo_stdevs(
    elos: Sequence[float],
    win_matrix: WinMatrix,
    num_players: int,
    prior_wl: float,
) -> list[float]:
    """
    Approximate standard deviation of each fitted rating.

    Args:
        elos: Fitted ratings
        win_matrix: The win matrix the ratings were fitted on
        num_players: Number of competitors
        prior_wl: Prior strength used for the fit

    Returns:
        One non-negative standard deviation per competitor
    """
    if len(elos) != num_players or win_matrix.num_players != num_players:
        raise ValidationError(
            f"Size mismatch: {len(elos)} ratings, {win_matrix.num_players}-player matrix, num_players={num_players}"
        )

    offsets = np.arange(-GRID_RADIUS, GRID_RADIUS + 1, dtype=np.float64) * GRID_STEP
    prior_record = WLRecord(prior_wl, prior_wl)
    elo_stdevs = [0.0] * num_players

    for player in range(num_players):
        reference = compute_local_log_likelihood(player, elos, win_matrix, num_players, prior_wl)
        grid_log_likelihoods = _grid_log_likelihoods(
            player, elos, win_matrix, num_players, prior_record, elos[player] + offsets
        )
        relative = grid_log_likelihoods - reference
        # shift so the largest term is exp(0); cancels in the normalization
        rel_probs = np.exp(relative - max(float(relative.max()), 0.0))
        rel_probs /= rel_probs.sum()

        second_moment = float(np.sum(rel_probs * offsets * offsets))
        elo_stdevs[player] = float(np.sqrt(second_moment))

    logger.debug(f"Computed stdevs for {num_players} competitors")
    return elo_stdevs
