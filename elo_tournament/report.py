"""
Fit report.

Per-competitor summary lines including a cross-check of the analytic local
second derivative against a central finite difference.
"""

from collections.abc import Sequence

from .models import WinMatrix
from .rankers.optimizer import (
    compute_local_log_likelihood,
    compute_local_log_likelihood_second_derivative,
)

FINITE_DIFFERENCE_STEP = 1.0


def approx_local_second_derivative(
    player: int,
    elos: Sequence[float],
    win_matrix: WinMatrix,
    num_players: int,
    prior_wl: float,
    step: float = FINITE_DIFFERENCE_STEP,
) -> float:
    """Central finite difference of the local log-likelihood in the player's rating."""
    shifted = list(elos)
    center = compute_local_log_likelihood(player, shifted, win_matrix, num_players, prior_wl)
    shifted[player] = elos[player] + step
    above = compute_local_log_likelihood(player, shifted, win_matrix, num_players, prior_wl)
    shifted[player] = elos[player] - step
    below = compute_local_log_likelihood(player, shifted, win_matrix, num_players, prior_wl)
    return (above - 2.0 * center + below) / (step * step)


def elo_report_lines(
    elos: Sequence[float],
    stdevs: Sequence[float],
    win_matrix: WinMatrix,
    num_players: int,
    prior_wl: float,
) -> list[str]:
    """One line per competitor: rating, stdev, analytic and approximate 2nd derivative."""
    lines = []
    for player in range(num_players):
        second_derivative = compute_local_log_likelihood_second_derivative(
            player, elos, win_matrix, num_players, prior_wl
        )
        approx = approx_local_second_derivative(player, elos, win_matrix, num_players, prior_wl)
        lines.append(
            f"Elo {player} = {elos[player]:g} stdev {stdevs[player]:g} 2nd der {second_derivative:g} approx {approx:g}"
        )
    return lines
