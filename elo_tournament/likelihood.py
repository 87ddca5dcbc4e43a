"""
Pairwise likelihood model.

Bradley-Terry win probabilities on the Elo scale and the log-likelihood of
win/loss tallies. Shared by the optimizer, the uncertainty estimator and the
fit report so all of them score the exact same model.
"""

import math

import numpy as np
import numpy.typing as npt

from .models import WLRecord

# 400 Elo per factor of 10 in odds: 400 / ln(10)
ELO_PER_LOG_GAMMA = 173.717792761

# log(1 + exp(x)) is capped at this value for x >= LOG_ONE_PLUS_EXP_CAP
LOG_ONE_PLUS_EXP_CAP = 50.0


def log_one_plus_exp(x: float) -> float:
    """Compute log(1 + exp(x)), capped for large x."""
    if x >= LOG_ONE_PLUS_EXP_CAP:
        return LOG_ONE_PLUS_EXP_CAP
    return math.log1p(math.exp(x))


def log_one_plus_exp_second_derivative(x: float) -> float:
    """Second derivative of log(1 + exp(x)), i.e. 1 / (exp(x/2) + exp(-x/2))^2."""
    z = math.exp(-abs(x))
    return z / ((1.0 + z) * (1.0 + z))


def prob_win(elo_diff: float) -> float:
    """
    Probability that the first party wins.

    Args:
        elo_diff: Rating of the first party minus rating of the second

    Returns:
        Win probability in [0, 1]; exactly 0.5 for a zero difference
    """
    log_gamma_diff = elo_diff / ELO_PER_LOG_GAMMA
    if log_gamma_diff >= 0:
        return 1.0 / (1.0 + math.exp(-log_gamma_diff))
    z = math.exp(log_gamma_diff)
    return z / (1.0 + z)


def log_likelihood_of_wl(elo_first_minus_second: float, record: WLRecord) -> float:
    """Log-likelihood of a win/loss tally given the rating difference."""
    log_gamma_diff = elo_first_minus_second / ELO_PER_LOG_GAMMA
    log_prob_first_win = -log_one_plus_exp(-log_gamma_diff)
    log_prob_second_win = -log_one_plus_exp(log_gamma_diff)
    return record.first_wins * log_prob_first_win + record.second_wins * log_prob_second_win


def log_likelihood_of_wl_second_derivative(elo_first_minus_second: float, record: WLRecord) -> float:
    """Second derivative of log_likelihood_of_wl with respect to the rating difference."""
    log_gamma_diff = elo_first_minus_second / ELO_PER_LOG_GAMMA
    first = -log_one_plus_exp_second_derivative(-log_gamma_diff)
    second = -log_one_plus_exp_second_derivative(log_gamma_diff)
    return (record.first_wins * first + record.second_wins * second) / (
        ELO_PER_LOG_GAMMA * ELO_PER_LOG_GAMMA
    )


def log_one_plus_exp_array(x: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """Vectorized log_one_plus_exp with the same cap."""
    clipped = np.minimum(x, LOG_ONE_PLUS_EXP_CAP)
    return np.where(x >= LOG_ONE_PLUS_EXP_CAP, LOG_ONE_PLUS_EXP_CAP, np.log1p(np.exp(clipped)))


def log_likelihood_of_wl_array(
    elo_first_minus_second: npt.NDArray[np.float64], record: WLRecord
) -> npt.NDArray[np.float64]:
    """Vectorized log_likelihood_of_wl over an array of rating differences."""
    log_gamma_diff = elo_first_minus_second / ELO_PER_LOG_GAMMA
    result = np.zeros_like(log_gamma_diff, dtype=np.float64)
    if record.first_wins:
        result -= record.first_wins * log_one_plus_exp_array(-log_gamma_diff)
    if record.second_wins:
        result -= record.second_wins * log_one_plus_exp_array(log_gamma_diff)
    return result
