"""
Rating estimation.

Provides the compass search optimizer, the discretized-posterior
uncertainty estimator, and a Ranker implementation built on both.

Available implementations:
- BatchEloRanker: accumulates pairwise results and fits static Elo ratings
  with an anchor prior and per-rating standard deviations
"""

from .elo_ranker import BatchEloRanker
from .optimizer import (
    compute_elos,
    compute_local_log_likelihood,
    compute_local_log_likelihood_second_derivative,
)
from .uncertainty import compute_approx_elo_stdevs

__all__ = [
    "BatchEloRanker",
    "compute_elos",
    "compute_local_log_likelihood",
    "compute_local_log_likelihood_second_derivative",
    "compute_approx_elo_stdevs",
]
