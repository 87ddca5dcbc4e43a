"""
Elo Tournament - Static Elo Estimation from Pairwise Results

Fits a single consistent rating scale to pairwise win/loss tallies by
maximizing a penalized Bradley-Terry likelihood, and estimates an
approximate standard deviation for every rating.
"""

from .config import FitConfig
from .interfaces import DiagnosticSink, Ranker, ResultSource
from .likelihood import prob_win
from .models import GameResult, WinMatrix, WLRecord, build_win_matrix
from .rankers import BatchEloRanker, compute_approx_elo_stdevs, compute_elos

__version__ = "0.1.0"
__all__ = [
    "FitConfig",
    "DiagnosticSink",
    "Ranker",
    "ResultSource",
    "prob_win",
    "GameResult",
    "WinMatrix",
    "WLRecord",
    "build_win_matrix",
    "BatchEloRanker",
    "compute_approx_elo_stdevs",
    "compute_elos",
]
