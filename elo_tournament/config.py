"""
Fitting configuration.
"""

import math
from dataclasses import dataclass

from .exceptions import ConfigurationError

DEFAULT_PRIOR_WL = 1.0
DEFAULT_MAX_ITERS = 1000
DEFAULT_TOLERANCE = 1e-5
PROGRESS_EVERY = 50  # report optimizer progress every N iterations


@dataclass
class FitConfig:
    """Configuration for a rating fit."""

    prior_wl: float = DEFAULT_PRIOR_WL  # pseudo wins and losses against the anchor at 0
    max_iters: int = DEFAULT_MAX_ITERS
    tolerance: float = DEFAULT_TOLERANCE  # stop once every step size is below this
    compute_stdevs: bool = True

    def __post_init__(self):
        """Validate configuration."""
        validate_fit_parameters(self.prior_wl, self.max_iters, self.tolerance)


def validate_fit_parameters(prior_wl: float, max_iters: int, tolerance: float, num_players: int = 0) -> None:
    """Raise ConfigurationError for parameters outside the optimizer's contract."""
    if num_players < 0:
        raise ConfigurationError(f"num_players cannot be negative, got {num_players}")
    if not math.isfinite(prior_wl) or prior_wl < 0:
        raise ConfigurationError(f"prior_wl must be a non-negative number, got {prior_wl}")
    if max_iters < 0:
        raise ConfigurationError(f"max_iters cannot be negative, got {max_iters}")
    if not (tolerance > 0):
        raise ConfigurationError(f"tolerance must be positive, got {tolerance}")
