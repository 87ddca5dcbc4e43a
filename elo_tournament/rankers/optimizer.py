"""
Rating optimizer.

Fits ratings by coordinate-wise compass search on the penalized
log-likelihood of a win matrix. Each competitor in turn tries one step up and
one step down, keeps a strictly better move, and grows or shrinks its own
step size accordingly. Ratings are updated in place, so later competitors in
a pass already see the moves of earlier ones.
"""

from collections.abc import Sequence

from ..config import PROGRESS_EVERY, validate_fit_parameters
from ..exceptions import ValidationError
from ..interfaces import DiagnosticSink
from ..likelihood import log_likelihood_of_wl, log_likelihood_of_wl_second_derivative
from ..logging_config import get_logger
from ..models import WinMatrix, WLRecord

INITIAL_STEP = 100.0
STEP_GROWTH = 1.1
STEP_SHRINK = 0.8

# Module-level logger
logger = get_logger("optimizer")


def _local_log_likelihood(
    player: int,
    elos: Sequence[float],
    records: Sequence[WLRecord],
    num_players: int,
    prior_record: WLRecord,
) -> float:
    elo = elos[player]
    row = player * num_players
    log_likelihood = 0.0
    for y in range(num_players):
        if y == player:
            continue
        log_likelihood += log_likelihood_of_wl(elo - elos[y], records[row + y])
        log_likelihood += log_likelihood_of_wl(elos[y] - elo, records[y * num_players + player])
    # anchor competitor fixed at rating 0
    log_likelihood += log_likelihood_of_wl(elo - 0.0, prior_record)
    return log_likelihood


def compute_local_log_likelihood(
    player: int,
    elos: Sequence[float],
    win_matrix: WinMatrix,
    num_players: int,
    prior_wl: float,
) -> float:
    """
    Penalized log-likelihood of every result involving one competitor.

    Sums the records in both directions against every other competitor plus
    prior_wl pseudo wins and losses against the anchor at rating 0.
    """
    return _local_log_likelihood(player, elos, win_matrix.records, num_players, WLRecord(prior_wl, prior_wl))


def compute_local_log_likelihood_second_derivative(
    player: int,
    elos: Sequence[float],
    win_matrix: WinMatrix,
    num_players: int,
    prior_wl: float,
) -> float:
    """Analytic second derivative of compute_local_log_likelihood in the player's rating."""
    elo = elos[player]
    total = 0.0
    for y in range(num_players):
        if y == player:
            continue
        total += log_likelihood_of_wl_second_derivative(elo - elos[y], win_matrix[player, y])
        total += log_likelihood_of_wl_second_derivative(elos[y] - elo, win_matrix[y, player])
    total += log_likelihood_of_wl_second_derivative(elo - 0.0, WLRecord(prior_wl, prior_wl))
    return total


def compute_elos(
    win_matrix: WinMatrix,
    num_players: int,
    prior_wl: float,
    max_iters: int,
    tolerance: float,
    out: DiagnosticSink | None = None,
    initial_elos: Sequence[float] | None = None,
) -> list[float]:
    """
    Fit ratings maximizing the penalized log-likelihood of the win matrix.

    Counts in the matrix are trusted here; WLRecord rejects negative or
    non-finite counts when it is constructed.

    Args:
        win_matrix: N x N win/loss records
        num_players: Number of competitors N
        prior_wl: Pseudo wins and losses of every competitor against a
            virtual anchor at rating 0
        max_iters: Iteration budget
        tolerance: Stop once the largest step size falls below this
        out: Optional sink for progress lines every PROGRESS_EVERY iterations
        initial_elos: Starting ratings (defaults to all zeros)

    Returns:
        Ratings indexed like the matrix. When the budget runs out before
        convergence the current ratings are returned as they are.
    """
    validate_fit_parameters(prior_wl, max_iters, tolerance, num_players)
    if win_matrix.num_players != num_players:
        raise ValidationError(
            f"Win matrix is for {win_matrix.num_players} players, expected {num_players}"
        )

    if initial_elos is None:
        elos = [0.0] * num_players
    else:
        if len(initial_elos) != num_players:
            raise ValidationError(f"Expected {num_players} initial ratings, got {len(initial_elos)}")
        elos = [float(elo) for elo in initial_elos]

    if num_players == 0:
        return elos

    next_delta = [INITIAL_STEP] * num_players
    records = win_matrix.records
    prior_record = WLRecord(prior_wl, prior_wl)

    def iterate() -> float:
        max_elo_diff = 0.0
        for x in range(num_players):
            old_elo = elos[x]
            hi_elo = old_elo + next_delta[x]
            lo_elo = old_elo - next_delta[x]

            likelihood = _local_log_likelihood(x, elos, records, num_players, prior_record)

            elos[x] = hi_elo
            likelihood_hi = _local_log_likelihood(x, elos, records, num_players, prior_record)

            elos[x] = lo_elo
            likelihood_lo = _local_log_likelihood(x, elos, records, num_players, prior_record)

            if likelihood_hi > likelihood and likelihood_hi >= likelihood_lo:
                elos[x] = hi_elo
                next_delta[x] *= STEP_GROWTH
            elif likelihood_lo > likelihood:
                elos[x] = lo_elo
                next_delta[x] *= STEP_GROWTH
            else:
                elos[x] = old_elo
                next_delta[x] *= STEP_SHRINK

            max_elo_diff = max(max_elo_diff, next_delta[x])
        return max_elo_diff

    logger.debug(f"Fitting {num_players} competitors: prior_wl={prior_wl}, max_iters={max_iters}, tolerance={tolerance}")

    max_elo_diff = INITIAL_STEP
    for i in range(max_iters):
        max_elo_diff = iterate()

        if out is not None and i % PROGRESS_EVERY == 0:
            out.write_line(f"Iteration {i} maxEloDiff = {max_elo_diff:g}")
        if max_elo_diff < tolerance:
            logger.debug(f"Converged after {i + 1} iterations (maxEloDiff={max_elo_diff:g})")
            break
    else:
        if max_iters > 0:
            logger.info(
                f"Iteration budget of {max_iters} exhausted before convergence (maxEloDiff={max_elo_diff:g}, tolerance={tolerance:g})"
            )

    return elos
