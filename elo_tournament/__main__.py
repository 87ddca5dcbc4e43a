"""
CLI entry point for elo tournament.

Parses arguments, validates config, wires components and prints the fitted
ratings.
"""

import argparse
import sys
from argparse import Namespace
from collections.abc import Sequence
from typing import TypedDict

from prettytable import PrettyTable

from .config import DEFAULT_MAX_ITERS, DEFAULT_PRIOR_WL, DEFAULT_TOLERANCE, FitConfig
from .diagnostics import StreamSink
from .exceptions import ConfigurationError, ResultSourceError, ValidationError
from .interfaces import DiagnosticSink, ResultSource
from .logging_config import get_logger, setup_logging
from .rankers.elo_ranker import BatchEloRanker
from .report import elo_report_lines
from .sources.jsonl_source import JSONLResultSource
from .sources.simulated_source import SimulatedTournament


class CLIArgs(TypedDict):
    """Typed representation of parsed CLI arguments."""
    results: str | None
    simulate: int | None
    games_per_pair: int
    spread: float
    seed: int | None
    prior_wl: float
    max_iters: int
    tolerance: float
    no_stdevs: bool
    progress: bool
    report: bool
    debug: bool
    log_level: str
    log_file: str | None


def parse_args(argv: Sequence[str] | None = None) -> Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Elo Tournament - static Elo ratings from pairwise results"
    )

    # Input: exactly one of a results file or a simulated round robin
    source = parser.add_mutually_exclusive_group(required=True)
    _ = source.add_argument(
        "--results",
        help="Path to JSONL file of pairwise game results"
    )
    _ = source.add_argument(
        "--simulate",
        type=int,
        metavar="N",
        help="Simulate a round robin between N competitors instead of reading results"
    )
    _ = parser.add_argument(
        "--games-per-pair",
        type=int,
        default=20,
        help="Games per pair for --simulate (default: 20)"
    )
    _ = parser.add_argument(
        "--spread",
        type=float,
        default=400.0,
        help="Spread of true ratings for --simulate (default: 400)"
    )
    _ = parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for --simulate"
    )

    # Fitting
    _ = parser.add_argument(
        "--prior-wl",
        type=float,
        default=DEFAULT_PRIOR_WL,
        help=f"Pseudo wins and losses against a rating-0 anchor (default: {DEFAULT_PRIOR_WL})"
    )
    _ = parser.add_argument(
        "--max-iters",
        type=int,
        default=DEFAULT_MAX_ITERS,
        help=f"Optimizer iteration budget (default: {DEFAULT_MAX_ITERS})"
    )
    _ = parser.add_argument(
        "--tolerance",
        type=float,
        default=DEFAULT_TOLERANCE,
        help=f"Stop when every step size is below this (default: {DEFAULT_TOLERANCE})"
    )
    _ = parser.add_argument(
        "--no-stdevs",
        action="store_true",
        help="Skip the standard deviation estimate"
    )

    # Output
    _ = parser.add_argument(
        "--progress",
        action="store_true",
        help="Print optimizer progress to stderr every 50 iterations"
    )
    _ = parser.add_argument(
        "--report",
        action="store_true",
        help="Print per-competitor second derivative cross-check"
    )
    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    _ = parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Set logging level (default: WARNING)"
    )
    _ = parser.add_argument(
        "--log-file",
        help="Also write logs to this rotating file"
    )

    return parser.parse_args(argv)


def args_to_typed(ns: Namespace) -> CLIArgs:
    """Convert argparse Namespace to typed CLIArgs."""
    return CLIArgs(
        results=ns.results,
        simulate=ns.simulate,
        games_per_pair=ns.games_per_pair,
        spread=ns.spread,
        seed=ns.seed,
        prior_wl=ns.prior_wl,
        max_iters=ns.max_iters,
        tolerance=ns.tolerance,
        no_stdevs=ns.no_stdevs,
        progress=ns.progress,
        report=ns.report,
        debug=ns.debug,
        log_level=ns.log_level,
        log_file=ns.log_file,
    )


def validate_config(args: CLIArgs) -> FitConfig:
    """Validate configuration parameters and build the fit configuration."""
    logger = get_logger("validate_config")

    if args["simulate"] is not None:
        if args["simulate"] < 0:
            raise ConfigurationError(f"--simulate must be non-negative, got {args['simulate']}")
        if args["games_per_pair"] < 0:
            raise ConfigurationError(f"--games-per-pair must be non-negative, got {args['games_per_pair']}")

    config = FitConfig(
        prior_wl=args["prior_wl"],
        max_iters=args["max_iters"],
        tolerance=args["tolerance"],
        compute_stdevs=not args["no_stdevs"],
    )
    logger.info(f"Configuration: {config}")
    return config


def wire_components(args: CLIArgs, config: FitConfig) -> tuple[ResultSource, BatchEloRanker]:
    """Wire the result source and ranker."""
    logger = get_logger("wire_components")

    source: ResultSource
    if args["simulate"] is not None:
        logger.info(f"Creating simulated tournament with {args['simulate']} competitors")
        source = SimulatedTournament.evenly_spread(
            args["simulate"],
            spread=args["spread"],
            games_per_pair=args["games_per_pair"],
            seed=args["seed"],
        )
    else:
        if args["results"] is None:
            raise ConfigurationError("Either --results or --simulate is required")
        logger.info(f"Creating JSONL result source: {args['results']}")
        source = JSONLResultSource(args["results"])

    out: DiagnosticSink | None = StreamSink(sys.stderr) if args["progress"] else None
    ranker = BatchEloRanker(config, out=out)
    return source, ranker


def format_rankings(ranker: BatchEloRanker, show_stdevs: bool = True) -> PrettyTable:
    """Build the final rankings table."""
    table = PrettyTable()
    table.field_names = ["Rank", "Competitor", "Elo", "Stdev", "Games", "Win%"]
    for column in ("Rank", "Elo", "Stdev", "Games", "Win%"):
        table.align[column] = "r"

    for i, (player_id, stats) in enumerate(ranker.get_all_statistics().items(), 1):
        table.add_row([
            i,
            player_id,
            f"{stats['score']:.1f}",
            f"{stats['uncertainty']:.1f}" if show_stdevs else "-",
            f"{stats['games']:g}",
            f"{stats['win_percentage']:.1f}%",
        ])
    return table


def main(argv: Sequence[str] | None = None) -> None:
    """Main CLI entry point."""
    args = args_to_typed(parse_args(argv))

    setup_logging(level=args["log_level"], debug=args["debug"], log_file=args["log_file"])
    logger = get_logger("main")

    try:
        config = validate_config(args)
        source, ranker = wire_components(args, config)

        ranker.add_results(source.list_results())
        if not ranker.player_ids:
            logger.warning("No results to rate")
            print("No results to rate")
            return

        ranker.fit()
        logger.info("Fit completed successfully")

        print(format_rankings(ranker, show_stdevs=config.compute_stdevs))

        if args["report"]:
            elos = [ranker.get_score(player_id) for player_id in ranker.player_ids]
            stdevs = [ranker.get_uncertainty(player_id) for player_id in ranker.player_ids]
            print()
            for player_id, line in zip(
                ranker.player_ids,
                elo_report_lines(elos, stdevs, ranker.build_matrix(), len(elos), config.prior_wl),
            ):
                print(f"{line} ({player_id})")

    except (ConfigurationError, ValidationError, ResultSourceError) as e:
        logger.error(str(e))
        print(f"Error: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\nInterrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    main()
