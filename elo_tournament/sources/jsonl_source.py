"""
JSONL result source.

Reads pairwise game results, one JSON object per line:

    {"first": "alice", "second": "bob", "first_wins": 3, "second_wins": 1, "draws": 2}

Counts are optional. Draws add half a win to each side. A line with no
counts at all records a single win for "first".
"""

import json
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from typing_extensions import NotRequired, TypedDict, override

from ..exceptions import ResultSourceError, ValidationError
from ..interfaces import ResultSource
from ..logging_config import get_logger
from ..models import GameResult

# Module-level logger
logger = get_logger("jsonl_source")


class ResultLine(TypedDict):
    """Type definition for one JSONL result line."""

    first: str
    second: str
    first_wins: NotRequired[float]
    second_wins: NotRequired[float]
    draws: NotRequired[float]


_RESULT_LINE_ADAPTER = TypeAdapter(ResultLine)


def result_from_line(line: ResultLine) -> GameResult:
    """Convert a validated line into a GameResult."""
    if "first_wins" not in line and "second_wins" not in line and "draws" not in line:
        return GameResult(line["first"], line["second"], 1.0, 0.0)
    draws = line.get("draws", 0.0)
    if draws < 0:
        raise ValidationError(f"draws cannot be negative, got {draws}")
    return GameResult(
        line["first"],
        line["second"],
        line.get("first_wins", 0.0) + 0.5 * draws,
        line.get("second_wins", 0.0) + 0.5 * draws,
    )


class JSONLResultSource(ResultSource):
    """
    JSONL-based result source.

    Invalid lines are skipped with a warning; a missing file is an error.
    """

    results_path: Path

    def __init__(self, results_path: Path | str):
        """
        Initialize JSONL result source.

        Args:
            results_path: Path to JSONL file of game results
        """
        self.results_path = Path(results_path)
        logger.info(f"JSONL result source initialized: {self.results_path}")

    @override
    def list_results(self) -> Iterable[GameResult]:
        """Load all valid game results from the JSONL file."""
        if not self.results_path.exists():
            raise ResultSourceError(f"Results file does not exist: {self.results_path}")

        with open(self.results_path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue

                try:
                    data = _RESULT_LINE_ADAPTER.validate_python(json.loads(line))
                    yield result_from_line(data)
                except (json.JSONDecodeError, PydanticValidationError, ValidationError) as e:
                    logger.warning(f"Skipping invalid line {line_number} in {self.results_path}: {e}")
                    continue

    def get_result_count(self) -> int:
        """Get number of valid results in the file."""
        return sum(1 for _ in self.list_results())
