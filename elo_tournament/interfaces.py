"""
Abstract base classes defining the interfaces for the elo tournament system.

All interfaces are synchronous; the fitting core has no suspension points.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TypedDict

from .models import GameResult


class CompetitorStatistics(TypedDict):
    """TypedDict for per-competitor ranker statistics."""
    score: float
    uncertainty: float
    games: float
    win_percentage: float


class DiagnosticSink(ABC):
    """Receives human-readable progress lines from the optimizer."""

    @abstractmethod
    def write_line(self, line: str) -> None:
        """Consume one progress line (without trailing newline)."""
        pass


class ResultSource(ABC):
    """Interface for supplying game results."""

    @abstractmethod
    def list_results(self) -> Iterable[GameResult]:
        """Return all available game results."""
        pass


class Ranker(ABC):
    """Interface for rating competitors from accumulated results."""

    @abstractmethod
    def add_result(self, res: GameResult) -> None:
        """Record a game result."""
        pass

    @abstractmethod
    def get_score(self, player_id: str) -> float:
        """Get current rating for a competitor."""
        pass

    @abstractmethod
    def get_uncertainty(self, player_id: str) -> float:
        """Get current rating standard deviation for a competitor."""
        pass

    @abstractmethod
    def get_total_game_count(self, player_id: str) -> float:
        """Get total (possibly fractional) game count for a competitor."""
        pass

    @abstractmethod
    def get_win_percentage(self, player_id: str) -> float:
        """Get win percentage for a competitor."""
        pass
