"""
Core dataclasses for the elo tournament system.

Defines WLRecord, WinMatrix and GameResult models with validation.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .exceptions import ValidationError


def _check_count(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name} cannot be negative, got {value}")


@dataclass(frozen=True)
class WLRecord:
    """
    Win/loss tally for an ordered pair of competitors (first, second).

    Counts may be fractional, e.g. half a win to each side for a draw.
    """

    first_wins: float = 0.0
    second_wins: float = 0.0

    def __post_init__(self) -> None:
        """Validate counts."""
        _check_count("first_wins", self.first_wins)
        _check_count("second_wins", self.second_wins)

    @property
    def total(self) -> float:
        return self.first_wins + self.second_wins

    def __add__(self, other: "WLRecord") -> "WLRecord":
        return WLRecord(self.first_wins + other.first_wins, self.second_wins + other.second_wins)


EMPTY_RECORD = WLRecord()


@dataclass
class WinMatrix:
    """
    Square N x N matrix of WLRecords stored flat in row-major order.

    Entry (i, j) holds how often i beat j and j beat i in games recorded
    with i as the first party. Entries (i, j) and (j, i) are independent.
    """

    num_players: int
    records: list[WLRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate shape and fill an empty matrix with zero records."""
        if self.num_players < 0:
            raise ValidationError(f"num_players cannot be negative, got {self.num_players}")
        size = self.num_players * self.num_players
        if not self.records:
            self.records = [EMPTY_RECORD] * size
        elif len(self.records) != size:
            raise ValidationError(
                f"Expected {size} records for {self.num_players} players, got {len(self.records)}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[WLRecord | tuple[float, float]]]) -> "WinMatrix":
        """Build a matrix from nested rows of records or (first_wins, second_wins) tuples."""
        num_players = len(rows)
        records: list[WLRecord] = []
        for i, row in enumerate(rows):
            if len(row) != num_players:
                raise ValidationError(f"Row {i} has {len(row)} entries, expected {num_players}")
            for entry in row:
                records.append(entry if isinstance(entry, WLRecord) else WLRecord(*entry))
        return cls(num_players, records)

    def _index(self, i: int, j: int) -> int:
        if not (0 <= i < self.num_players and 0 <= j < self.num_players):
            raise IndexError(f"({i}, {j}) out of range for {self.num_players} players")
        return i * self.num_players + j

    def __getitem__(self, key: tuple[int, int]) -> WLRecord:
        return self.records[self._index(*key)]

    def __setitem__(self, key: tuple[int, int], record: WLRecord) -> None:
        self.records[self._index(*key)] = record

    def add(self, i: int, j: int, first_wins: float, second_wins: float) -> None:
        """Accumulate a tally into entry (i, j)."""
        self[i, j] = self[i, j] + WLRecord(first_wins, second_wins)

    def games_played(self, player: int) -> float:
        """Total games involving player, in either direction."""
        total = 0.0
        for other in range(self.num_players):
            if other == player:
                continue
            total += self[player, other].total + self[other, player].total
        return total

    def wins(self, player: int) -> float:
        """Total wins of player, in either direction."""
        total = 0.0
        for other in range(self.num_players):
            if other == player:
                continue
            total += self[player, other].first_wins + self[other, player].second_wins
        return total


@dataclass
class GameResult:
    """Tally of games between two named competitors."""

    first_id: str
    second_id: str
    first_wins: float = 1.0
    second_wins: float = 0.0

    def __post_init__(self) -> None:
        """Validate game result data."""
        if not self.first_id or not self.second_id:
            raise ValidationError("competitor ids cannot be empty")
        if self.first_id == self.second_id:
            raise ValidationError(f"competitor cannot play itself: {self.first_id}")
        _check_count("first_wins", self.first_wins)
        _check_count("second_wins", self.second_wins)


def build_win_matrix(
    results: Iterable[GameResult],
    player_ids: Sequence[str] | None = None,
) -> tuple[list[str], WinMatrix]:
    """
    Sum game results into a WinMatrix.

    Args:
        results: Game results between named competitors
        player_ids: Fixed index order; when omitted, competitors are indexed
            in order of first appearance

    Returns:
        (player_ids, matrix) where player_ids[i] names matrix index i
    """
    results = list(results)
    if player_ids is None:
        ids: list[str] = []
        seen: set[str] = set()
        for res in results:
            for player_id in (res.first_id, res.second_id):
                if player_id not in seen:
                    seen.add(player_id)
                    ids.append(player_id)
    else:
        ids = list(player_ids)
        if len(set(ids)) != len(ids):
            raise ValidationError("player_ids contains duplicates")

    index = {player_id: i for i, player_id in enumerate(ids)}
    matrix = WinMatrix(len(ids))
    for res in results:
        if res.first_id not in index or res.second_id not in index:
            raise ValidationError(f"Unknown competitor in result {res.first_id} vs {res.second_id}")
        matrix.add(index[res.first_id], index[res.second_id], res.first_wins, res.second_wins)
    return ids, matrix
