"""
Result source implementations.
"""

from .jsonl_source import JSONLResultSource
from .simulated_source import SimulatedTournament

__all__ = [
    "JSONLResultSource",
    "SimulatedTournament",
]
