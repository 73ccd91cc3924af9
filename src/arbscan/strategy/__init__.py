"""Strategy module for cycle enumeration, yield calculation and ranking."""

from arbscan.strategy.calculator import YieldCalculator, YieldResult
from arbscan.strategy.graph import PathEnumerator
from arbscan.strategy.opportunity import OpportunityRanker, ranking_key


__all__ = [
    "OpportunityRanker",
    "PathEnumerator",
    "YieldCalculator",
    "YieldResult",
    "ranking_key",
]
