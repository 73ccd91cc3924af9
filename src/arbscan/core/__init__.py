"""Core module containing errors and type definitions.

The pipeline itself lives in ``arbscan.core.engine``.
"""

from arbscan.core.errors import (
    ConfigurationError,
    InvalidPrice,
    MissingLeg,
    ScanError,
    SnapshotTimeout,
    SourceUnavailable,
    UnknownStrategyError,
)
from arbscan.core.types import (
    CyclePath,
    Leg,
    LegDirection,
    Opportunity,
    OpportunityType,
    PairKey,
    ScanConfig,
    ScanResult,
    ScanStats,
    Snapshot,
    SnapshotProvider,
    TradingPair,
)


__all__ = [
    "ConfigurationError",
    "CyclePath",
    "InvalidPrice",
    "Leg",
    "LegDirection",
    "MissingLeg",
    "Opportunity",
    "OpportunityType",
    "PairKey",
    "ScanConfig",
    "ScanError",
    "ScanResult",
    "ScanStats",
    "Snapshot",
    "SnapshotProvider",
    "SnapshotTimeout",
    "SourceUnavailable",
    "TradingPair",
    "UnknownStrategyError",
]
