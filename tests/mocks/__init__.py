"""Mock implementations for testing."""

from tests.mocks.exchange import MockBinanceClient, failing_client
from tests.mocks.market import (
    FIXED_TIME,
    StaticSnapshotProvider,
    cross_path,
    make_opportunity,
    make_pair,
    make_snapshot,
    triangle_path,
)


__all__ = [
    "FIXED_TIME",
    "MockBinanceClient",
    "StaticSnapshotProvider",
    "cross_path",
    "failing_client",
    "make_opportunity",
    "make_pair",
    "make_snapshot",
    "triangle_path",
]
