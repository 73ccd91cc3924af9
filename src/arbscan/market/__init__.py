"""Market data module: symbol resolution, snapshots and pair filtering."""

from arbscan.market.filters import PairFilter, is_leveraged_token
from arbscan.market.snapshot import ExchangeSnapshotProvider, build_snapshot
from arbscan.market.symbols import SymbolResolver


__all__ = [
    "ExchangeSnapshotProvider",
    "PairFilter",
    "SymbolResolver",
    "build_snapshot",
    "is_leveraged_token",
]
