"""
Type definitions for the scanner.

This module contains the dataclasses, enums and Protocol definitions
used throughout the application. Every entity here is created fresh per
scan and is immutable once built, so a snapshot can be shared freely by
the pipeline stages.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol

from arbscan.config.constants import (
    DEFAULT_BRIDGE_ASSETS,
    DEFAULT_MIN_QUOTE_VOLUME,
    DEFAULT_QUOTE_ASSETS,
)
from arbscan.utils.math import format_profit, round_output, round_percentage
from arbscan.utils.time import format_iso, utc_now


# =============================================================================
# Enums
# =============================================================================


class OpportunityType(str, Enum):
    """Cycle shape."""

    TRIANGULAR = "Triangular"
    CROSS_PAIR = "CrossPair"


class LegDirection(str, Enum):
    """Trade direction of a leg relative to the pair's base asset."""

    BUY = "buy"
    SELL = "sell"


# =============================================================================
# Market Data Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class PairKey:
    """Canonical pair identity, validated once at ingestion."""

    base_asset: str
    quote_asset: str

    def __post_init__(self) -> None:
        if not self.base_asset or not self.quote_asset:
            raise ValueError("Pair assets cannot be empty")
        if self.base_asset == self.quote_asset:
            raise ValueError(f"Pair cannot quote {self.base_asset} in itself")

    @property
    def symbol(self) -> str:
        """Exchange symbol (base + quote concatenation)."""
        return f"{self.base_asset}{self.quote_asset}"

    def __str__(self) -> str:
        return f"{self.base_asset}/{self.quote_asset}"


@dataclass(slots=True, frozen=True)
class TradingPair:
    """
    One priced market in a snapshot.

    Price is the amount of quote asset paid for one unit of base asset.
    Prices are not validated here: a zero or non-finite price is
    rejected when a cycle using the pair is evaluated.
    """

    symbol: str
    base_asset: str
    quote_asset: str
    price: Decimal

    @classmethod
    def from_key(cls, key: PairKey, price: Decimal) -> "TradingPair":
        """Build a pair from its canonical identity."""
        return cls(
            symbol=key.symbol,
            base_asset=key.base_asset,
            quote_asset=key.quote_asset,
            price=price,
        )

    @property
    def key(self) -> PairKey:
        """Canonical identity of this pair."""
        return PairKey(self.base_asset, self.quote_asset)


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    Immutable price snapshot captured at one point in time.

    ``volumes`` is None when 24h volume data is unavailable, in which
    case volume filtering is disabled for the scan.
    """

    pairs: Mapping[str, TradingPair]
    captured_at: datetime
    volumes: Mapping[str, Decimal] | None = None
    source: str = "unknown"

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[TradingPair],
        volumes: Mapping[str, Decimal] | None = None,
        captured_at: datetime | None = None,
        source: str = "unknown",
    ) -> "Snapshot":
        """
        Build a snapshot from pairs, preserving their order.

        Raises:
            ValueError: If a symbol appears twice.
        """
        by_symbol: dict[str, TradingPair] = {}
        for pair in pairs:
            if pair.symbol in by_symbol:
                raise ValueError(f"Duplicate symbol in snapshot: {pair.symbol}")
            by_symbol[pair.symbol] = pair

        return cls(
            pairs=MappingProxyType(by_symbol),
            captured_at=captured_at or utc_now(),
            volumes=MappingProxyType(dict(volumes)) if volumes is not None else None,
            source=source,
        )

    @property
    def has_volume(self) -> bool:
        """Check if volume data was captured."""
        return self.volumes is not None

    def get(self, symbol: str) -> TradingPair | None:
        """Get pair by symbol."""
        return self.pairs.get(symbol)

    def __iter__(self) -> Iterator[TradingPair]:
        return iter(self.pairs.values())

    def __len__(self) -> int:
        return len(self.pairs)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.pairs


# =============================================================================
# Cycle Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Leg:
    """
    Single directional trade within a cycle.

    BUY spends the pair's quote asset to acquire its base asset;
    SELL spends the base asset to acquire the quote asset.
    """

    from_asset: str
    to_asset: str
    pair: TradingPair
    direction: LegDirection

    @classmethod
    def through(cls, pair: TradingPair, from_asset: str) -> "Leg":
        """
        Build the leg that spends ``from_asset`` on ``pair``.

        The direction follows from the pair's base/quote roles, never
        from the leg's position in the cycle.
        """
        if from_asset == pair.quote_asset:
            return cls(from_asset, pair.base_asset, pair, LegDirection.BUY)
        if from_asset == pair.base_asset:
            return cls(from_asset, pair.quote_asset, pair, LegDirection.SELL)
        raise ValueError(f"{from_asset} is not part of {pair.symbol}")

    @property
    def price(self) -> Decimal:
        return self.pair.price

    @property
    def symbol(self) -> str:
        return self.pair.symbol

    def __repr__(self) -> str:
        return f"{self.from_asset}->{self.to_asset}({self.symbol}:{self.direction.value})"


@dataclass(slots=True, frozen=True)
class CyclePath:
    """
    Ordered chain of legs forming a round trip.

    Triangular cycles have 3 legs and end on their start asset.
    Cross-pair cycles have 2 legs and end on a second quote asset
    treated at par with the first.
    """

    kind: OpportunityType
    legs: tuple[Leg, ...]
    coin: str

    def __post_init__(self) -> None:
        expected = 3 if self.kind == OpportunityType.TRIANGULAR else 2
        if len(self.legs) != expected:
            raise ValueError(f"{self.kind.value} cycle needs {expected} legs")

        for current, following in zip(self.legs, self.legs[1:]):
            if current.to_asset != following.from_asset:
                raise ValueError(f"Legs do not chain: {current!r} then {following!r}")

        if (
            self.kind == OpportunityType.TRIANGULAR
            and self.legs[0].from_asset != self.legs[-1].to_asset
        ):
            raise ValueError("Triangular cycle must return to its start asset")

    @property
    def assets(self) -> tuple[str, ...]:
        """Assets visited, start to end."""
        return (self.legs[0].from_asset, *(leg.to_asset for leg in self.legs))

    @property
    def id(self) -> str:
        return "-".join(self.assets)

    @property
    def start_asset(self) -> str:
        return self.legs[0].from_asset

    @property
    def symbols(self) -> tuple[str, ...]:
        return tuple(leg.symbol for leg in self.legs)


# =============================================================================
# Opportunity Types
# =============================================================================


@dataclass(slots=True, frozen=True)
class Opportunity:
    """
    Detected cycle with its compounded yield.

    ``percentage`` is always derived from ``theoretical_output``.
    ``timestamp`` is the snapshot capture time, so identical snapshots
    produce identical opportunities.
    """

    kind: OpportunityType
    path: CyclePath
    coin: str
    theoretical_output: Decimal
    timestamp: datetime

    @property
    def percentage(self) -> Decimal:
        """Profit in percent at full precision (0 = breakeven)."""
        return (self.theoretical_output - 1) * 100

    @property
    def path_id(self) -> str:
        return self.path.id

    @property
    def is_profitable(self) -> bool:
        """Check if the cycle returns more than it started with."""
        return self.theoretical_output > 1

    def to_dict(self) -> dict[str, Any]:
        """Serialize with reporting precision."""
        percentage = round_percentage(self.percentage)
        return {
            "type": self.kind.value,
            "path": list(self.path.assets),
            "coin": self.coin,
            "percentage": float(percentage),
            "theoreticalOutput": float(round_output(self.theoretical_output)),
            "profit": format_profit(percentage),
            "timestamp": format_iso(self.timestamp),
        }


# =============================================================================
# Scan Types
# =============================================================================


def _normalize_assets(assets: Iterable[str], label: str) -> tuple[str, ...]:
    normalized = tuple(dict.fromkeys(a.strip().upper() for a in assets))
    if not normalized or not all(normalized):
        raise ValueError(f"{label} cannot be empty")
    return normalized


@dataclass(slots=True, frozen=True)
class ScanConfig:
    """
    Effective configuration of one scan.

    Built by the caller (service, CLI) from settings and a strategy
    name. The engine reads nothing else.
    """

    strategy_name: str
    scan_limit: int
    threshold: Decimal
    bridge_assets: tuple[str, ...] = DEFAULT_BRIDGE_ASSETS
    quote_assets: tuple[str, ...] = DEFAULT_QUOTE_ASSETS
    min_quote_volume: Decimal = DEFAULT_MIN_QUOTE_VOLUME

    def __post_init__(self) -> None:
        if self.scan_limit < 1:
            raise ValueError("scan_limit must be at least 1")

        threshold = Decimal(str(self.threshold))
        if not threshold.is_finite() or threshold < 0:
            raise ValueError(f"threshold must be a finite non-negative number: {threshold}")

        min_volume = Decimal(str(self.min_quote_volume))
        if not min_volume.is_finite() or min_volume < 0:
            raise ValueError(f"min_quote_volume must be non-negative: {min_volume}")

        object.__setattr__(self, "threshold", threshold)
        object.__setattr__(self, "min_quote_volume", min_volume)
        object.__setattr__(
            self, "bridge_assets", _normalize_assets(self.bridge_assets, "bridge_assets")
        )
        object.__setattr__(
            self, "quote_assets", _normalize_assets(self.quote_assets, "quote_assets")
        )

    @property
    def volume_filter_enabled(self) -> bool:
        """Check if a minimum volume applies (and volume must be fetched)."""
        return self.min_quote_volume > 0

    @property
    def known_assets(self) -> frozenset[str]:
        """Assets this config names explicitly."""
        return frozenset(self.bridge_assets) | frozenset(self.quote_assets)


@dataclass
class ScanStats:
    """Counters collected during one scan."""

    raw_pairs: int = 0
    filtered_pairs: int = 0
    candidates: int = 0
    invalid_prices: int = 0
    opportunities: int = 0
    volume_filter_enabled: bool = False
    best_percentage: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        best = self.best_percentage
        return {
            "rawPairs": self.raw_pairs,
            "filteredPairs": self.filtered_pairs,
            "candidates": self.candidates,
            "invalidPrices": self.invalid_prices,
            "opportunities": self.opportunities,
            "volumeFilter": self.volume_filter_enabled,
            "bestPercentage": float(round_percentage(best)) if best is not None else None,
        }


@dataclass(slots=True, frozen=True)
class ScanResult:
    """Ordered opportunities of one scan plus its context."""

    opportunities: tuple[Opportunity, ...]
    config: ScanConfig
    captured_at: datetime
    source: str
    stats: ScanStats = field(default_factory=ScanStats)

    def __len__(self) -> int:
        return len(self.opportunities)

    def __iter__(self) -> Iterator[Opportunity]:
        return iter(self.opportunities)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "strategy": self.config.strategy_name,
            "source": self.source,
            "volumeFilter": self.stats.volume_filter_enabled,
            "count": len(self.opportunities),
            "opportunities": [o.to_dict() for o in self.opportunities],
            "timestamp": format_iso(self.captured_at),
        }


# =============================================================================
# Protocols (Interfaces)
# =============================================================================


class SnapshotProvider(Protocol):
    """Protocol for snapshot sources."""

    async def fetch_snapshot(
        self,
        config: ScanConfig,
        deadline: float | None = None,
    ) -> Snapshot:
        """Capture one snapshot for the given scan configuration."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


def is_usable_price(price: Decimal) -> bool:
    """Check that a price is finite and strictly positive."""
    return price.is_finite() and price > 0
