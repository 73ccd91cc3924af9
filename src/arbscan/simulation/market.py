"""
Synthetic market snapshots for demo mode.

Generates internally consistent prices around reference levels with
occasional injected mispricings. Snapshots are always labelled
``source="synthetic"`` and are never a substitute for a failed market
fetch.
"""

import random
from dataclasses import dataclass, field, replace
from decimal import Decimal

from arbscan.config.constants import SOURCE_SYNTHETIC
from arbscan.core.types import ScanConfig, Snapshot, TradingPair
from arbscan.utils.time import utc_now


# Significant digits kept in generated prices
PRICE_DIGITS = 8


@dataclass
class SimulatedAsset:
    """Reference level of one simulated asset, in USD."""

    asset: str
    usd_price: float
    volatility: float = 0.0004  # Relative change per snapshot (0.04%)
    daily_volume_usd: float = 5_000_000.0
    current_price: float = field(init=False)

    def __post_init__(self) -> None:
        self.current_price = self.usd_price


def _to_decimal(value: float) -> Decimal:
    """Round a float price to a fixed number of significant digits."""
    return Decimal(f"{value:.{PRICE_DIGITS}g}")


class SyntheticSnapshotProvider:
    """
    Generates synthetic snapshots for demo mode.

    Features:
    - Random-walk prices with consistent cross rates
    - Every coin quoted in each home quote and each bridge asset
    - Occasional mispriced legs producing real opportunities
    - Seeded, so a given seed replays the same sequence
    """

    DEFAULT_ASSETS = [
        SimulatedAsset("BTC", 65000.0, 0.0003, 900_000_000.0),
        SimulatedAsset("ETH", 3500.0, 0.0004, 450_000_000.0),
        SimulatedAsset("BNB", 580.0, 0.0004, 60_000_000.0),
        SimulatedAsset("SOL", 180.0, 0.0005, 120_000_000.0),
        SimulatedAsset("XRP", 0.62, 0.0005, 80_000_000.0),
        SimulatedAsset("ADA", 0.65, 0.0005, 25_000_000.0),
        SimulatedAsset("DOGE", 0.15, 0.0006, 40_000_000.0),
        SimulatedAsset("LINK", 18.5, 0.0005, 15_000_000.0),
        SimulatedAsset("DOT", 7.2, 0.0005, 9_000_000.0),
        SimulatedAsset("LTC", 85.0, 0.0004, 12_000_000.0),
        SimulatedAsset("ATOM", 9.1, 0.0005, 6_000_000.0),
        SimulatedAsset("NEAR", 6.4, 0.0006, 50_000.0),
    ]

    def __init__(
        self,
        assets: list[SimulatedAsset] | None = None,
        seed: int | None = None,
        opportunity_frequency: float = 0.25,
        opportunity_profit_range: tuple[float, float] = (0.002, 0.012),  # 0.2% - 1.2%
        stable_depeg: float = 0.0005,
    ) -> None:
        """
        Initialize the provider.

        Args:
            assets: Assets to simulate (default: common majors).
            seed: Random seed; None for a nondeterministic sequence.
            opportunity_frequency: Probability per snapshot of each injected mispricing.
            opportunity_profit_range: Min/max relative mispricing.
            stable_depeg: Max relative deviation of a home quote from par.
        """
        # Copies, so walks never leak between providers
        self._assets = {a.asset: replace(a) for a in (assets or self.DEFAULT_ASSETS)}
        self._random = random.Random(seed)
        self._opportunity_frequency = opportunity_frequency
        self._opportunity_profit_range = opportunity_profit_range
        self._stable_depeg = stable_depeg
        self._snapshot_count = 0
        self._opportunities_created = 0

    def _step(self) -> None:
        """Advance every reference price by one random-walk step."""
        for asset in self._assets.values():
            shock = self._random.gauss(0, asset.volatility)
            asset.current_price *= 1 + shock

    def _usd_price(self, asset: str, quote_rates: dict[str, float]) -> float:
        if asset in quote_rates:
            return quote_rates[asset]
        return self._assets[asset].current_price

    def generate(self, config: ScanConfig) -> Snapshot:
        """
        Generate one snapshot for the configured assets.

        Args:
            config: Scan configuration naming the bridge and quote assets.

        Returns:
            Snapshot labelled synthetic, with 24h volumes.
        """
        self._step()
        self._snapshot_count += 1

        # Home quotes sit near par with a small independent depeg
        quote_rates = {
            quote: 1.0 + self._random.uniform(-self._stable_depeg, self._stable_depeg)
            for quote in config.quote_assets
        }
        bridges = [b for b in config.bridge_assets if b in self._assets]
        coins = [a for a in self._assets if a not in quote_rates]

        prices: dict[str, float] = {}
        volumes: dict[str, Decimal] = {}
        listed: list[tuple[str, str]] = []

        for coin in coins:
            markets = [*config.quote_assets, *(b for b in bridges if b != coin)]
            for quote in markets:
                # List only one orientation between two bridges
                if coin in bridges and quote in bridges:
                    if bridges.index(coin) < bridges.index(quote):
                        continue
                symbol = f"{coin}{quote}"
                prices[symbol] = self._usd_price(coin, quote_rates) / self._usd_price(
                    quote, quote_rates
                )
                listed.append((coin, quote))
                share = 1.0 if quote in quote_rates else 0.2
                volume_usd = self._assets[coin].daily_volume_usd * share
                volume_usd *= self._random.uniform(0.7, 1.3)
                volumes[symbol] = _to_decimal(volume_usd / self._usd_price(quote, quote_rates))

        self._maybe_misprice(prices, listed, bridges)

        pairs = [
            TradingPair(
                symbol=f"{coin}{quote}",
                base_asset=coin,
                quote_asset=quote,
                price=_to_decimal(prices[f"{coin}{quote}"]),
            )
            for coin, quote in listed
        ]

        return Snapshot.from_pairs(
            pairs,
            volumes=volumes,
            captured_at=utc_now(),
            source=SOURCE_SYNTHETIC,
        )

    def _maybe_misprice(
        self,
        prices: dict[str, float],
        listed: list[tuple[str, str]],
        bridges: list[str],
    ) -> None:
        """Occasionally push a bridge-quoted price away from its fair value."""
        bridge_markets = [
            f"{coin}{quote}" for coin, quote in listed if quote in bridges and coin not in bridges
        ]
        for symbol in bridge_markets:
            if self._random.random() > self._opportunity_frequency / len(bridge_markets):
                continue

            low, high = self._opportunity_profit_range
            skew = self._random.uniform(low, high)
            # Cheaper in the bridge asset favours Q -> B -> C -> Q
            direction = -1 if self._random.random() < 0.5 else 1
            prices[symbol] *= 1 + direction * skew
            self._opportunities_created += 1

    async def fetch_snapshot(
        self,
        config: ScanConfig,
        deadline: float | None = None,
    ) -> Snapshot:
        """
        Capture one synthetic snapshot.

        The deadline is accepted for interface compatibility; generation
        does no I/O.
        """
        return self.generate(config)

    async def close(self) -> None:
        """Nothing to release."""

    def get_stats(self) -> dict[str, int]:
        """Get simulator statistics."""
        return {
            "snapshot_count": self._snapshot_count,
            "opportunities_created": self._opportunities_created,
            "asset_count": len(self._assets),
        }
