"""
Pair eligibility filtering.

Removes pairs that cannot anchor a meaningful cycle: stable coins as
the traded coin, leveraged tokens, deprecated quote assets and, when
volume data is present, illiquid markets.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from decimal import Decimal

from arbscan.config.constants import (
    DEPRECATED_QUOTE_ASSETS,
    LEVERAGED_PATTERN_EXEMPT,
    LEVERAGED_TOKEN_SUFFIXES,
    STABLE_ASSETS,
)
from arbscan.core.types import ScanConfig, TradingPair, is_usable_price


logger = logging.getLogger(__name__)

# A coin of at least two characters followed by a leveraged suffix
LEVERAGED_PATTERN = re.compile(rf"^.{{2,}}({'|'.join(LEVERAGED_TOKEN_SUFFIXES)})$")


def is_leveraged_token(asset: str) -> bool:
    """
    Check if an asset is a leveraged token.

    Example:
        >>> is_leveraged_token("BTCUP")
        True
        >>> is_leveraged_token("SYRUP")
        False
    """
    if asset in LEVERAGED_PATTERN_EXEMPT:
        return False
    return LEVERAGED_PATTERN.match(asset) is not None


class PairFilter:
    """
    Pure, order-preserving pair filter.

    Eligibility rules (stable, leveraged, deprecated quote) apply to
    every pair regardless of volume. The volume rule applies only to
    pairs with volume data that can be valued in a home quote asset.
    """

    __slots__ = (
        "_home_quotes",
        "_min_quote_volume",
        "_stable_assets",
        "_deprecated_quotes",
    )

    def __init__(
        self,
        home_quotes: Iterable[str],
        min_quote_volume: Decimal,
        stable_assets: frozenset[str] = STABLE_ASSETS,
        deprecated_quotes: frozenset[str] = DEPRECATED_QUOTE_ASSETS,
    ) -> None:
        """
        Initialize the filter.

        Args:
            home_quotes: Quote assets volumes are valued in, in priority order.
            min_quote_volume: Exclusive lower bound on 24h quote volume.
            stable_assets: Assets never treated as a tradeable coin.
            deprecated_quotes: Quote assets whose pairs are ignored.
        """
        self._home_quotes = tuple(home_quotes)
        self._min_quote_volume = min_quote_volume
        self._stable_assets = stable_assets
        self._deprecated_quotes = deprecated_quotes

    @classmethod
    def from_config(cls, config: ScanConfig) -> "PairFilter":
        """Build the filter for one scan."""
        return cls(
            home_quotes=config.quote_assets,
            min_quote_volume=config.min_quote_volume,
        )

    def is_eligible(self, pair: TradingPair) -> bool:
        """Check the volume-independent rules."""
        if pair.base_asset in self._stable_assets:
            return False
        if pair.quote_asset in self._deprecated_quotes:
            return False
        return not is_leveraged_token(pair.base_asset)

    def filter(
        self,
        pairs: Iterable[TradingPair],
        volumes: Mapping[str, Decimal] | None = None,
    ) -> list[TradingPair]:
        """
        Filter pairs, preserving their order.

        Args:
            pairs: Pairs to filter.
            volumes: Symbol to 24h quote volume, or None when unavailable.

        Returns:
            Pairs that pass every rule.
        """
        pairs = list(pairs)
        candidates = [pair for pair in pairs if self.is_eligible(pair)]
        if volumes is None or self._min_quote_volume <= 0:
            return candidates

        rates = self._home_rates(pairs)
        kept: list[TradingPair] = []
        for pair in candidates:
            volume = self._home_volume(pair, volumes, rates)
            if volume is None or volume > self._min_quote_volume:
                kept.append(pair)
            else:
                logger.debug(f"Dropping {pair.symbol}: volume {volume} below minimum")
        return kept

    def _home_rates(self, pairs: list[TradingPair]) -> dict[str, Decimal]:
        """Price of each asset in the first home quote that lists it."""
        home = {q: i for i, q in enumerate(self._home_quotes)}
        rates: dict[str, tuple[int, Decimal]] = {}
        for pair in pairs:
            rank = home.get(pair.quote_asset)
            if rank is None or not is_usable_price(pair.price):
                continue
            current = rates.get(pair.base_asset)
            if current is None or rank < current[0]:
                rates[pair.base_asset] = (rank, pair.price)
        return {asset: price for asset, (_, price) in rates.items()}

    def _home_volume(
        self,
        pair: TradingPair,
        volumes: Mapping[str, Decimal],
        rates: Mapping[str, Decimal],
    ) -> Decimal | None:
        """24h quote volume valued in a home quote, or None if unknown."""
        volume = volumes.get(pair.symbol)
        if volume is None or not volume.is_finite():
            return None
        if pair.quote_asset in self._home_quotes:
            return volume
        rate = rates.get(pair.quote_asset)
        if rate is None:
            return None
        return volume * rate
