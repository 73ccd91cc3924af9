"""
Symbol resolution.

Exchange price feeds list bare concatenated symbols (``ETHBTC``). The
resolver splits each one into a validated ``PairKey`` once, at
ingestion, so nothing downstream ever slices symbol strings.
"""

from collections.abc import Iterable

from arbscan.config.constants import KNOWN_QUOTE_ASSETS
from arbscan.core.types import PairKey


class SymbolResolver:
    """
    Splits symbols into base/quote by longest known quote suffix.

    Longest match wins, so ``BTCFDUSD`` resolves to BTC/FDUSD rather
    than BTCFD/USD, and ``ETHUSDT`` to ETH/USDT rather than ETHUSD/T.
    """

    __slots__ = ("_quotes", "_cache")

    def __init__(self, quote_assets: Iterable[str] = KNOWN_QUOTE_ASSETS) -> None:
        """
        Initialize the resolver.

        Args:
            quote_assets: Assets that may appear as a symbol's quote.
        """
        quotes = {q.strip().upper() for q in quote_assets if q.strip()}
        self._quotes: tuple[str, ...] = tuple(sorted(quotes, key=lambda q: (-len(q), q)))
        self._cache: dict[str, PairKey | None] = {}

    @classmethod
    def for_assets(cls, *asset_groups: Iterable[str]) -> "SymbolResolver":
        """Resolver over the known quotes plus extra asset groups."""
        quotes = set(KNOWN_QUOTE_ASSETS)
        for group in asset_groups:
            quotes.update(group)
        return cls(quotes)

    @property
    def quote_assets(self) -> tuple[str, ...]:
        return self._quotes

    def resolve(self, symbol: str) -> PairKey | None:
        """
        Resolve a symbol into its pair identity.

        Args:
            symbol: Exchange symbol (e.g., "ETHBTC").

        Returns:
            PairKey, or None if no known quote asset matches.
        """
        if symbol in self._cache:
            return self._cache[symbol]

        key = self._split(symbol.upper())
        self._cache[symbol] = key
        return key

    def _split(self, symbol: str) -> PairKey | None:
        for quote in self._quotes:
            if len(symbol) > len(quote) and symbol.endswith(quote):
                return PairKey(symbol[: -len(quote)], quote)
        return None
