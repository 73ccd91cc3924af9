"""
Unit tests for SymbolResolver.
"""

import pytest

from arbscan.core.types import PairKey
from arbscan.market.symbols import SymbolResolver


class TestSymbolResolver:
    """Tests for SymbolResolver."""

    @pytest.mark.parametrize(
        ("symbol", "base", "quote"),
        [
            ("ETHBTC", "ETH", "BTC"),
            ("ETHUSDT", "ETH", "USDT"),
            ("BTCFDUSD", "BTC", "FDUSD"),
            ("SOLUSDC", "SOL", "USDC"),
            ("DOGEEUR", "DOGE", "EUR"),
        ],
    )
    def test_resolves_longest_quote(self, symbol: str, base: str, quote: str) -> None:
        assert SymbolResolver().resolve(symbol) == PairKey(base, quote)

    def test_unknown_quote(self) -> None:
        assert SymbolResolver().resolve("FOOBAR") is None

    def test_symbol_equal_to_quote(self) -> None:
        """A bare quote asset has no base."""
        assert SymbolResolver().resolve("USDT") is None

    def test_for_assets_adds_quotes(self) -> None:
        """Configured assets become resolvable quotes."""
        resolver = SymbolResolver.for_assets(("XYZ",))

        assert SymbolResolver().resolve("ABCXYZ") is None
        assert resolver.resolve("ABCXYZ") == PairKey("ABC", "XYZ")

    def test_quote_order(self) -> None:
        """Quotes are tried longest first, then alphabetically."""
        resolver = SymbolResolver(["BTC", "USDT", "FDUSD", "ETH"])

        assert resolver.quote_assets == ("FDUSD", "USDT", "BTC", "ETH")

    def test_resolution_cached(self) -> None:
        resolver = SymbolResolver()

        assert resolver.resolve("ETHBTC") is resolver.resolve("ETHBTC")
