"""
Integration tests for snapshot acquisition.

Tests the concurrent price/volume fan-out, deadline handling and
ingestion of raw tickers.
"""

import logging
from decimal import Decimal

import pytest

from arbscan.config.settings import Settings
from arbscan.core.errors import SnapshotTimeout, SourceUnavailable
from arbscan.core.types import PairKey, ScanConfig
from arbscan.exchange.client import ExchangeClientError
from arbscan.exchange.models import PriceTicker
from arbscan.market.filters import PairFilter
from arbscan.market.snapshot import ExchangeSnapshotProvider, build_snapshot, create_provider
from arbscan.market.symbols import SymbolResolver
from arbscan.simulation.market import SyntheticSnapshotProvider
from tests.mocks import FIXED_TIME, MockBinanceClient, failing_client


@pytest.fixture
def volume_config() -> ScanConfig:
    """Config with the volume filter enabled."""
    return ScanConfig(
        strategy_name="test",
        scan_limit=50,
        threshold=Decimal("0.3"),
        bridge_assets=("BTC",),
        quote_assets=("USDT",),
        min_quote_volume=Decimal("100000"),
    )


class TestBuildSnapshot:
    """Tests for ticker ingestion."""

    def test_resolves_symbols(self) -> None:
        tickers = [
            PriceTicker(symbol="ETHBTC", price="0.05"),
            PriceTicker(symbol="BTCFDUSD", price="50000"),
        ]

        snapshot = build_snapshot(tickers, SymbolResolver(), captured_at=FIXED_TIME)

        assert snapshot.get("ETHBTC").key == PairKey("ETH", "BTC")  # type: ignore[union-attr]
        assert snapshot.get("BTCFDUSD").key == PairKey("BTC", "FDUSD")  # type: ignore[union-attr]
        assert snapshot.source == "binance"
        assert snapshot.captured_at == FIXED_TIME

    def test_drops_unresolved_and_unparseable(self) -> None:
        tickers = [
            PriceTicker(symbol="FOOBAR", price="1"),
            PriceTicker(symbol="ETHBTC", price="n/a"),
            PriceTicker(symbol="XYZUSDT", price="26"),
        ]

        snapshot = build_snapshot(tickers, SymbolResolver())

        assert [p.symbol for p in snapshot] == ["XYZUSDT"]

    def test_first_listing_wins(self) -> None:
        tickers = [
            PriceTicker(symbol="ETHBTC", price="0.05"),
            PriceTicker(symbol="ETHBTC", price="0.06"),
        ]

        snapshot = build_snapshot(tickers, SymbolResolver())

        assert snapshot.get("ETHBTC").price == Decimal("0.05")  # type: ignore[union-attr]

    def test_keeps_zero_price(self) -> None:
        """Zero prices are ingested; cycles using them are rejected later."""
        snapshot = build_snapshot([PriceTicker(symbol="ETHBTC", price="0")], SymbolResolver())

        assert snapshot.get("ETHBTC").price == 0  # type: ignore[union-attr]


class TestExchangeSnapshotProvider:
    """Tests for the exchange-backed provider."""

    @pytest.mark.asyncio
    async def test_prices_and_volumes(self, volume_config: ScanConfig) -> None:
        client = MockBinanceClient()
        provider = ExchangeSnapshotProvider(client)

        snapshot = await provider.fetch_snapshot(volume_config, deadline=5.0)

        assert len(snapshot) == 5
        assert snapshot.has_volume
        assert snapshot.volumes["XYZBTC"] == Decimal("4500")  # type: ignore[index]
        assert snapshot.get("XYZBTC").base_asset == "XYZ"  # type: ignore[union-attr]
        assert client.price_calls == 1
        assert client.volume_calls == 1

    @pytest.mark.asyncio
    async def test_volume_skipped_without_filter(self, scan_config: ScanConfig) -> None:
        """No minimum volume means no 24h request."""
        client = MockBinanceClient()

        snapshot = await ExchangeSnapshotProvider(client).fetch_snapshot(scan_config)

        assert client.volume_calls == 0
        assert not snapshot.has_volume

    @pytest.mark.asyncio
    async def test_volume_error_degrades(
        self,
        volume_config: ScanConfig,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A failed volume request leaves volumes unavailable."""
        client = MockBinanceClient(volume_error=ExchangeClientError("HTTP 503"))

        with caplog.at_level(logging.WARNING):
            snapshot = await ExchangeSnapshotProvider(client).fetch_snapshot(volume_config)

        assert len(snapshot) == 5
        assert snapshot.volumes is None
        assert "volume filter disabled" in caplog.text

    @pytest.mark.asyncio
    async def test_ticker_without_quote_volume_is_unknown(
        self,
        volume_config: ScanConfig,
    ) -> None:
        """A 24h ticker lacking quoteVolume leaves the symbol unfiltered."""
        client = MockBinanceClient(
            tickers_24h=[
                {"symbol": "BTCUSDT", "quoteVolume": "1000000000"},
                {"symbol": "XYZBTC", "lastPrice": "0.0005", "volume": "9000000"},
                {"symbol": "XYZUSDT", "quoteVolume": "2340000"},
            ]
        )

        snapshot = await ExchangeSnapshotProvider(client).fetch_snapshot(volume_config)
        kept = PairFilter.from_config(volume_config).filter(snapshot, snapshot.volumes)

        assert snapshot.volumes is not None
        assert "XYZBTC" not in snapshot.volumes
        assert "XYZBTC" in [pair.symbol for pair in kept]

    @pytest.mark.asyncio
    async def test_slow_volume_degrades(self, volume_config: ScanConfig) -> None:
        """Volumes missing the deadline are abandoned, prices kept."""
        client = MockBinanceClient(volume_latency=5.0)

        snapshot = await ExchangeSnapshotProvider(client).fetch_snapshot(
            volume_config, deadline=0.05
        )

        assert len(snapshot) == 5
        assert snapshot.volumes is None
        assert client.volume_cancelled

    @pytest.mark.asyncio
    async def test_price_error_is_source_unavailable(self, volume_config: ScanConfig) -> None:
        provider = ExchangeSnapshotProvider(failing_client())

        with pytest.raises(SourceUnavailable) as exc_info:
            await provider.fetch_snapshot(volume_config)

        assert not isinstance(exc_info.value, SnapshotTimeout)

    @pytest.mark.asyncio
    async def test_price_timeout(self, volume_config: ScanConfig) -> None:
        """Prices missing the deadline abort the fetch."""
        client = MockBinanceClient(price_latency=5.0, volume_latency=5.0)
        provider = ExchangeSnapshotProvider(client, deadline=0.05)

        with pytest.raises(SnapshotTimeout) as exc_info:
            await provider.fetch_snapshot(volume_config)

        assert exc_info.value.deadline == 0.05

    @pytest.mark.asyncio
    async def test_configured_assets_resolve(self) -> None:
        """Bridge assets outside the known quotes still split symbols."""
        config = ScanConfig(
            strategy_name="test",
            scan_limit=50,
            threshold=Decimal("0.3"),
            bridge_assets=("SOL",),
            quote_assets=("USDT",),
            min_quote_volume=Decimal(0),
        )
        client = MockBinanceClient(prices=[{"symbol": "JUPSOL", "price": "0.005"}])

        snapshot = await ExchangeSnapshotProvider(client).fetch_snapshot(config)

        assert snapshot.get("JUPSOL").key == PairKey("JUP", "SOL")  # type: ignore[union-attr]

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self) -> None:
        client = MockBinanceClient()

        async with ExchangeSnapshotProvider(client):
            pass

        assert client.closed


class TestCreateProvider:
    """Tests for provider selection."""

    @pytest.mark.asyncio
    async def test_exchange_provider(self) -> None:
        provider = create_provider(Settings(_env_file=None))

        assert isinstance(provider, ExchangeSnapshotProvider)
        await provider.close()

    def test_synthetic_provider(self) -> None:
        provider = create_provider(Settings(_env_file=None, data_source="synthetic"))

        assert isinstance(provider, SyntheticSnapshotProvider)

