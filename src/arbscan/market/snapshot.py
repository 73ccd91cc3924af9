"""
Snapshot acquisition.

Fans out the price and 24h volume requests concurrently, joins them and
ingests the result into an immutable ``Snapshot``. Missing volume data
degrades the scan (no volume filter); missing price data aborts it.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

from arbscan.config.constants import SOURCE_BINANCE
from arbscan.config.settings import Settings
from arbscan.core.errors import SnapshotTimeout, SourceUnavailable
from arbscan.core.types import ScanConfig, Snapshot, SnapshotProvider, TradingPair
from arbscan.exchange.client import BinanceClient, ExchangeClientError
from arbscan.exchange.models import PriceTicker, Ticker24h
from arbscan.market.symbols import SymbolResolver
from arbscan.simulation.market import SyntheticSnapshotProvider
from arbscan.utils.time import utc_now


logger = logging.getLogger(__name__)


__all__ = [
    "ExchangeSnapshotProvider",
    "MarketDataClient",
    "SnapshotProvider",
    "build_snapshot",
    "create_provider",
]


class MarketDataClient(Protocol):
    """Read-only market data endpoints used for snapshots."""

    async def get_ticker_prices(self) -> list[PriceTicker]: ...

    async def get_24h_tickers(self) -> list[Ticker24h]: ...

    async def close(self) -> None: ...


def build_snapshot(
    tickers: Iterable[PriceTicker],
    resolver: SymbolResolver,
    volumes: Mapping[str, Decimal] | None = None,
    captured_at: datetime | None = None,
    source: str = SOURCE_BINANCE,
) -> Snapshot:
    """
    Ingest raw tickers into a snapshot.

    Symbols are resolved to pair identities here, once. Unresolvable
    symbols and unparseable prices are dropped; a repeated symbol keeps
    its first listing.

    Args:
        tickers: Price tickers in exchange listing order.
        resolver: Symbol resolver for this scan's assets.
        volumes: Symbol to 24h quote volume, or None when unavailable.
        captured_at: Capture time (default: now).
        source: Data source label.

    Returns:
        Immutable snapshot.
    """
    pairs: dict[str, TradingPair] = {}
    unresolved = 0
    unparseable = 0

    for ticker in tickers:
        if ticker.symbol in pairs:
            logger.debug(f"Ignoring repeated listing of {ticker.symbol}")
            continue

        key = resolver.resolve(ticker.symbol)
        if key is None:
            unresolved += 1
            continue

        price = ticker.price_decimal
        if price is None:
            unparseable += 1
            continue

        pairs[ticker.symbol] = TradingPair(
            symbol=ticker.symbol,
            base_asset=key.base_asset,
            quote_asset=key.quote_asset,
            price=price,
        )

    if unresolved or unparseable:
        logger.debug(
            f"Ingestion dropped {unresolved} unresolved symbols, "
            f"{unparseable} unparseable prices"
        )

    return Snapshot.from_pairs(
        pairs.values(),
        volumes=volumes,
        captured_at=captured_at,
        source=source,
    )


def _discard(task: "asyncio.Task[Any] | None") -> None:
    """Cancel a task, consuming any exception it already raised."""
    if task is None:
        return
    if task.done():
        if not task.cancelled():
            task.exception()
        return
    task.cancel()


class ExchangeSnapshotProvider:
    """
    Snapshot provider backed by the exchange REST API.

    Each call issues one price request and, when a volume filter
    applies, one 24h ticker request, concurrently.
    """

    def __init__(
        self,
        client: MarketDataClient,
        deadline: float | None = None,
        source: str = SOURCE_BINANCE,
    ) -> None:
        """
        Initialize the provider.

        Args:
            client: Market data client (owned; closed by ``close()``).
            deadline: Default fetch deadline in seconds.
            source: Label attached to snapshots.
        """
        self._client = client
        self._deadline = deadline
        self._source = source

    async def close(self) -> None:
        await self._client.close()

    async def __aenter__(self) -> "ExchangeSnapshotProvider":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def fetch_snapshot(
        self,
        config: ScanConfig,
        deadline: float | None = None,
    ) -> Snapshot:
        """
        Capture one snapshot.

        Args:
            config: Scan configuration (assets, volume filter).
            deadline: Seconds allowed for the fetch phase; overrides the default.

        Returns:
            Snapshot with volumes, or with ``volumes=None`` if they were
            unavailable.

        Raises:
            SnapshotTimeout: If prices did not arrive before the deadline.
            SourceUnavailable: If the price request failed.
        """
        deadline = deadline if deadline is not None else self._deadline
        loop = asyncio.get_running_loop()
        deadline_at = loop.time() + deadline if deadline is not None else None

        price_task = asyncio.create_task(self._client.get_ticker_prices())
        volume_task = (
            asyncio.create_task(self._client.get_24h_tickers())
            if config.volume_filter_enabled
            else None
        )

        tickers: list[PriceTicker] | None = None
        try:
            async with asyncio.timeout_at(deadline_at):
                tickers = await price_task
        except TimeoutError as e:
            raise SnapshotTimeout(
                f"Price data not received within {deadline}s", deadline=deadline
            ) from e
        except ExchangeClientError as e:
            raise SourceUnavailable(f"Price fetch failed: {e}") from e
        finally:
            if tickers is None:
                _discard(price_task)
                _discard(volume_task)

        captured_at = utc_now()
        volumes = await self._collect_volumes(volume_task, deadline_at)

        resolver = SymbolResolver.for_assets(config.bridge_assets, config.quote_assets)
        return build_snapshot(
            tickers,
            resolver,
            volumes=volumes,
            captured_at=captured_at,
            source=self._source,
        )

    async def _collect_volumes(
        self,
        task: "asyncio.Task[list[Ticker24h]] | None",
        deadline_at: float | None,
    ) -> dict[str, Decimal] | None:
        """Join the volume request, degrading to None on failure."""
        if task is None:
            return None

        try:
            async with asyncio.timeout_at(deadline_at):
                tickers = await task
        except TimeoutError:
            logger.warning("24h volume data missed the fetch deadline; volume filter disabled")
            return None
        except ExchangeClientError as e:
            logger.warning(f"24h volume fetch failed ({e}); volume filter disabled")
            return None

        volumes: dict[str, Decimal] = {}
        for ticker in tickers:
            volume = ticker.quote_volume_decimal
            if volume is not None:
                volumes[ticker.symbol] = volume
        return volumes


def create_provider(settings: Settings) -> SnapshotProvider:
    """
    Build the snapshot provider named by the settings.

    Args:
        settings: Application settings.

    Returns:
        Exchange-backed provider, or the synthetic one when
        ``data_source`` is "synthetic".
    """
    if settings.data_source == "synthetic":
        logger.warning("Using synthetic market data; results are not real prices")
        return SyntheticSnapshotProvider()

    client = BinanceClient(
        base_url=settings.exchange_rest_url,
        timeout=settings.request_timeout_s,
    )
    return ExchangeSnapshotProvider(client, deadline=settings.fetch_deadline_s)
