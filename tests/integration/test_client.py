"""
Integration tests for BinanceClient.

Runs the client against a local aiohttp server serving canned
market data responses.
"""

from collections.abc import AsyncIterator
from typing import Any

import pytest
import pytest_asyncio
from aiohttp import test_utils, web

from arbscan.exchange.client import BinanceClient, ExchangeAPIError, ExchangeClientError


PRICES = [
    {"symbol": "ETHBTC", "price": "0.05000000"},
    {"symbol": "BTCUSDT", "price": "50000.00000000"},
]

TICKERS_24H = [
    {
        "symbol": "ETHBTC",
        "lastPrice": "0.05",
        "volume": "50000",
        "quoteVolume": "2500",
        "count": 1200,
    },
]


def _json_route(body: Any, status: int = 200) -> Any:
    async def handler(request: web.Request) -> web.Response:
        return web.json_response(body, status=status)

    return handler


async def _start(routes: dict[str, Any]) -> test_utils.TestServer:
    app = web.Application()
    for path, handler in routes.items():
        app.router.add_get(path, handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


@pytest_asyncio.fixture
async def healthy_server() -> AsyncIterator[test_utils.TestServer]:
    """Server answering both ticker endpoints."""
    server = await _start(
        {
            "/api/v3/ticker/price": _json_route(PRICES),
            "/api/v3/ticker/24hr": _json_route(TICKERS_24H),
        }
    )
    yield server
    await server.close()


class TestBinanceClient:
    """Tests for BinanceClient."""

    @pytest.mark.asyncio
    async def test_ticker_prices(self, healthy_server: test_utils.TestServer) -> None:
        async with BinanceClient(base_url=str(healthy_server.make_url("/"))) as client:
            tickers = await client.get_ticker_prices()

        assert [t.symbol for t in tickers] == ["ETHBTC", "BTCUSDT"]
        assert tickers[0].price == "0.05000000"

    @pytest.mark.asyncio
    async def test_24h_tickers(self, healthy_server: test_utils.TestServer) -> None:
        async with BinanceClient(base_url=str(healthy_server.make_url("/"))) as client:
            tickers = await client.get_24h_tickers()

        assert tickers[0].quote_volume == "2500"
        assert tickers[0].count == 1200

    @pytest.mark.asyncio
    async def test_api_error(self) -> None:
        """Exchange error bodies surface their code and message."""
        server = await _start(
            {
                "/api/v3/ticker/price": _json_route(
                    {"code": -1003, "msg": "Too many requests."}, status=429
                ),
            }
        )
        try:
            async with BinanceClient(base_url=str(server.make_url("/"))) as client:
                with pytest.raises(ExchangeAPIError) as exc_info:
                    await client.get_ticker_prices()
        finally:
            await server.close()

        assert exc_info.value.code == -1003
        assert "Too many requests." in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        async def handler(request: web.Request) -> web.Response:
            return web.Response(text="<html>maintenance</html>", status=503)

        server = await _start({"/api/v3/ticker/price": handler})
        try:
            async with BinanceClient(base_url=str(server.make_url("/"))) as client:
                with pytest.raises(ExchangeClientError) as exc_info:
                    await client.get_ticker_prices()
        finally:
            await server.close()

        assert exc_info.value.code == 503

    @pytest.mark.asyncio
    async def test_unexpected_shape(self) -> None:
        """A payload that is not a ticker list is rejected."""
        server = await _start({"/api/v3/ticker/price": _json_route({"symbol": "ETHBTC"})})
        try:
            async with BinanceClient(base_url=str(server.make_url("/"))) as client:
                with pytest.raises(ExchangeClientError, match="Unexpected response shape"):
                    await client.get_ticker_prices()
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_connection_error(self, healthy_server: test_utils.TestServer) -> None:
        """A server that went away is a network error."""
        base_url = str(healthy_server.make_url("/"))
        await healthy_server.close()

        async with BinanceClient(base_url=base_url, timeout=2.0) as client:
            with pytest.raises(ExchangeClientError, match="Network error"):
                await client.get_ticker_prices()

    @pytest.mark.asyncio
    async def test_close_without_session(self) -> None:
        client = BinanceClient()

        await client.close()

        assert client.base_url == "https://api.binance.com"
