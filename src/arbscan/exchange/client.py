"""
Async Binance REST API client.

Read-only market data access with:
- Connection pooling and keep-alive
- Fast JSON parsing with orjson
- Response validation with pydantic
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiohttp
import orjson
from pydantic import TypeAdapter, ValidationError

from arbscan.config.constants import (
    BINANCE_REST_URL,
    DEFAULT_REQUEST_TIMEOUT,
    ENDPOINT_TICKER_24HR,
    ENDPOINT_TICKER_PRICE,
)
from arbscan.exchange.models import (
    PRICE_TICKERS,
    TICKERS_24H,
    APIErrorPayload,
    PriceTicker,
    Ticker24h,
)


class ExchangeClientError(Exception):
    """Base exception for exchange client errors."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ExchangeAPIError(ExchangeClientError):
    """Exception for exchange API error responses."""

    pass


class BinanceClient:
    """
    Async Binance REST API client.

    Features:
    - Single session with connection pooling
    - Keep-alive for reduced latency
    - orjson for fast JSON parsing
    - Per-request timeout

    Use as an async context manager, or call ``close()`` when done.
    """

    def __init__(
        self,
        base_url: str = BINANCE_REST_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        """
        Initialize the Binance client.

        Args:
            base_url: REST API base URL.
            timeout: Total timeout per request in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=100,
                limit_per_host=50,
                keepalive_timeout=30,
                enable_cleanup_closed=True,
                force_close=False,
            )

            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=self._timeout,
                json_serialize=lambda x: orjson.dumps(x).decode(),
            )

        return self._session

    async def close(self) -> None:
        """Close the client session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "BinanceClient":
        await self._get_session()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    @asynccontextmanager
    async def _request_context(self) -> AsyncIterator[aiohttp.ClientSession]:
        """Context manager for making requests."""
        session = await self._get_session()
        try:
            yield session
        except aiohttp.ClientError as e:
            raise ExchangeClientError(f"Network error: {e}") from e
        except TimeoutError as e:
            raise ExchangeClientError("Request timed out") from e

    async def _request(
        self,
        endpoint: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a GET request.

        Args:
            endpoint: API endpoint.
            params: Query parameters.

        Returns:
            Parsed JSON response.

        Raises:
            ExchangeAPIError: On API error response.
            ExchangeClientError: On network or other errors.
        """
        url = f"{self._base_url}{endpoint}"

        async with self._request_context() as session:
            async with session.get(url, params=params or {}) as response:
                return await self._handle_response(response)

    async def _handle_response(self, response: aiohttp.ClientResponse) -> Any:
        """Parse and validate response."""
        body = await response.read()

        try:
            data = orjson.loads(body)
        except orjson.JSONDecodeError as e:
            raise ExchangeClientError(
                f"Invalid JSON response (HTTP {response.status}): {e}",
                code=response.status,
            ) from e

        if response.status >= 400:
            try:
                payload = APIErrorPayload.model_validate(data)
            except ValidationError:
                raise ExchangeAPIError(
                    f"API error {response.status}", code=response.status
                ) from None
            raise ExchangeAPIError(f"API error {payload.code}: {payload.msg}", code=payload.code)

        return data

    def _validate(self, adapter: TypeAdapter[Any], data: Any, endpoint: str) -> Any:
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise ExchangeClientError(
                f"Unexpected response shape from {endpoint}: {e.error_count()} errors"
            ) from e

    # =========================================================================
    # Public Endpoints
    # =========================================================================

    async def get_ticker_prices(self) -> list[PriceTicker]:
        """
        Get the latest price of every listed symbol.

        Returns:
            Tickers in exchange listing order.
        """
        data = await self._request(ENDPOINT_TICKER_PRICE)
        return self._validate(PRICE_TICKERS, data, ENDPOINT_TICKER_PRICE)  # type: ignore[no-any-return]

    async def get_24h_tickers(self) -> list[Ticker24h]:
        """
        Get rolling 24h statistics of every listed symbol.

        Note: This is a heavy request, so callers skip it when no
        volume filter applies.
        """
        data = await self._request(ENDPOINT_TICKER_24HR)
        return self._validate(TICKERS_24H, data, ENDPOINT_TICKER_24HR)  # type: ignore[no-any-return]
