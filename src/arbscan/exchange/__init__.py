"""Exchange integration module for Binance market data."""

from arbscan.exchange.client import BinanceClient, ExchangeAPIError, ExchangeClientError
from arbscan.exchange.models import PriceTicker, Ticker24h


__all__ = [
    "BinanceClient",
    "ExchangeAPIError",
    "ExchangeClientError",
    "PriceTicker",
    "Ticker24h",
]
