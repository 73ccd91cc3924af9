"""
Pydantic models for Binance market data responses.

These models provide type-safe parsing of exchange responses
with automatic validation. Numbers stay strings until ingestion,
where they are parsed into ``Decimal``.
"""

from decimal import Decimal

from pydantic import BaseModel, Field, TypeAdapter

from arbscan.utils.math import parse_decimal


class PriceTicker(BaseModel):
    """Latest price of one symbol (``/api/v3/ticker/price``)."""

    symbol: str
    price: str

    @property
    def price_decimal(self) -> Decimal | None:
        """Get price as Decimal, or None if unparseable."""
        return parse_decimal(self.price)


class Ticker24h(BaseModel):
    """Rolling 24h statistics of one symbol (``/api/v3/ticker/24hr``)."""

    symbol: str
    last_price: str = Field(default="0", alias="lastPrice")
    volume: str = "0"
    quote_volume: str | None = Field(default=None, alias="quoteVolume")
    count: int = 0

    model_config = {"populate_by_name": True}

    @property
    def quote_volume_decimal(self) -> Decimal | None:
        """Get 24h quote volume as Decimal, or None if missing or unparseable."""
        if self.quote_volume is None:
            return None
        return parse_decimal(self.quote_volume)


class APIErrorPayload(BaseModel):
    """Error body returned by the exchange on failures."""

    code: int
    msg: str = ""


PRICE_TICKERS: TypeAdapter[list[PriceTicker]] = TypeAdapter(list[PriceTicker])
TICKERS_24H: TypeAdapter[list[Ticker24h]] = TypeAdapter(list[Ticker24h])
