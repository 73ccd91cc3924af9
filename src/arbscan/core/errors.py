"""
Scan error taxonomy.

Only ConfigurationError and SourceUnavailable abort a scan. InvalidPrice
and MissingLeg are per-candidate conditions absorbed by the pipeline.
"""

from decimal import Decimal


class ScanError(Exception):
    """Base exception for scanner errors."""

    pass


class ConfigurationError(ScanError):
    """A required quote/bridge anchor pair is absent from the snapshot."""

    def __init__(
        self,
        message: str,
        quote_asset: str | None = None,
        bridge_asset: str | None = None,
    ) -> None:
        super().__init__(message)
        self.quote_asset = quote_asset
        self.bridge_asset = bridge_asset


class SourceUnavailable(ScanError):
    """The upstream price snapshot could not be obtained."""

    pass


class SnapshotTimeout(SourceUnavailable):
    """The fetch deadline elapsed before price data arrived."""

    def __init__(self, message: str, deadline: float | None = None) -> None:
        super().__init__(message)
        self.deadline = deadline


class InvalidPrice(ScanError):
    """A leg price is zero, negative or non-finite."""

    def __init__(self, symbol: str, price: Decimal) -> None:
        super().__init__(f"Invalid price {price} for {symbol}")
        self.symbol = symbol
        self.price = price


class MissingLeg(ScanError):
    """No pair connects two assets of a candidate cycle."""

    def __init__(self, from_asset: str, to_asset: str) -> None:
        super().__init__(f"No pair between {from_asset} and {to_asset}")
        self.from_asset = from_asset
        self.to_asset = to_asset


class UnknownStrategyError(ScanError):
    """Requested strategy name is not configured."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        super().__init__(f"Unknown strategy: {name}")
        self.name = name
        self.available = available or []
