"""
Cycle yield calculation.

Computes the compounded return of a candidate cycle from the leg
prices in the snapshot.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Context, Decimal

from arbscan.config.constants import YIELD_CONTEXT_PRECISION
from arbscan.core.errors import InvalidPrice
from arbscan.core.types import CyclePath, LegDirection, Opportunity, is_usable_price


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class YieldResult:
    """Compounded return of one cycle at full precision."""

    theoretical_output: Decimal

    @property
    def percentage(self) -> Decimal:
        """Profit in percent (0 = breakeven)."""
        return (self.theoretical_output - 1) * 100


class YieldCalculator:
    """
    Calculates cycle yields in Decimal arithmetic.

    Starting from one unit of the cycle's first asset, a BUY leg
    divides by the price and a SELL leg multiplies by it. Buy prices
    and sell prices are multiplied exactly and divided once, so a cycle
    with ``price1 * price2 == price3`` yields exactly 1.
    """

    __slots__ = ("_product_context", "_context")

    def __init__(self, precision: int = YIELD_CONTEXT_PRECISION) -> None:
        """
        Initialize calculator.

        Args:
            precision: Significant digits of the final division.
        """
        self._context = Context(prec=precision)
        # Wide enough that products of a few exchange prices never round
        self._product_context = Context(prec=precision * 4)

    def compute_yield(self, path: CyclePath) -> YieldResult:
        """
        Compute the compounded return of a cycle.

        Args:
            path: Candidate cycle.

        Returns:
            YieldResult with the output per unit of input.

        Raises:
            InvalidPrice: If any leg price is zero, negative or non-finite.
        """
        numerator = Decimal(1)
        denominator = Decimal(1)

        for leg in path.legs:
            price = leg.price
            if not is_usable_price(price):
                raise InvalidPrice(leg.symbol, price)

            if leg.direction == LegDirection.BUY:
                denominator = self._product_context.multiply(denominator, price)
            else:
                numerator = self._product_context.multiply(numerator, price)

        return YieldResult(theoretical_output=self._context.divide(numerator, denominator))

    def evaluate(self, path: CyclePath, timestamp: datetime) -> Opportunity:
        """
        Compute a cycle's yield and wrap it as an opportunity.

        Args:
            path: Candidate cycle.
            timestamp: Snapshot capture time.

        Raises:
            InvalidPrice: If any leg price is unusable.
        """
        result = self.compute_yield(path)
        return Opportunity(
            kind=path.kind,
            path=path,
            coin=path.coin,
            theoretical_output=result.theoretical_output,
            timestamp=timestamp,
        )
