"""
Opportunity ranking.

Applies the strategy's profitability threshold and produces the final
deterministic ordering.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal

from arbscan.core.types import Opportunity


logger = logging.getLogger(__name__)


def ranking_key(opportunity: Opportunity) -> tuple[Decimal, str, str]:
    """Sort key: percentage descending, then path id, then kind."""
    return (-opportunity.percentage, opportunity.path_id, opportunity.kind.value)


class OpportunityRanker:
    """
    Filters and orders opportunities.

    Stateless: each call depends only on its arguments, and the output
    order does not depend on the input order.
    """

    __slots__ = ()

    def rank(
        self,
        candidates: Iterable[Opportunity],
        threshold: Decimal,
    ) -> list[Opportunity]:
        """
        Keep opportunities above the threshold, best first.

        Args:
            candidates: Evaluated opportunities.
            threshold: Minimum profit in percentage points (exclusive).

        Returns:
            Opportunities with ``percentage > threshold``, sorted by
            percentage descending with ties broken by path id and kind.
        """
        kept = [opp for opp in candidates if opp.percentage > threshold]
        kept.sort(key=ranking_key)
        return kept
