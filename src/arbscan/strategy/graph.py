"""
Cycle path enumeration using graph analysis.

Uses NetworkX to index the filtered pair set as a directed graph, then
walks it to derive triangular and cross-pair candidate cycles.
"""

import logging
from collections.abc import Iterable, Iterator
from decimal import Decimal
from itertools import combinations
from typing import Any

import networkx as nx

from arbscan.core.errors import ConfigurationError, MissingLeg
from arbscan.core.types import CyclePath, Leg, OpportunityType, TradingPair, is_usable_price


logger = logging.getLogger(__name__)


class PathEnumerator:
    """
    Derives candidate cycles from a filtered pair set.

    Uses a directed graph where:
    - Nodes are assets (BTC, ETH, USDT, etc.)
    - Each edge runs base -> quote and carries its TradingPair

    Node and edge order follow the order pairs were added, so candidate
    order is deterministic for a given snapshot.

    Quote/bridge anchors are looked up in a separate graph over the
    unfiltered snapshot when one is given, so an anchor the filter
    dropped (a stable bridge, a thin anchor market) still anchors.
    """

    def __init__(
        self,
        pairs: Iterable[TradingPair],
        anchor_pairs: Iterable[TradingPair] | None = None,
    ) -> None:
        """
        Build the pair graph.

        Args:
            pairs: Filtered pairs in snapshot order.
            anchor_pairs: Unfiltered snapshot pairs for anchor lookup
                (default: ``pairs``).
        """
        self._graph = _build_graph(pairs)
        self._anchor_graph = self._graph if anchor_pairs is None else _build_graph(anchor_pairs)

        logger.debug(
            f"Built graph with {self._graph.number_of_nodes()} assets, "
            f"{self._graph.number_of_edges()} pairs"
        )

    @property
    def graph(self) -> nx.DiGraph:
        """Get the underlying NetworkX graph."""
        return self._graph

    def find_pair(self, asset_a: str, asset_b: str) -> TradingPair | None:
        """
        Find the pair between two assets, in either orientation.

        ``asset_a/asset_b`` is preferred over ``asset_b/asset_a``.
        """
        return _edge_pair(self._graph, asset_a, asset_b)

    def find_anchor(self, bridge: str, quote: str) -> TradingPair | None:
        """Find the quote/bridge anchor pair in the unfiltered snapshot."""
        return _edge_pair(self._anchor_graph, bridge, quote)

    def require_pair(self, asset_a: str, asset_b: str) -> TradingPair:
        """
        Find the pair between two assets or fail.

        Raises:
            MissingLeg: If no pair connects the assets.
        """
        pair = self.find_pair(asset_a, asset_b)
        if pair is None:
            raise MissingLeg(asset_a, asset_b)
        return pair

    def pairs_quoted_in(self, asset: str) -> Iterator[TradingPair]:
        """Pairs whose quote asset is ``asset``, in snapshot order."""
        if asset not in self._graph:
            return
        for base in self._graph.predecessors(asset):
            yield self._graph.edges[base, asset]["pair"]

    def enumerate(
        self,
        bridge_assets: Iterable[str],
        quote_assets: Iterable[str],
        scan_limit: int,
    ) -> list[CyclePath]:
        """
        Enumerate all candidate cycles.

        Args:
            bridge_assets: Intermediate assets for triangular cycles.
            quote_assets: Home quote assets, treated at par.
            scan_limit: Maximum bridge-quoted pairs per (quote, bridge).

        Returns:
            Triangular candidates followed by cross-pair candidates.

        Raises:
            ConfigurationError: If a quote/bridge anchor pair is absent.
        """
        bridges = tuple(bridge_assets)
        quotes = tuple(quote_assets)
        return [
            *self.triangular_cycles(bridges, quotes, scan_limit),
            *self.cross_pair_cycles(quotes),
        ]

    def triangular_cycles(
        self,
        bridge_assets: Iterable[str],
        quote_assets: Iterable[str],
        scan_limit: int,
    ) -> list[CyclePath]:
        """
        Enumerate ``Q -> B -> C -> Q`` cycles.

        For each quote Q and bridge B, the first ``scan_limit`` pairs
        quoted in B supply the coin C. Coins without a pair against Q
        are skipped.

        Raises:
            ConfigurationError: If a quote/bridge anchor pair is absent.
        """
        bridges = tuple(bridge_assets)
        cycles: list[CyclePath] = []
        missing = 0

        for quote in quote_assets:
            for bridge in bridges:
                if bridge == quote:
                    continue

                anchor = self.find_anchor(bridge, quote)
                if anchor is None:
                    raise ConfigurationError(
                        f"No anchor pair between {bridge} and {quote}",
                        quote_asset=quote,
                        bridge_asset=bridge,
                    )

                for index, bridge_pair in enumerate(self.pairs_quoted_in(bridge)):
                    if index >= scan_limit:
                        break

                    coin = bridge_pair.base_asset
                    if coin == quote:
                        continue

                    try:
                        coin_pair = self.require_pair(coin, quote)
                    except MissingLeg as e:
                        missing += 1
                        logger.debug(f"Skipping {coin}: {e}")
                        continue

                    legs = (
                        Leg.through(anchor, quote),
                        Leg.through(bridge_pair, bridge),
                        Leg.through(coin_pair, coin),
                    )
                    cycles.append(CyclePath(OpportunityType.TRIANGULAR, legs, coin))

        logger.debug(f"Enumerated {len(cycles)} triangular candidates ({missing} missing legs)")
        return cycles

    def cross_pair_cycles(self, quote_assets: Iterable[str]) -> list[CyclePath]:
        """
        Enumerate ``Q1 -> C -> Q2`` cycles between par quote assets.

        The cycle buys the coin on the quote where it is cheaper and
        sells it on the other. Equal prices produce no candidate.
        """
        quotes = tuple(quote_assets)
        quote_set = frozenset(quotes)
        cycles: list[CyclePath] = []

        for coin in list(self._graph.nodes):
            if coin in quote_set:
                continue

            for first, second in combinations(quotes, 2):
                first_pair = self.find_pair(coin, first)
                second_pair = self.find_pair(coin, second)
                if first_pair is None or second_pair is None:
                    continue

                ordered = self._order_by_price(coin, first, first_pair, second, second_pair)
                if ordered is None:
                    continue

                (buy_quote, buy_pair), (_, sell_pair) = ordered
                legs = (
                    Leg.through(buy_pair, buy_quote),
                    Leg.through(sell_pair, coin),
                )
                cycles.append(CyclePath(OpportunityType.CROSS_PAIR, legs, coin))

        logger.debug(f"Enumerated {len(cycles)} cross-pair candidates")
        return cycles

    @staticmethod
    def _order_by_price(
        coin: str,
        first: str,
        first_pair: TradingPair,
        second: str,
        second_pair: TradingPair,
    ) -> tuple[tuple[str, TradingPair], tuple[str, TradingPair]] | None:
        """Order (quote, pair) entries cheapest first; None if prices are equal."""
        first_entry = (first, first_pair)
        second_entry = (second, second_pair)

        first_price = _unit_price(coin, first_pair)
        second_price = _unit_price(coin, second_pair)
        if first_price is None or second_price is None:
            # Not comparable; the yield calculation rejects it
            return first_entry, second_entry

        if first_price < second_price:
            return first_entry, second_entry
        if second_price < first_price:
            return second_entry, first_entry
        return None

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """
        Convert the pair graph to serializable format.

        Returns:
            Dict with asset and pair data.
        """
        return {
            "assets": [{"asset": node} for node in self._graph.nodes],
            "pairs": [
                {
                    "symbol": data["pair"].symbol,
                    "base": base,
                    "quote": quote,
                    "price": str(data["pair"].price),
                }
                for base, quote, data in self._graph.edges(data=True)
            ],
        }


def _unit_price(coin: str, pair: TradingPair) -> Decimal | None:
    """Price of one unit of ``coin`` in the pair's other asset."""
    if not is_usable_price(pair.price):
        return None
    if pair.base_asset == coin:
        return pair.price
    return 1 / pair.price


def _build_graph(pairs: Iterable[TradingPair]) -> nx.DiGraph:
    """Index pairs as base -> quote edges; first listing wins on duplicates."""
    graph: nx.DiGraph = nx.DiGraph()
    for pair in pairs:
        if not graph.has_edge(pair.base_asset, pair.quote_asset):
            graph.add_edge(pair.base_asset, pair.quote_asset, pair=pair)
    return graph


def _edge_pair(graph: nx.DiGraph, asset_a: str, asset_b: str) -> TradingPair | None:
    """Pair on the edge between two assets, ``asset_a -> asset_b`` first."""
    if graph.has_edge(asset_a, asset_b):
        return graph.edges[asset_a, asset_b]["pair"]  # type: ignore[no-any-return]
    if graph.has_edge(asset_b, asset_a):
        return graph.edges[asset_b, asset_a]["pair"]  # type: ignore[no-any-return]
    return None
