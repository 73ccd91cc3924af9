"""
Scan pipeline orchestrator.

Wires filtering, enumeration, yield calculation and ranking into the
single pipeline every handler (HTTP, CLI, scripts) calls. The engine
reads nothing but its arguments.
"""

import logging

from arbscan.core.errors import ConfigurationError, InvalidPrice, SourceUnavailable
from arbscan.core.types import (
    Opportunity,
    ScanConfig,
    ScanResult,
    ScanStats,
    Snapshot,
    SnapshotProvider,
)
from arbscan.market.filters import PairFilter
from arbscan.strategy.calculator import YieldCalculator
from arbscan.strategy.graph import PathEnumerator
from arbscan.strategy.opportunity import OpportunityRanker
from arbscan.telemetry.metrics import MetricsCollector
from arbscan.utils.time import LatencyTimer


logger = logging.getLogger(__name__)


class ScanEngine:
    """
    Snapshot-to-opportunities pipeline.

    Snapshot -> PairFilter -> PathEnumerator -> YieldCalculator ->
    OpportunityRanker. Each stage is a pure function of its inputs, so
    identical snapshots and configs give identical results.
    """

    def __init__(
        self,
        calculator: YieldCalculator | None = None,
        ranker: OpportunityRanker | None = None,
        metrics: MetricsCollector | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            calculator: Yield calculator (default: 28-digit Decimal).
            ranker: Opportunity ranker.
            metrics: Optional collector notified of latencies and outcomes.
        """
        self._calculator = calculator or YieldCalculator()
        self._ranker = ranker or OpportunityRanker()
        self._metrics = metrics

    def scan(self, snapshot: Snapshot, config: ScanConfig) -> ScanResult:
        """
        Run the pipeline over one snapshot.

        Args:
            snapshot: Immutable price snapshot.
            config: Effective scan configuration.

        Returns:
            Ranked opportunities with scan counters.

        Raises:
            ConfigurationError: If a quote/bridge anchor pair is absent.
        """
        stats = ScanStats(
            raw_pairs=len(snapshot),
            volume_filter_enabled=snapshot.has_volume and config.volume_filter_enabled,
        )

        with LatencyTimer() as timer:
            pair_filter = PairFilter.from_config(config)
            filtered = pair_filter.filter(snapshot, snapshot.volumes)
            stats.filtered_pairs = len(filtered)

            enumerator = PathEnumerator(filtered, anchor_pairs=snapshot)
            try:
                candidates = enumerator.enumerate(
                    config.bridge_assets,
                    config.quote_assets,
                    config.scan_limit,
                )
            except ConfigurationError:
                if self._metrics is not None:
                    self._metrics.record_failure("configuration")
                raise
            stats.candidates = len(candidates)

            evaluated: list[Opportunity] = []
            for path in candidates:
                try:
                    evaluated.append(self._calculator.evaluate(path, snapshot.captured_at))
                except InvalidPrice as e:
                    stats.invalid_prices += 1
                    logger.debug(f"Skipping {path.id}: {e}")

            ranked = self._ranker.rank(evaluated, config.threshold)
            stats.opportunities = len(ranked)
            if ranked:
                stats.best_percentage = ranked[0].percentage

        result = ScanResult(
            opportunities=tuple(ranked),
            config=config,
            captured_at=snapshot.captured_at,
            source=snapshot.source,
            stats=stats,
        )

        logger.info(
            f"Scan [{config.strategy_name}] {snapshot.source}: "
            f"{stats.filtered_pairs}/{stats.raw_pairs} pairs, "
            f"{stats.candidates} candidates, {stats.opportunities} above "
            f"{config.threshold}% in {timer.latency_us}μs"
        )

        if self._metrics is not None:
            self._metrics.record_latency("scan_compute", timer.latency_us)
            self._metrics.record_scan(result)

        return result

    async def run(
        self,
        provider: SnapshotProvider,
        config: ScanConfig,
        deadline: float | None = None,
    ) -> ScanResult:
        """
        Fetch a snapshot and scan it.

        Args:
            provider: Snapshot source.
            config: Effective scan configuration.
            deadline: Seconds allowed for the fetch phase.

        Returns:
            Scan result.

        Raises:
            SourceUnavailable: If no price snapshot could be obtained.
            ConfigurationError: If a quote/bridge anchor pair is absent.
        """
        try:
            with LatencyTimer() as timer:
                snapshot = await provider.fetch_snapshot(config, deadline)
        except SourceUnavailable:
            if self._metrics is not None:
                self._metrics.record_failure("source_unavailable")
            raise

        if self._metrics is not None:
            self._metrics.record_latency("snapshot_fetch", timer.latency_us)

        if config.volume_filter_enabled and not snapshot.has_volume:
            logger.warning(f"Scan [{config.strategy_name}] running without volume filter")

        return self.scan(snapshot, config)

    @property
    def metrics(self) -> MetricsCollector | None:
        return self._metrics
