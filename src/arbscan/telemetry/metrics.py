"""
Metrics collection for scan monitoring.

Tracks fetch/compute latencies, scan counters and the best yield seen,
with efficient in-memory storage. This is the only state that outlives
a single scan, and the engine never reads it.
"""

import time
from collections import deque
from dataclasses import dataclass
from decimal import Decimal

from arbscan.config.constants import LATENCY_WINDOW_SIZE
from arbscan.core.types import ScanResult
from arbscan.utils.math import round_percentage


@dataclass
class LatencyStats:
    """Aggregated latency statistics."""

    min_us: int = 0
    max_us: int = 0
    avg_us: float = 0.0
    p50_us: int = 0
    p95_us: int = 0
    p99_us: int = 0
    count: int = 0

    def to_dict(self) -> dict[str, float]:
        return {
            "min": self.min_us,
            "max": self.max_us,
            "avg": round(self.avg_us, 1),
            "p50": self.p50_us,
            "p95": self.p95_us,
            "p99": self.p99_us,
            "count": self.count,
        }


class MetricsCollector:
    """
    Collects and aggregates scan metrics.

    Features:
    - Rolling window latency tracking
    - Counter-based event tracking
    - Best opportunity tracking
    """

    def __init__(
        self,
        latency_window_size: int = LATENCY_WINDOW_SIZE,
    ) -> None:
        """
        Initialize metrics collector.

        Args:
            latency_window_size: Number of samples to keep for latency stats.
        """
        self._window_size = latency_window_size
        self._latencies: dict[str, deque[int]] = {}
        self._counters: dict[str, int] = {}
        self._best_percentage: Decimal | None = None
        self._start_time = time.time()

    def record_latency(self, name: str, latency_us: int) -> None:
        """
        Record a latency measurement.

        Args:
            name: Metric name (e.g., "snapshot_fetch", "scan_compute").
            latency_us: Latency in microseconds.
        """
        if name not in self._latencies:
            self._latencies[name] = deque(maxlen=self._window_size)

        self._latencies[name].append(latency_us)

    def increment_counter(self, name: str, value: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] = self._counters.get(name, 0) + value

    def get_counter(self, name: str) -> int:
        """Get counter value."""
        return self._counters.get(name, 0)

    def record_scan(self, result: ScanResult) -> None:
        """
        Record a completed scan.

        Args:
            result: Result returned by the engine.
        """
        self.increment_counter("scans")
        self.increment_counter(f"scans.{result.source}")
        self.increment_counter("opportunities_found", len(result.opportunities))
        if not result.stats.volume_filter_enabled and result.config.volume_filter_enabled:
            self.increment_counter("volume_degraded")

        for opportunity in result.opportunities:
            self.increment_counter(f"opportunities.{opportunity.kind.value}")

        if result.opportunities:
            best = result.opportunities[0].percentage
            if self._best_percentage is None or best > self._best_percentage:
                self._best_percentage = best

    def record_failure(self, reason: str) -> None:
        """Record a scan that aborted."""
        self.increment_counter("scans_failed")
        self.increment_counter(f"scans_failed.{reason}")

    def get_latency_stats(self, name: str) -> LatencyStats:
        """
        Get latency statistics for a metric.

        Args:
            name: Metric name.

        Returns:
            LatencyStats with aggregated values.
        """
        samples = self._latencies.get(name)
        if not samples:
            return LatencyStats()

        sorted_samples = sorted(samples)
        n = len(sorted_samples)

        return LatencyStats(
            min_us=sorted_samples[0],
            max_us=sorted_samples[-1],
            avg_us=sum(sorted_samples) / n,
            p50_us=sorted_samples[n // 2],
            p95_us=sorted_samples[int(n * 0.95)],
            p99_us=sorted_samples[int(n * 0.99)] if n > 1 else sorted_samples[-1],
            count=n,
        )

    def get_all_latency_stats(self) -> dict[str, LatencyStats]:
        """Get latency stats for all metrics."""
        return {name: self.get_latency_stats(name) for name in self._latencies}

    @property
    def best_percentage(self) -> Decimal | None:
        return self._best_percentage

    @property
    def uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def to_dict(self) -> dict[str, object]:
        """
        Export all metrics as a dict.

        Returns:
            Dict representation of all metrics.
        """
        best = self._best_percentage
        return {
            "uptime_seconds": self.uptime_seconds,
            "counters": dict(self._counters),
            "latencies": {
                name: stats.to_dict() for name, stats in self.get_all_latency_stats().items()
            },
            "best_percentage": float(round_percentage(best)) if best is not None else None,
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self._latencies.clear()
        self._counters.clear()
        self._best_percentage = None
        self._start_time = time.time()
