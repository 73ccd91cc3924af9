#!/usr/bin/env python3
"""
Latency Benchmark Script.

Measures pipeline latencies over synthetic snapshots.
"""

import statistics
import sys
from collections.abc import Callable
from pathlib import Path

# Add src to path for direct execution
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from arbscan.config.strategies import DEFAULT_STRATEGIES
from arbscan.core.engine import ScanEngine
from arbscan.core.types import ScanConfig, Snapshot
from arbscan.market.filters import PairFilter
from arbscan.simulation.market import SyntheticSnapshotProvider
from arbscan.strategy.calculator import YieldCalculator
from arbscan.strategy.graph import PathEnumerator
from arbscan.utils.time import format_duration_us, get_monotonic_us


def make_config(strategy: str = "deep") -> ScanConfig:
    profile = DEFAULT_STRATEGIES[strategy]
    return ScanConfig(
        strategy_name=profile.name,
        scan_limit=profile.scan_limit,
        threshold=profile.threshold,
    )


def measure(operation: Callable[[Snapshot], object], snapshots: list[Snapshot]) -> dict[str, float]:
    """Time one operation over each snapshot."""
    latencies: list[int] = []

    for snapshot in snapshots:
        start = get_monotonic_us()
        operation(snapshot)
        latencies.append(get_monotonic_us() - start)

    return {
        "min": min(latencies),
        "max": max(latencies),
        "avg": statistics.mean(latencies),
        "p50": statistics.median(latencies),
        "p99": sorted(latencies)[int(len(latencies) * 0.99)],
    }


def benchmark_filter(snapshots: list[Snapshot], config: ScanConfig) -> dict[str, float]:
    """Benchmark pair filtering latency."""
    pair_filter = PairFilter.from_config(config)
    return measure(lambda s: pair_filter.filter(s, s.volumes), snapshots)


def benchmark_enumeration(snapshots: list[Snapshot], config: ScanConfig) -> dict[str, float]:
    """Benchmark graph build plus cycle enumeration latency."""

    def enumerate_cycles(snapshot: Snapshot) -> object:
        enumerator = PathEnumerator(snapshot)
        return enumerator.enumerate(config.bridge_assets, config.quote_assets, config.scan_limit)

    return measure(enumerate_cycles, snapshots)


def benchmark_yields(snapshots: list[Snapshot], config: ScanConfig) -> dict[str, float]:
    """Benchmark yield calculation over every candidate of a snapshot."""
    calculator = YieldCalculator()

    def compute(snapshot: Snapshot) -> object:
        enumerator = PathEnumerator(snapshot)
        paths = enumerator.enumerate(config.bridge_assets, config.quote_assets, config.scan_limit)
        return [calculator.compute_yield(path) for path in paths]

    return measure(compute, snapshots)


def benchmark_full_scan(snapshots: list[Snapshot], config: ScanConfig) -> dict[str, float]:
    """Benchmark the full engine pipeline."""
    engine = ScanEngine()
    return measure(lambda s: engine.scan(s, config), snapshots)


def format_stats(stats: dict[str, float]) -> str:
    """Format stats for display."""
    return (
        f"min={format_duration_us(int(stats['min']))}, "
        f"avg={format_duration_us(int(stats['avg']))}, "
        f"p50={format_duration_us(int(stats['p50']))}, "
        f"p99={format_duration_us(int(stats['p99']))}, "
        f"max={format_duration_us(int(stats['max']))}"
    )


def main() -> int:
    """Run all benchmarks."""
    print("=" * 70)
    print("  SCAN PIPELINE BENCHMARK (synthetic snapshots)")
    print("=" * 70)
    print()

    config = make_config("deep")
    provider = SyntheticSnapshotProvider(seed=7)
    snapshots = [provider.generate(config) for _ in range(1000)]
    print(f"Generated {len(snapshots)} snapshots of {len(snapshots[0])} pairs")
    print()

    # Warm up
    print("Warming up...")
    benchmark_full_scan(snapshots[:50], config)
    print()

    print("1. Pair Filter (1,000 snapshots)")
    print(f"   {format_stats(benchmark_filter(snapshots, config))}")
    print()

    print("2. Graph Build + Enumeration (1,000 snapshots)")
    print(f"   {format_stats(benchmark_enumeration(snapshots, config))}")
    print()

    print("3. Enumeration + Yields (1,000 snapshots)")
    print(f"   {format_stats(benchmark_yields(snapshots, config))}")
    print()

    print("4. Full Scan (1,000 snapshots)")
    print(f"   {format_stats(benchmark_full_scan(snapshots, config))}")
    print()

    print("=" * 70)
    stats = provider.get_stats()
    print(f"  Injected mispricings: {stats['opportunities_created']}")
    print("=" * 70)

    return 0


if __name__ == "__main__":
    sys.exit(main())
