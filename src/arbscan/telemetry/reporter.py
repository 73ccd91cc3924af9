"""
CLI reporter for scan results.

Renders a boxed terminal table of ranked opportunities plus a one-line
status summary suitable for logs.
"""

import sys
from typing import TextIO

from arbscan import __version__
from arbscan.core.types import ScanResult
from arbscan.telemetry.metrics import MetricsCollector
from arbscan.utils.math import format_profit, round_output, round_percentage
from arbscan.utils.time import format_iso


class OpportunityTable:
    """
    Boxed table of one scan's opportunities.

    Displays:
    - Strategy, source and capture time
    - One row per opportunity (rank, type, path, profit, output)
    - Scan counters
    """

    # Box drawing characters
    BOX_TL = "\u2554"  # ╔
    BOX_TR = "\u2557"  # ╗
    BOX_BL = "\u255a"  # ╚
    BOX_BR = "\u255d"  # ╝
    BOX_H = "\u2550"  # ═
    BOX_V = "\u2551"  # ║
    BOX_LT = "\u2560"  # ╠
    BOX_RT = "\u2563"  # ╣
    THIN_V = "\u2502"  # │

    def __init__(
        self,
        width: int = 78,
        output: TextIO | None = None,
    ) -> None:
        """
        Initialize the table renderer.

        Args:
            width: Table width in characters.
            output: Output stream (default: stdout).
        """
        self._width = width
        self._output = output or sys.stdout

    def _pad(self, text: str, width: int) -> str:
        """Pad text to width."""
        return text.ljust(width)[:width]

    def _line(self, content: str) -> str:
        """Create a line with borders."""
        return f"{self.BOX_V}{self._pad(content, self._width - 2)}{self.BOX_V}"

    def _divider(self) -> str:
        """Create a horizontal divider."""
        return f"{self.BOX_LT}{self.BOX_H * (self._width - 2)}{self.BOX_RT}"

    def _row(self, rank: str, kind: str, path: str, profit: str, output: str) -> str:
        v = self.THIN_V
        return f" {rank:>3} {v} {kind:<10} {v} {path:<30} {v} {profit:>9} {v} {output:>10}"

    def render(self, result: ScanResult, top: int | None = None) -> str:
        """
        Render the table.

        Args:
            result: Scan result to display.
            top: Show only the first N opportunities.

        Returns:
            Formatted table string.
        """
        shown = result.opportunities[:top] if top is not None else result.opportunities
        stats = result.stats

        lines = [f"{self.BOX_TL}{self.BOX_H * (self._width - 2)}{self.BOX_TR}"]
        header = (
            f"  ARBSCAN v{__version__} | {result.source.upper()} | "
            f"strategy: {result.config.strategy_name}"
        )
        lines.append(self._line(header))
        volume = "on" if stats.volume_filter_enabled else "off"
        lines.append(
            self._line(f"  Captured: {format_iso(result.captured_at)}  |  Volume filter: {volume}")
        )
        lines.append(self._divider())
        lines.append(self._line(self._row("#", "TYPE", "PATH", "PROFIT", "OUTPUT")))
        lines.append(self._divider())

        if not shown:
            lines.append(self._line("  No opportunities above threshold"))
        for rank, opp in enumerate(shown, start=1):
            percentage = round_percentage(opp.percentage)
            lines.append(
                self._line(
                    self._row(
                        str(rank),
                        opp.kind.value,
                        " > ".join(opp.path.assets),
                        format_profit(percentage),
                        str(round_output(opp.theoretical_output)),
                    )
                )
            )

        lines.append(self._divider())
        counts = (
            f"  Pairs: {stats.filtered_pairs}/{stats.raw_pairs}  |  "
            f"Candidates: {stats.candidates}  |  Found: {len(result.opportunities)}"
        )
        if stats.invalid_prices:
            counts += f"  |  Invalid: {stats.invalid_prices}"
        lines.append(self._line(counts))
        lines.append(f"{self.BOX_BL}{self.BOX_H * (self._width - 2)}{self.BOX_BR}")

        return "\n".join(lines)

    def display(self, result: ScanResult, top: int | None = None) -> None:
        """Write the table to the output stream."""
        self._output.write(self.render(result, top))
        self._output.write("\n")
        self._output.flush()


class SimpleReporter:
    """
    Simpler text-based reporter for logging.

    Outputs status updates as log messages.
    """

    def __init__(self, metrics: MetricsCollector) -> None:
        """Initialize simple reporter."""
        self._metrics = metrics

    def get_status_line(self) -> str:
        """Get a single-line status update."""
        fetch = self._metrics.get_latency_stats("snapshot_fetch")
        compute = self._metrics.get_latency_stats("scan_compute")
        best = self._metrics.best_percentage

        return (
            f"Scans: {self._metrics.get_counter('scans')}/"
            f"{self._metrics.get_counter('scans_failed')} | "
            f"Found: {self._metrics.get_counter('opportunities_found')} | "
            f"Best: {format_profit(best) if best is not None else '---'} | "
            f"Fetch: {fetch.avg_us:.0f}μs | Compute: {compute.avg_us:.0f}μs"
        )
