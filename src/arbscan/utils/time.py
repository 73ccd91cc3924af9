"""
Time utilities.

Snapshots carry timezone-aware UTC capture times; latency is measured
in microseconds.
"""

import time
from datetime import UTC, datetime


def get_monotonic_us() -> int:
    """Get a monotonic clock reading in microseconds, for latency only."""
    return time.perf_counter_ns() // 1000


def utc_now() -> datetime:
    """Get the current time as an aware UTC datetime."""
    return datetime.now(tz=UTC)


def format_iso(moment: datetime) -> str:
    """
    Format a datetime as ISO-8601 UTC with millisecond precision.

    Example:
        >>> format_iso(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))
        '2024-01-01T12:00:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    moment = moment.astimezone(UTC)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class LatencyTimer:
    """
    Context manager for measuring operation latency.

    Example:
        >>> with LatencyTimer() as timer:
        ...     do_something()
        >>> print(f"Latency: {timer.latency_us}μs")
    """

    __slots__ = ("start_us", "end_us", "latency_us")

    def __init__(self) -> None:
        self.start_us: int = 0
        self.end_us: int = 0
        self.latency_us: int = 0

    def __enter__(self) -> "LatencyTimer":
        self.start_us = get_monotonic_us()
        return self

    def __exit__(self, *args: object) -> None:
        self.end_us = get_monotonic_us()
        self.latency_us = self.end_us - self.start_us


def format_duration_us(duration_us: int) -> str:
    """
    Format a duration in microseconds for human-readable display.

    Examples:
        >>> format_duration_us(500)
        '500μs'
        >>> format_duration_us(1500)
        '1.50ms'
        >>> format_duration_us(1500000)
        '1.50s'
    """
    if duration_us < 1000:
        return f"{duration_us}μs"
    elif duration_us < 1_000_000:
        return f"{duration_us / 1000:.2f}ms"
    else:
        return f"{duration_us / 1_000_000:.2f}s"
