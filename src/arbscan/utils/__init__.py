"""Utility functions for the scanner."""

from arbscan.utils.math import (
    format_profit,
    parse_decimal,
    round_output,
    round_percentage,
)
from arbscan.utils.time import (
    format_duration_us,
    format_iso,
    get_monotonic_us,
    utc_now,
)


__all__ = [
    "format_duration_us",
    "format_iso",
    "format_profit",
    "get_monotonic_us",
    "parse_decimal",
    "round_output",
    "round_percentage",
    "utc_now",
]
