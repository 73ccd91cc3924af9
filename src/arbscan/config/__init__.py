"""
Configuration module for the scanner.

``Settings`` lives in ``arbscan.config.settings`` and is imported from
there; it depends on the core types, which themselves read constants
from this package.
"""

from arbscan.config.constants import (
    BINANCE_REST_URL,
    DEFAULT_BRIDGE_ASSETS,
    DEFAULT_MIN_QUOTE_VOLUME,
    DEFAULT_QUOTE_ASSETS,
    DEFAULT_STRATEGY,
)
from arbscan.config.strategies import DEFAULT_STRATEGIES, StrategyProfile


__all__ = [
    "BINANCE_REST_URL",
    "DEFAULT_BRIDGE_ASSETS",
    "DEFAULT_MIN_QUOTE_VOLUME",
    "DEFAULT_QUOTE_ASSETS",
    "DEFAULT_STRATEGIES",
    "DEFAULT_STRATEGY",
    "StrategyProfile",
]
