"""
Pytest configuration and shared fixtures.

Provides reusable test fixtures for all test modules.
"""

from decimal import Decimal

import pytest

from arbscan.config.settings import Settings, get_settings
from arbscan.core.types import ScanConfig, Snapshot, TradingPair
from arbscan.strategy.calculator import YieldCalculator
from arbscan.strategy.graph import PathEnumerator
from tests.mocks import make_pair, make_snapshot


# =============================================================================
# Pair Fixtures
# =============================================================================


@pytest.fixture
def btcusdt() -> TradingPair:
    """BTC/USDT at 50000."""
    return make_pair("BTC", "USDT", "50000")


@pytest.fixture
def ethbtc() -> TradingPair:
    """ETH/BTC at 0.05."""
    return make_pair("ETH", "BTC", "0.05")


@pytest.fixture
def ethusdt() -> TradingPair:
    """ETH/USDT at 2500 (exactly consistent with ETH/BTC)."""
    return make_pair("ETH", "USDT", "2500")


@pytest.fixture
def xyzbtc() -> TradingPair:
    """XYZ/BTC at 0.0005."""
    return make_pair("XYZ", "BTC", "0.0005")


@pytest.fixture
def xyzusdt() -> TradingPair:
    """XYZ/USDT at 26 (4% above the BTC route)."""
    return make_pair("XYZ", "USDT", "26")


# =============================================================================
# Snapshot Fixtures
# =============================================================================


@pytest.fixture
def neutral_snapshot(
    btcusdt: TradingPair,
    ethbtc: TradingPair,
    ethusdt: TradingPair,
) -> Snapshot:
    """Snapshot with one exactly neutral triangle."""
    return make_snapshot(btcusdt, ethbtc, ethusdt)


@pytest.fixture
def profitable_snapshot(
    btcusdt: TradingPair,
    ethbtc: TradingPair,
    ethusdt: TradingPair,
    xyzbtc: TradingPair,
    xyzusdt: TradingPair,
) -> Snapshot:
    """Snapshot with a neutral ETH triangle and a 4% XYZ triangle."""
    return make_snapshot(btcusdt, ethbtc, ethusdt, xyzbtc, xyzusdt)


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def scan_config() -> ScanConfig:
    """USDT home quote, BTC bridge, no volume filter."""
    return ScanConfig(
        strategy_name="test",
        scan_limit=50,
        threshold=Decimal("0.3"),
        bridge_assets=("BTC",),
        quote_assets=("USDT",),
        min_quote_volume=Decimal(0),
    )


@pytest.fixture
def settings() -> Settings:
    """Settings independent of the environment and any .env file."""
    return Settings(
        _env_file=None,
        bridge_assets=("BTC",),
        quote_assets=("USDT",),
        min_quote_volume=Decimal(0),
    )


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    """Drop cached settings so env changes apply per test."""
    get_settings.cache_clear()


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def calculator() -> YieldCalculator:
    """Yield calculator at default precision."""
    return YieldCalculator()


@pytest.fixture
def enumerator(profitable_snapshot: Snapshot) -> PathEnumerator:
    """Enumerator over the profitable snapshot."""
    return PathEnumerator(profitable_snapshot)
