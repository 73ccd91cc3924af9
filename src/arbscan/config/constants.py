"""
Scanner constants and default configuration values.

Values are organized by category for easy maintenance and auditing.
Anything a caller may want to change per scan is only a default here;
the engine receives the effective values through ``ScanConfig``.
"""

from decimal import Decimal
from typing import Final


# =============================================================================
# Binance API Endpoints
# =============================================================================

BINANCE_REST_URL: Final[str] = "https://api.binance.com"

ENDPOINT_TICKER_PRICE: Final[str] = "/api/v3/ticker/price"
ENDPOINT_TICKER_24HR: Final[str] = "/api/v3/ticker/24hr"

SOURCE_BINANCE: Final[str] = "binance"
SOURCE_SYNTHETIC: Final[str] = "synthetic"


# =============================================================================
# Network Timeouts
# =============================================================================

# Per-request timeout for the REST client (seconds)
DEFAULT_REQUEST_TIMEOUT: Final[float] = 10.0

# Deadline for the whole snapshot fetch phase (seconds)
DEFAULT_FETCH_DEADLINE: Final[float] = 15.0


# =============================================================================
# Asset Sets
# =============================================================================

# Intermediate hops for triangular cycles
DEFAULT_BRIDGE_ASSETS: Final[tuple[str, ...]] = ("BTC", "ETH")

# "Home" quote currencies: cycle start/end points, treated at par
DEFAULT_QUOTE_ASSETS: Final[tuple[str, ...]] = ("USDT", "USDC")

# Quote assets used to split concatenated symbols into base/quote
KNOWN_QUOTE_ASSETS: Final[frozenset[str]] = frozenset(
    {
        "USDT",
        "USDC",
        "FDUSD",
        "TUSD",
        "BUSD",
        "DAI",
        "BTC",
        "ETH",
        "BNB",
        "XRP",
        "TRX",
        "DOGE",
        "EUR",
        "TRY",
        "BRL",
        "JPY",
        "ARS",
        "MXN",
        "PLN",
        "ZAR",
        "UAH",
        "IDR",
    }
)

# Peg currencies and fiat proxies, never treated as a tradeable coin
STABLE_ASSETS: Final[frozenset[str]] = frozenset(
    {
        "USDT",
        "USDC",
        "BUSD",
        "TUSD",
        "FDUSD",
        "USDP",
        "PAX",
        "DAI",
        "UST",
        "USTC",
        "USDD",
        "PYUSD",
        "USDE",
        "AEUR",
        "EURI",
        "EUR",
        "GBP",
        "AUD",
        "TRY",
        "BRL",
        "RUB",
        "JPY",
        "ARS",
        "MXN",
        "PLN",
        "ZAR",
        "UAH",
        "IDR",
    }
)

# Stable assets kept by the exchange only as historical quotes
DEPRECATED_QUOTE_ASSETS: Final[frozenset[str]] = frozenset({"BUSD"})


# =============================================================================
# Leveraged Tokens
# =============================================================================

LEVERAGED_TOKEN_SUFFIXES: Final[tuple[str, ...]] = ("UP", "DOWN", "BULL", "BEAR")

# Real coins whose names happen to end with a leveraged suffix
LEVERAGED_PATTERN_EXEMPT: Final[frozenset[str]] = frozenset({"SYRUP", "SETUP"})


# =============================================================================
# Filtering & Ranking
# =============================================================================

# Minimum 24h quote volume, valued in a home quote asset
DEFAULT_MIN_QUOTE_VOLUME: Final[Decimal] = Decimal("100000")

DEFAULT_STRATEGY: Final[str] = "fast"


# =============================================================================
# Precision & Formatting
# =============================================================================

# Reporting precision only; full precision is kept for filtering/sorting
PERCENTAGE_PRECISION: Final[int] = 3
OUTPUT_PRECISION: Final[int] = 6

# Significant digits for yield arithmetic
YIELD_CONTEXT_PRECISION: Final[int] = 28


# =============================================================================
# Service
# =============================================================================

DEFAULT_HOST: Final[str] = "0.0.0.0"
DEFAULT_PORT: Final[int] = 3000


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000

# Samples kept per latency metric
LATENCY_WINDOW_SIZE: Final[int] = 1000
