"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation. Settings are read by the
handlers (service, CLI) only; the scan engine receives a ``ScanConfig``.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from arbscan.config.constants import (
    BINANCE_REST_URL,
    DEFAULT_BRIDGE_ASSETS,
    DEFAULT_FETCH_DEADLINE,
    DEFAULT_HOST,
    DEFAULT_MIN_QUOTE_VOLUME,
    DEFAULT_PORT,
    DEFAULT_QUOTE_ASSETS,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_STRATEGY,
)
from arbscan.config.strategies import DEFAULT_STRATEGIES, StrategyProfile
from arbscan.core.errors import UnknownStrategyError
from arbscan.core.types import ScanConfig


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    ``ARBSCAN_`` prefix. Asset lists accept comma-separated values
    (``ARBSCAN_BRIDGE_ASSETS=BTC,ETH,BNB``).
    """

    model_config = SettingsConfigDict(
        env_prefix="ARBSCAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Exchange Configuration
    # =========================================================================

    exchange_rest_url: str = Field(
        default=BINANCE_REST_URL,
        description="Base URL of the exchange REST API",
    )

    request_timeout_s: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0.0,
        le=120.0,
        description="Per-request HTTP timeout in seconds",
    )

    fetch_deadline_s: float = Field(
        default=DEFAULT_FETCH_DEADLINE,
        gt=0.0,
        le=300.0,
        description="Deadline for the whole snapshot fetch in seconds",
    )

    data_source: Literal["exchange", "synthetic"] = Field(
        default="exchange",
        description="Where snapshots come from; synthetic is labelled non-market data",
    )

    # =========================================================================
    # Scan Configuration
    # =========================================================================

    bridge_assets: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_BRIDGE_ASSETS,
        description="Intermediate assets for triangular cycles",
    )

    quote_assets: Annotated[tuple[str, ...], NoDecode] = Field(
        default=DEFAULT_QUOTE_ASSETS,
        description="Home quote assets, treated at par",
    )

    min_quote_volume: Decimal = Field(
        default=DEFAULT_MIN_QUOTE_VOLUME,
        ge=0,
        allow_inf_nan=False,
        description="Minimum 24h quote volume; 0 disables the volume filter",
    )

    default_strategy: str = Field(
        default=DEFAULT_STRATEGY,
        description="Strategy used when a request names none",
    )

    strategies: dict[str, StrategyProfile] = Field(
        default_factory=lambda: dict(DEFAULT_STRATEGIES),
        description="Named scan strategies",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    host: str = Field(default=DEFAULT_HOST, description="HTTP bind address")

    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="HTTP port")

    cors_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("*",),
        description="Allowed CORS origins",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("bridge_assets", "quote_assets", "cors_origins", mode="before")
    @classmethod
    def split_csv(cls, v: object) -> object:
        """Accept comma-separated strings from the environment."""
        if isinstance(v, str):
            return tuple(item.strip() for item in v.split(",") if item.strip())
        return v

    @field_validator("bridge_assets", "quote_assets", mode="after")
    @classmethod
    def normalize_assets(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Upper-case and dedupe asset lists, keeping their order."""
        normalized = tuple(dict.fromkeys(a.strip().upper() for a in v if a.strip()))
        if not normalized:
            raise ValueError("Asset list cannot be empty")
        return normalized

    @field_validator("strategies", mode="after")
    @classmethod
    def validate_strategies(
        cls, v: dict[str, StrategyProfile]
    ) -> dict[str, StrategyProfile]:
        """Ensure at least one strategy exists and keys match profile names."""
        if not v:
            raise ValueError("At least one strategy must be configured")
        for key, profile in v.items():
            if key != profile.name:
                raise ValueError(f"Strategy key {key!r} does not match name {profile.name!r}")
        return v

    @model_validator(mode="after")
    def validate_default_strategy(self) -> "Settings":
        """Ensure the default strategy is configured."""
        if self.default_strategy not in self.strategies:
            raise ValueError(
                f"Default strategy {self.default_strategy!r} is not one of "
                f"{sorted(self.strategies)}"
            )
        return self

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def strategy_names(self) -> list[str]:
        return list(self.strategies)

    def get_strategy(self, name: str | None = None) -> StrategyProfile:
        """
        Look up a strategy profile.

        Args:
            name: Strategy name; the default strategy when None.

        Raises:
            UnknownStrategyError: If no strategy has that name.
        """
        key = name or self.default_strategy
        profile = self.strategies.get(key)
        if profile is None:
            raise UnknownStrategyError(key, self.strategy_names)
        return profile

    def scan_config(self, name: str | None = None) -> ScanConfig:
        """
        Build the effective configuration of one scan.

        Args:
            name: Strategy name; the default strategy when None.

        Returns:
            ScanConfig combining the strategy with the asset sets.
        """
        profile = self.get_strategy(name)
        return ScanConfig(
            strategy_name=profile.name,
            scan_limit=profile.scan_limit,
            threshold=profile.threshold,
            bridge_assets=self.bridge_assets,
            quote_assets=self.quote_assets,
            min_quote_volume=self.min_quote_volume,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()
