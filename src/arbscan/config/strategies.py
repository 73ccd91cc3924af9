"""
Named scan strategies.

A strategy bundles the scan depth limit with the profitability
threshold. Callers select one by name; the effective values reach the
engine through ``ScanConfig``.
"""

from decimal import Decimal
from typing import Final

from pydantic import BaseModel, Field


class StrategyProfile(BaseModel):
    """Scan depth and threshold for one named strategy."""

    name: str
    scan_limit: int = Field(
        ...,
        ge=1,
        description="Maximum bridge-quoted pairs considered per bridge",
    )
    threshold: Decimal = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        description="Minimum profit in percentage points (0.3 = 0.3%)",
    )
    description: str = ""

    model_config = {"frozen": True}


DEFAULT_STRATEGIES: Final[dict[str, StrategyProfile]] = {
    "fast": StrategyProfile(
        name="fast",
        scan_limit=50,
        threshold=Decimal("0.3"),
        description="Shallow scan of the most active bridge markets",
    ),
    "deep": StrategyProfile(
        name="deep",
        scan_limit=400,
        threshold=Decimal("0.15"),
        description="Wide scan with a lower profitability bar",
    ),
}
