"""
FastAPI server exposing scans as JSON.

Every request runs one scan against a fresh snapshot; nothing but the
metrics collector outlives a request.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import replace
from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from arbscan import __version__
from arbscan.config.constants import SOURCE_BINANCE, SOURCE_SYNTHETIC
from arbscan.config.settings import Settings, get_settings
from arbscan.core.engine import ScanEngine
from arbscan.core.errors import (
    ConfigurationError,
    ScanError,
    SnapshotTimeout,
    SourceUnavailable,
    UnknownStrategyError,
)
from arbscan.core.types import SnapshotProvider
from arbscan.market.snapshot import create_provider
from arbscan.telemetry.logger import setup_logging
from arbscan.telemetry.metrics import MetricsCollector
from arbscan.telemetry.reporter import SimpleReporter
from arbscan.utils.time import format_iso


logger = logging.getLogger(__name__)


# Most specific first
ERROR_STATUS: list[tuple[type[ScanError], int]] = [
    (UnknownStrategyError, 404),
    (SnapshotTimeout, 504),
    (SourceUnavailable, 503),
    (ConfigurationError, 500),
]

ENDPOINTS = [
    "GET /api/arbitrage?strategy=<name>",
    "GET /api/strategies",
    "GET /api/prices?quote=<asset>",
    "GET /api/exchanges",
    "GET /api/status",
]


async def handle_scan_error(request: Request, exc: Exception) -> JSONResponse:
    """Map scan errors to HTTP statuses with a ``{success, error}`` body."""
    status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error(f"{request.url.path} failed ({status}): {exc}")
    else:
        logger.info(f"{request.url.path} rejected ({status}): {exc}")
    return JSONResponse({"success": False, "error": str(exc)}, status_code=status)


def create_app(
    settings: Settings | None = None,
    provider: SnapshotProvider | None = None,
    metrics: MetricsCollector | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings (default: cached environment settings).
        provider: Snapshot provider; built from settings on startup if None.
        metrics: Metrics collector shared across requests.

    Returns:
        Configured application.
    """
    settings = settings or get_settings()
    metrics = metrics or MetricsCollector()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.provider is None
        if owned:
            app.state.provider = create_provider(settings)
        yield
        if owned:
            await app.state.provider.close()
            app.state.provider = None

    app = FastAPI(title="arbscan", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.provider = provider
    app.state.metrics = metrics
    app.state.engine = ScanEngine(metrics=metrics)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ScanError, handle_scan_error)

    app.get("/")(get_index)
    app.get("/api/strategies")(get_strategies)
    app.get("/api/arbitrage")(get_arbitrage)
    app.get("/api/prices")(get_prices)
    app.get("/api/exchanges")(get_exchanges)
    app.get("/api/status")(get_status)

    return app


# =============================================================================
# Handlers
# =============================================================================


async def get_index(request: Request) -> dict[str, Any]:
    settings: Settings = request.app.state.settings
    return {
        "name": "arbscan",
        "version": __version__,
        "source": settings.data_source,
        "endpoints": ENDPOINTS,
    }


async def get_strategies(request: Request) -> dict[str, Any]:
    settings: Settings = request.app.state.settings
    return {
        "success": True,
        "default": settings.default_strategy,
        "strategies": [
            {
                "name": profile.name,
                "scanLimit": profile.scan_limit,
                "threshold": float(profile.threshold),
                "description": profile.description,
            }
            for profile in settings.strategies.values()
        ],
    }


async def get_arbitrage(request: Request, strategy: str | None = None) -> dict[str, Any]:
    """Run one scan with the named strategy."""
    settings: Settings = request.app.state.settings
    engine: ScanEngine = request.app.state.engine

    config = settings.scan_config(strategy)
    result = await engine.run(
        request.app.state.provider,
        config,
        deadline=settings.fetch_deadline_s,
    )
    return result.to_dict()


async def get_prices(request: Request, quote: str = "USDT") -> dict[str, Any]:
    """Current prices of every ingested pair quoted in one asset."""
    settings: Settings = request.app.state.settings
    provider: SnapshotProvider = request.app.state.provider

    quote = quote.strip().upper()
    # Prices only; skip the volume request
    config = replace(settings.scan_config(), min_quote_volume=Decimal(0))
    snapshot = await provider.fetch_snapshot(config, settings.fetch_deadline_s)

    prices = {
        pair.base_asset: str(pair.price) for pair in snapshot if pair.quote_asset == quote
    }
    return {
        "success": True,
        "quote": quote,
        "source": snapshot.source,
        "count": len(prices),
        "prices": prices,
        "timestamp": format_iso(snapshot.captured_at),
    }


async def get_exchanges(request: Request) -> dict[str, Any]:
    """Configured market source and the anchor pairs it scans through."""
    settings: Settings = request.app.state.settings
    live = settings.data_source == "exchange"
    return {
        "success": True,
        "exchange": SOURCE_BINANCE if live else SOURCE_SYNTHETIC,
        "restUrl": settings.exchange_rest_url if live else None,
        "bridgeAssets": list(settings.bridge_assets),
        "quoteAssets": list(settings.quote_assets),
        "supportedPairs": [
            f"{bridge}/{quote}"
            for quote in settings.quote_assets
            for bridge in settings.bridge_assets
            if bridge != quote
        ],
    }


async def get_status(request: Request) -> dict[str, Any]:
    settings: Settings = request.app.state.settings
    metrics: MetricsCollector = request.app.state.metrics
    return {
        "success": True,
        "version": __version__,
        "source": settings.data_source,
        "strategies": settings.strategy_names,
        "status": SimpleReporter(metrics).get_status_line(),
        "metrics": metrics.to_dict(),
    }


def main() -> None:
    import uvicorn

    settings = get_settings()
    async_logger = setup_logging(settings.log_level)

    print(
        f"""
╔═══════════════════════════════════════════════════════════════╗
║              ARBSCAN - ARBITRAGE SCANNER API                  ║
╚═══════════════════════════════════════════════════════════════╝

API: http://localhost:{settings.port}/api/arbitrage
Source: {settings.data_source}
Press Ctrl+C to stop.
    """
    )
    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_level="warning",
        )
    finally:
        async_logger.stop()


if __name__ == "__main__":
    main()
