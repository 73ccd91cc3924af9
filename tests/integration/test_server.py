"""
Integration tests for the HTTP API.

Drives the FastAPI app through its test client with static snapshot
providers.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from arbscan.config.settings import Settings
from arbscan.core.errors import SnapshotTimeout, SourceUnavailable
from arbscan.core.types import Snapshot
from arbscan.service.server import create_app
from arbscan.telemetry.metrics import MetricsCollector
from tests.mocks import StaticSnapshotProvider, make_pair, make_snapshot


@pytest.fixture
def provider(profitable_snapshot: Snapshot) -> StaticSnapshotProvider:
    return StaticSnapshotProvider(profitable_snapshot)


@pytest.fixture
def client(settings: Settings, provider: StaticSnapshotProvider) -> Iterator[TestClient]:
    with TestClient(create_app(settings, provider=provider)) as test_client:
        yield test_client


def _client_failing_with(settings: Settings, error: Exception) -> TestClient:
    return TestClient(create_app(settings, provider=StaticSnapshotProvider(error=error)))


class TestArbitrageEndpoint:
    """Tests for GET /api/arbitrage."""

    def test_default_strategy(self, client: TestClient) -> None:
        response = client.get("/api/arbitrage")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["strategy"] == "fast"
        assert body["source"] == "test"
        assert body["count"] == 1
        assert body["opportunities"][0] == {
            "type": "Triangular",
            "path": ["USDT", "BTC", "XYZ", "USDT"],
            "coin": "XYZ",
            "percentage": 4.0,
            "theoreticalOutput": 1.04,
            "profit": "+4.000%",
            "timestamp": "2024-01-01T00:00:00.000Z",
        }

    def test_named_strategy(
        self,
        client: TestClient,
        provider: StaticSnapshotProvider,
        settings: Settings,
    ) -> None:
        response = client.get("/api/arbitrage", params={"strategy": "deep"})

        assert response.status_code == 200
        assert response.json()["strategy"] == "deep"
        config, deadline = provider.calls[0]
        assert config.scan_limit == 400
        assert deadline == settings.fetch_deadline_s

    def test_unknown_strategy(self, client: TestClient, provider: StaticSnapshotProvider) -> None:
        """Unknown strategies are rejected before any fetch."""
        response = client.get("/api/arbitrage", params={"strategy": "turbo"})

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Unknown strategy: turbo"}
        assert provider.calls == []

    def test_source_unavailable(self, settings: Settings) -> None:
        with _client_failing_with(settings, SourceUnavailable("Price fetch failed")) as client:
            response = client.get("/api/arbitrage")

        assert response.status_code == 503
        assert response.json()["success"] is False

    def test_snapshot_timeout(self, settings: Settings) -> None:
        with _client_failing_with(settings, SnapshotTimeout("late", deadline=1.0)) as client:
            response = client.get("/api/arbitrage")

        assert response.status_code == 504

    def test_missing_anchor(self, settings: Settings) -> None:
        snapshot = make_snapshot(make_pair("XYZ", "BTC", "0.0005"))
        app = create_app(settings, provider=StaticSnapshotProvider(snapshot))

        with TestClient(app) as client:
            response = client.get("/api/arbitrage")

        assert response.status_code == 500
        assert "anchor" in response.json()["error"]


class TestOtherEndpoints:
    """Tests for the informational endpoints."""

    def test_index(self, client: TestClient) -> None:
        body = client.get("/").json()

        assert body["name"] == "arbscan"
        assert "GET /api/arbitrage?strategy=<name>" in body["endpoints"]

    def test_strategies(self, client: TestClient) -> None:
        body = client.get("/api/strategies").json()

        assert body["default"] == "fast"
        assert [s["name"] for s in body["strategies"]] == ["fast", "deep"]
        assert body["strategies"][0]["scanLimit"] == 50
        assert body["strategies"][0]["threshold"] == 0.3

    def test_prices(self, client: TestClient, provider: StaticSnapshotProvider) -> None:
        body = client.get("/api/prices", params={"quote": "usdt"}).json()

        assert body["quote"] == "USDT"
        assert body["prices"] == {"BTC": "50000", "ETH": "2500", "XYZ": "26"}
        assert body["count"] == 3
        # Price listing never needs volume data
        assert not provider.calls[0][0].volume_filter_enabled

    def test_exchanges(self, client: TestClient, provider: StaticSnapshotProvider) -> None:
        body = client.get("/api/exchanges").json()

        assert body["exchange"] == "binance"
        assert body["restUrl"] == "https://api.binance.com"
        assert body["bridgeAssets"] == ["BTC"]
        assert body["quoteAssets"] == ["USDT"]
        assert body["supportedPairs"] == ["BTC/USDT"]
        # Describes configuration only, no snapshot fetch
        assert provider.calls == []

    def test_exchanges_synthetic(self) -> None:
        settings = Settings(
            _env_file=None,
            data_source="synthetic",
            bridge_assets=("BTC", "ETH", "USDC"),
            quote_assets=("USDT", "USDC"),
        )

        with TestClient(create_app(settings)) as client:
            body = client.get("/api/exchanges").json()

        assert body["exchange"] == "synthetic"
        assert body["restUrl"] is None
        assert body["supportedPairs"] == [
            "BTC/USDT",
            "ETH/USDT",
            "USDC/USDT",
            "BTC/USDC",
            "ETH/USDC",
        ]

    def test_status_counts_scans(self, settings: Settings, provider: StaticSnapshotProvider) -> None:
        metrics = MetricsCollector()
        with TestClient(create_app(settings, provider=provider, metrics=metrics)) as client:
            client.get("/api/arbitrage")
            body = client.get("/api/status").json()

        assert body["metrics"]["counters"]["scans"] == 1
        assert body["metrics"]["best_percentage"] == 4.0
        assert body["status"].startswith("Scans: 1/0")

    def test_injected_provider_not_closed(
        self,
        settings: Settings,
        provider: StaticSnapshotProvider,
    ) -> None:
        """Only providers the app created are closed on shutdown."""
        with TestClient(create_app(settings, provider=provider)):
            pass

        assert not provider.closed


class TestSyntheticSource:
    """Tests for the app building its own provider."""

    def test_synthetic_data_source(self) -> None:
        settings = Settings(
            _env_file=None,
            data_source="synthetic",
            bridge_assets=("BTC",),
            quote_assets=("USDT",),
        )

        with TestClient(create_app(settings)) as client:
            body = client.get("/api/arbitrage").json()

        assert body["success"] is True
        assert body["source"] == "synthetic"
