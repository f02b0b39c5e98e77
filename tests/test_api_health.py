"""Tests for health check endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from decksmith.main import app


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealthEndpoint:
    async def test_health_returns_healthy(self, client: AsyncClient) -> None:
        """Liveness probe returns healthy."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_health_does_not_load_catalog(
        self, client: AsyncClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Health stays up even when the card database is missing."""

        def missing(platform):
            raise FileNotFoundError("no database")

        monkeypatch.setattr("decksmith.api.resolve.get_platform_catalog", missing)

        response = await client.get("/health")

        assert response.status_code == 200
