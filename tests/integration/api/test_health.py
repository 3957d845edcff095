"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """Tests for the health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        """Health endpoint returns 200 with the expected structure."""
        response = await client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_detailed_health_checks_database(self, client: AsyncClient) -> None:
        """Detailed health reports the database and the active tag count."""
        await client.post(
            "/api/v1/customer-tags", json={"prefix": "categoria-clienti", "code": "idraulico"}
        )

        response = await client.get("/health/detailed")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["active_tags"] == 1

    @pytest.mark.asyncio
    async def test_responses_carry_tracking_headers(self, client: AsyncClient) -> None:
        """Every response has a request id and security headers."""
        response = await client.get("/health")

        assert "x-request-id" in response.headers
        assert response.headers["x-content-type-options"] == "nosniff"
