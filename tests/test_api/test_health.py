"""Tests for health check endpoints."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient


class TestHealthEndpoints:
    """Tests for health check routes."""

    @pytest.mark.asyncio
    async def test_health_endpoint(self, client: AsyncClient):
        response = await client.get("/api/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_health_ready_endpoint(self, client: AsyncClient):
        with patch(
            "storefront.api.routes.health.verify_db_connection",
            AsyncMock(return_value=True),
        ):
            response = await client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json()["checks"] == {"database": True}

    @pytest.mark.asyncio
    async def test_health_ready_degraded(self, client: AsyncClient):
        with patch(
            "storefront.api.routes.health.verify_db_connection",
            AsyncMock(return_value=False),
        ):
            response = await client.get("/api/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_root_endpoint(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "Storefront Backend"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/api/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, client: AsyncClient):
        response = await client.get("/api/health")

        assert len(response.headers["X-Request-ID"]) == 12
