"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok without a token."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_readiness_reports_store_and_cache(client: AsyncClient) -> None:
    """With repositories wired and no cache, the API is ready but the cache is off."""
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["store"] is True
    assert data["cache"] is False


async def test_readiness_degraded_without_store(unconfigured_client: AsyncClient) -> None:
    response = await unconfigured_client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["store"] is False


async def test_root_returns_app_info(client: AsyncClient) -> None:
    """GET / returns the app name, version and docs path."""
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["docs"] == "/docs"
    assert "version" in data
