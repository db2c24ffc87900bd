"""Health endpoint tests."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

from app.routers import health


@pytest.mark.api
@pytest.mark.asyncio
async def test_liveness(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["service"] == "KitchenOps"


@pytest.mark.api
@pytest.mark.asyncio
async def test_readiness_with_database(client: AsyncClient, test_engine, monkeypatch):
    monkeypatch.setattr(health, "engine", test_engine)

    resp = await client.get("/health/ready")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["checks"]["database"] == "ok"


@pytest.mark.api
@pytest.mark.asyncio
async def test_readiness_database_down(client: AsyncClient, monkeypatch):
    broken = create_async_engine("sqlite+aiosqlite:////nonexistent-kitchenops-dir/ready.db")
    monkeypatch.setattr(health, "engine", broken)

    resp = await client.get("/health/ready")
    await broken.dispose()

    assert resp.status_code == 503
    data = resp.json()
    assert data["status"] == "unhealthy"
    assert data["checks"]["database"].startswith("error:")
