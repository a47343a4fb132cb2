"""Health & Readiness — tests for the probe endpoints.

Tests cover:
    - Liveness reports the registry size
    - Readiness 503 before the database is initialized, 200 after
"""

import pytest

from relay.infrastructure import database


@pytest.mark.asyncio
async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["procedures"] == 7


@pytest.mark.asyncio
async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503
    assert response.json()["reason"] == "database_unavailable"


@pytest.mark.asyncio
async def test_readiness_with_database(client, monkeypatch, tmp_path):
    manager = database.DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'ready.db'}",
    )
    monkeypatch.setattr(database, "db_manager", manager)
    response = await client.get("/api/v1/health/ready")
    await manager.dispose()
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"
