"""
Tests for health check endpoints.
"""

from typing import Dict
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from catalog.api.dependencies import get_db_session
from catalog.main import app

pytestmark = pytest.mark.asyncio


async def test_basic_health_check(client: AsyncClient) -> None:
    """
    The basic check needs no authentication.
    """
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "version" in response.json()
    assert "environment" in response.json()


async def test_readiness_check_counts_categories(client: AsyncClient, auth_headers: Dict[str, str]) -> None:
    await client.post("/api/category", json={"name": "Books"}, headers=auth_headers)

    response = await client.get("/api/health/ready")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    database = data["components"][0]
    assert database["name"] == "database"
    assert database["status"] == "healthy"
    assert database["details"]["categories"] == 1


async def test_readiness_check_reports_unreachable_database(client: AsyncClient) -> None:
    broken = AsyncMock()
    broken.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

    async def override_get_db():
        yield broken

    app.dependency_overrides[get_db_session] = override_get_db

    response = await client.get("/api/health/ready")

    assert response.status_code == 503
    assert response.json()["status"] == "degraded"
    assert response.json()["components"][0]["status"] == "unhealthy"
