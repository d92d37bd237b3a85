"""
Health endpoint tests
Liveness, readiness and the summary endpoint
"""

from datetime import datetime

import pytest
from sqlalchemy.pool import NullPool

from app.db.config import build_engine, build_session_factory


class TestHealthEndpoints:
    """Test health check endpoints"""

    async def test_health_check_success(self, client):
        """Basic health check returns status, version and uptime"""
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "test"
        assert isinstance(data["uptime"], (int, float))
        assert data["features"]["ai_assistant"] is True

        try:
            datetime.fromisoformat(data["timestamp"])
        except ValueError:
            pytest.fail("Timestamp is not in valid ISO format")

    async def test_liveness(self, client):
        response = await client.get("/api/health/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_readiness_with_database(self, client):
        response = await client.get("/api/health/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_readiness_without_database(self, client, test_app, tmp_path):
        """Unreachable database reports 503"""
        engine = build_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'nowhere.db'}",
            poolclass=NullPool,
        )
        test_app.state.session_factory = build_session_factory(engine)
        try:
            response = await client.get("/api/health/ready")
        finally:
            await engine.dispose()

        assert response.status_code == 503
        assert response.json()["message"] == "Database unavailable"


class TestRootEndpoint:
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["health"] == "/api/health"
        assert data["status"] == "running"

    async def test_unknown_route(self, client):
        response = await client.get("/api/nowhere")
        assert response.status_code == 404
        assert response.json()["success"] is False
