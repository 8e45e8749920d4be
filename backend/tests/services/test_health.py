"""Health checks — liveness never touches the store, readiness does."""

from loantracker.infrastructure.database import DatabaseSessionManager
from loantracker.main import app


async def test_health_is_public(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json()["status"] == "Server is running!"


async def test_ready_when_database_reachable(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}


async def test_not_ready_when_database_unreachable(client, monkeypatch):
    async def unhealthy(self):
        return False

    monkeypatch.setattr(DatabaseSessionManager, "health_check", unhealthy)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"
    assert isinstance(app.state.db_manager, DatabaseSessionManager)
