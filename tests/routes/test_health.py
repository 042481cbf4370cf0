# tests/routes/test_health.py
"""Tests for the /health endpoint."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import AsyncClient

from content_api.db import mongo
from content_api.main import app


@pytest.fixture
def no_dispatcher() -> Generator[None]:
    """Health checks read the dispatcher from app state, which tests leave unset."""
    saved = getattr(app.state, "dispatcher", None)
    if saved is not None:
        del app.state.dispatcher
    yield
    if saved is not None:
        app.state.dispatcher = saved


class TestHealth:
    async def test_database_connected(self, client: AsyncClient, no_dispatcher: None) -> None:
        with patch.object(mongo, "ping", AsyncMock(return_value=True)):
            response = await client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Server is running"
        assert body["services"]["database"] == "connected"
        assert body["services"]["email_queue"] is None
        assert "request_counts" in body["metrics"]

    async def test_database_down(self, client: AsyncClient, no_dispatcher: None) -> None:
        with patch.object(mongo, "ping", AsyncMock(return_value=False)):
            response = await client.get("/health")

        assert response.json()["services"]["database"] == "disconnected"

    async def test_reports_queue_and_breaker(self, client: AsyncClient) -> None:
        dispatcher = MagicMock()
        dispatcher.get_state.return_value = {
            "running": True,
            "pending": 2,
            "capacity": 100,
            "workers": 2,
        }
        dispatcher.breaker.get_state.return_value = {
            "name": "mail_provider",
            "state": "closed",
            "failure_count": 0,
            "failure_threshold": 3,
            "time_until_reset": 0.0,
        }
        app.state.dispatcher = dispatcher
        try:
            with patch.object(mongo, "ping", AsyncMock(return_value=True)):
                response = await client.get("/health")
        finally:
            del app.state.dispatcher

        services = response.json()["services"]
        assert services["email_queue"]["pending"] == 2
        assert services["email_circuit_breaker"]["state"] == "closed"

    async def test_security_headers(self, client: AsyncClient, no_dispatcher: None) -> None:
        with patch.object(mongo, "ping", AsyncMock(return_value=True)):
            response = await client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
