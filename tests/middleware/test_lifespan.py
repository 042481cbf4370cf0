# tests/middleware/test_lifespan.py
"""Tests for the application lifespan in content_api/middleware/middleware.py."""

from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from content_api.middleware import lifespan

MODULE = "content_api.middleware.middleware"


@pytest.fixture
def services() -> Iterator[dict[str, AsyncMock]]:
    mongo = AsyncMock()
    sender = AsyncMock()
    dispatcher = AsyncMock()
    with (
        patch(f"{MODULE}.mongo", mongo),
        patch(f"{MODULE}.build_mail_sender", MagicMock(return_value=sender)),
        patch(f"{MODULE}.NotificationDispatcher", MagicMock(return_value=dispatcher)),
    ):
        yield {"mongo": mongo, "sender": sender, "dispatcher": dispatcher}


class TestLifespan:
    """Startup wiring and shutdown cleanup."""

    async def test_startup_and_shutdown(self, services: dict[str, AsyncMock]) -> None:
        app = FastAPI()

        async with lifespan(app):
            assert app.state.mail_sender is services["sender"]
            assert app.state.dispatcher is services["dispatcher"]
            services["mongo"].create_indexes.assert_awaited_once()
            services["dispatcher"].start.assert_awaited_once()

        services["dispatcher"].stop.assert_awaited_once()
        services["sender"].close.assert_awaited_once()
        services["mongo"].disconnect.assert_awaited_once()

    async def test_sender_closes_when_dispatcher_stop_fails(
        self,
        services: dict[str, AsyncMock],
    ) -> None:
        services["dispatcher"].stop.side_effect = RuntimeError("stuck worker")

        async with lifespan(FastAPI()):
            pass

        services["sender"].close.assert_awaited_once()
        services["mongo"].disconnect.assert_awaited_once()

    async def test_disconnects_when_sender_close_fails(
        self,
        services: dict[str, AsyncMock],
    ) -> None:
        services["sender"].close.side_effect = RuntimeError("socket closed")

        async with lifespan(FastAPI()):
            pass

        services["mongo"].disconnect.assert_awaited_once()
