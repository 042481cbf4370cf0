# tests/routes/conftest.py
"""Fixtures for route tests: the app with every storage dependency overridden."""

from collections.abc import AsyncGenerator, Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from content_api.dependencies import (
    get_blog_repository,
    get_contact_repository,
    get_contact_service,
    get_dispatcher,
    get_subscription_repository,
    get_subscription_service,
)
from content_api.main import app
from content_api.managers import limiter
from content_api.repositories import BlogRepository, ContactRepository, SubscriptionRepository
from content_api.services.contact import ContactService
from content_api.services.notifications import NotificationDispatcher
from content_api.services.subscription import SubscriptionService


@pytest.fixture
def blog_repo() -> AsyncMock:
    return AsyncMock(spec=BlogRepository)


@pytest.fixture
def contact_repo() -> AsyncMock:
    return AsyncMock(spec=ContactRepository)


@pytest.fixture
def subscription_repo() -> AsyncMock:
    return AsyncMock(spec=SubscriptionRepository)


@pytest.fixture
def contact_service() -> AsyncMock:
    return AsyncMock(spec=ContactService)


@pytest.fixture
def subscription_service() -> AsyncMock:
    return AsyncMock(spec=SubscriptionService)


@pytest.fixture
def dispatcher() -> MagicMock:
    return MagicMock(spec=NotificationDispatcher)


@pytest.fixture
async def client(
    blog_repo: AsyncMock,
    contact_repo: AsyncMock,
    subscription_repo: AsyncMock,
    contact_service: AsyncMock,
    subscription_service: AsyncMock,
    dispatcher: MagicMock,
) -> AsyncGenerator[AsyncClient]:
    app.dependency_overrides.update(
        {
            get_blog_repository: lambda: blog_repo,
            get_contact_repository: lambda: contact_repo,
            get_subscription_repository: lambda: subscription_repo,
            get_contact_service: lambda: contact_service,
            get_subscription_service: lambda: subscription_service,
            get_dispatcher: lambda: dispatcher,
        },
    )
    limiter.enabled = False

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def rate_limiting(client: AsyncClient) -> Generator[AsyncClient]:
    """The same client with the limiter switched back on and clean counters."""
    limiter.enabled = True
    limiter.reset()
    yield client
    limiter.reset()
    limiter.enabled = False


