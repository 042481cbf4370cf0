# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Settings are read when the package is imported; configure them first.
os.environ["LOG_TO_FILE"] = "false"
os.environ["MAIL_PROVIDER"] = "console"
os.environ["ENVIRONMENT"] = "development"
os.environ["COMPANY_TARGET_EMAIL"] = "owner@example.com"
os.environ["MAIL_FROM"] = "noreply@example.com"
os.environ["PUBLIC_API_URL"] = "https://api.example.com"
os.environ["SITE_NAME"] = "Example Site"

from collections.abc import Iterable  # noqa: E402
from datetime import UTC, datetime  # noqa: E402
from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402


class FakeCursor:
    """Stands in for a Motor cursor: chainable, awaitable ``to_list``, async iterable."""

    def __init__(self, documents: Iterable[dict[str, Any]] = ()) -> None:
        self.documents = list(documents)
        self.sort_spec: Any = None
        self.skipped: int | None = None
        self.limited: int | None = None

    def sort(self, spec: Any, direction: int | None = None) -> "FakeCursor":
        self.sort_spec = spec if direction is None else [(spec, direction)]
        return self

    def skip(self, count: int) -> "FakeCursor":
        self.skipped = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self.limited = count
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return list(self.documents)

    def __aiter__(self) -> "FakeCursor":
        self._iter = iter(self.documents)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


@pytest.fixture
def make_cursor() -> type[FakeCursor]:
    return FakeCursor


@pytest.fixture
def collection() -> MagicMock:
    """A Motor collection double with the async methods the repositories use."""
    col = MagicMock()
    col.find_one = AsyncMock(return_value=None)
    col.find_one_and_update = AsyncMock(return_value=None)
    col.insert_one = AsyncMock(return_value=MagicMock(inserted_id=ObjectId()))
    col.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    col.count_documents = AsyncMock(return_value=0)
    col.distinct = AsyncMock(return_value=[])
    col.find = MagicMock(return_value=FakeCursor())
    col.aggregate = MagicMock(return_value=FakeCursor())
    return col


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 1, 15, 9, 30, tzinfo=UTC)


@pytest.fixture
def blog_doc(now: datetime) -> dict[str, Any]:
    return {
        "_id": ObjectId(),
        "title": "Scaling a Startup Backend",
        "slug": "scaling-a-startup-backend",
        "description": "Lessons learned",
        "content": "Long form content",
        "author": {"name": "Jane Doe", "email": "jane@example.com"},
        "category": "Technology",
        "tags": ["mongodb", "python"],
        "featuredImage": "",
        "images": [],
        "published": True,
        "featured": False,
        "views": 3,
        "likes": 1,
        "publishedAt": now,
        "createdAt": now,
        "updatedAt": now,
    }


@pytest.fixture
def contact_doc(now: datetime) -> dict[str, Any]:
    return {
        "_id": ObjectId(),
        "name": "Sam Visitor",
        "email": "sam@example.org",
        "phone": None,
        "subject": "Partnership",
        "message": "Hello there",
        "company": None,
        "status": "new",
        "ipAddress": "127.0.0.1",
        "userAgent": "pytest",
        "createdAt": now,
        "updatedAt": now,
    }


@pytest.fixture
def subscription_doc(now: datetime) -> dict[str, Any]:
    return {
        "_id": ObjectId(),
        "email": "reader@example.com",
        "name": "Reader",
        "isActive": True,
        "subscriptionType": "newsletter",
        "preferences": {"frequency": "weekly", "categories": []},
        "source": "website",
        "verified": True,
        "verifiedAt": now,
        "unsubscribeToken": "a" * 64,
        "ipAddress": "127.0.0.1",
        "createdAt": now,
        "updatedAt": now,
    }
