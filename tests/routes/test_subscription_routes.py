# tests/routes/test_subscription_routes.py
"""Tests for the /api/subscriptions endpoints."""

from typing import Any
from unittest.mock import AsyncMock

from httpx import AsyncClient

from content_api.configs.settings import SUBSCRIPTION_RATE_LIMIT_MESSAGE
from content_api.errors import ConflictError, InvalidTokenError, ValidationError
from content_api.repositories.base import Page
from content_api.services.subscription import (
    ALREADY_SUBSCRIBED_MESSAGE,
    INVALID_UNSUBSCRIBE_MESSAGE,
    REACTIVATED_MESSAGE,
    SUBSCRIBED_MESSAGE,
    UNSUBSCRIBED_MESSAGE,
    SubscribeOutcome,
)


class TestSubscribe:
    """POST /api/subscriptions"""

    async def test_new_subscription(
        self,
        client: AsyncClient,
        subscription_service: AsyncMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        subscription_service.subscribe.return_value = SubscribeOutcome(subscription_doc, True)

        response = await client.post("/api/subscriptions", json={"email": "reader@example.com"})

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == SUBSCRIBED_MESSAGE
        assert body["data"]["email"] == "reader@example.com"
        assert "unsubscribeToken" not in body["data"]
        assert "ipAddress" not in body["data"]

    async def test_reactivation_is_200(
        self,
        client: AsyncClient,
        subscription_service: AsyncMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        subscription_service.subscribe.return_value = SubscribeOutcome(subscription_doc, False)

        response = await client.post("/api/subscriptions", json={"email": "reader@example.com"})

        assert response.status_code == 200
        assert response.json()["message"] == REACTIVATED_MESSAGE

    async def test_already_subscribed(
        self,
        client: AsyncClient,
        subscription_service: AsyncMock,
    ) -> None:
        subscription_service.subscribe.side_effect = ConflictError(ALREADY_SUBSCRIBED_MESSAGE)

        response = await client.post("/api/subscriptions", json={"email": "reader@example.com"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": ALREADY_SUBSCRIBED_MESSAGE}

    async def test_unknown_subscription_type(
        self,
        client: AsyncClient,
        subscription_service: AsyncMock,
    ) -> None:
        response = await client.post(
            "/api/subscriptions",
            json={"email": "reader@example.com", "subscriptionType": "daily"},
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "subscriptionType"
        subscription_service.subscribe.assert_not_awaited()

    async def test_rate_limited(
        self,
        rate_limiting: AsyncClient,
        subscription_service: AsyncMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        subscription_service.subscribe.return_value = SubscribeOutcome(subscription_doc, True)
        payload = {"email": "reader@example.com"}

        statuses = [
            (await rate_limiting.post("/api/subscriptions", json=payload)).status_code
            for _ in range(3)
        ]
        blocked = await rate_limiting.post("/api/subscriptions", json=payload)

        assert statuses == [201, 201, 201]
        assert blocked.status_code == 429
        assert blocked.json() == {"success": False, "error": SUBSCRIPTION_RATE_LIMIT_MESSAGE}


class TestUnsubscribe:
    async def test_success(self, client: AsyncClient, subscription_service: AsyncMock) -> None:
        response = await client.get("/api/subscriptions/unsubscribe/" + "a" * 64)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": UNSUBSCRIBED_MESSAGE}
        subscription_service.unsubscribe.assert_awaited_once_with("a" * 64)

    async def test_invalid_token(
        self,
        client: AsyncClient,
        subscription_service: AsyncMock,
    ) -> None:
        subscription_service.unsubscribe.side_effect = InvalidTokenError(
            INVALID_UNSUBSCRIBE_MESSAGE,
        )

        response = await client.get("/api/subscriptions/unsubscribe/nope")

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": INVALID_UNSUBSCRIBE_MESSAGE}


class TestAdminSubscriptions:
    """Listing, export, stats and direct edits."""

    async def test_list_includes_private_fields(
        self,
        client: AsyncClient,
        subscription_repo: AsyncMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        subscription_repo.find_page.return_value = Page(
            items=[subscription_doc],
            total=1,
            page=1,
            limit=20,
        )

        response = await client.get("/api/subscriptions", params={"isActive": "true"})

        assert response.status_code == 200
        assert response.json()["data"][0]["unsubscribeToken"] == "a" * 64
        predicate = subscription_repo.find_page.await_args.args[0]
        assert predicate["isActive"] is True

    async def test_export(self, client: AsyncClient, subscription_service: AsyncMock) -> None:
        subscription_service.export.return_value = [
            {"email": "a@example.com", "name": "A", "type": "newsletter"},
        ]

        response = await client.get(
            "/api/subscriptions/export/emails",
            params={"subscriptionType": "newsletter", "isActive": "false"},
        )

        assert response.json() == {
            "success": True,
            "count": 1,
            "data": [{"email": "a@example.com", "name": "A", "type": "newsletter"}],
        }
        subscription_service.export.assert_awaited_once_with("newsletter")

    async def test_export_unknown_type(
        self,
        client: AsyncClient,
        subscription_service: AsyncMock,
    ) -> None:
        subscription_service.export.side_effect = ValidationError.for_field(
            "subscriptionType",
            "Invalid subscription type",
        )

        response = await client.get(
            "/api/subscriptions/export/emails",
            params={"subscriptionType": "weekly"},
        )

        assert response.status_code == 400

    async def test_stats(self, client: AsyncClient, subscription_repo: AsyncMock) -> None:
        subscription_repo.stats.return_value = {
            "total": 4,
            "active": 3,
            "inactive": 1,
            "today": 0,
            "byType": [{"_id": "all", "count": 3}],
        }

        response = await client.get("/api/subscriptions/stats/summary")

        assert response.json()["data"]["byType"] == [{"_id": "all", "count": 3}]

    async def test_update_writes_changes(
        self,
        client: AsyncClient,
        subscription_repo: AsyncMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        subscription_repo.update_by_id.return_value = {**subscription_doc, "isActive": False}

        response = await client.put(
            f"/api/subscriptions/{subscription_doc['_id']}",
            json={"isActive": False},
        )

        assert response.json()["data"]["isActive"] is False
        subscription_repo.update_by_id.assert_awaited_once_with(
            str(subscription_doc["_id"]),
            {"isActive": False},
        )
