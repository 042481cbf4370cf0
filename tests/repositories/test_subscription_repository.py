# tests/repositories/test_subscription_repository.py
"""Tests for content_api/repositories/subscription.py module."""

from typing import Any
from unittest.mock import MagicMock

from content_api.repositories import SubscriptionRepository


class TestLookups:
    async def test_find_by_email(self, collection: MagicMock) -> None:
        await SubscriptionRepository(collection).find_by_email("a@example.com")
        collection.find_one.assert_awaited_once_with({"email": "a@example.com"})

    async def test_find_by_token(self, collection: MagicMock) -> None:
        await SubscriptionRepository(collection).find_by_token("t" * 64)
        collection.find_one.assert_awaited_once_with({"unsubscribeToken": "t" * 64})


class TestStateChanges:
    """Reactivation and deactivation writes."""

    async def test_reactivate_clears_unsubscribed_at(
        self,
        collection: MagicMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        collection.find_one_and_update.return_value = subscription_doc

        await SubscriptionRepository(collection).reactivate(
            subscription_doc["_id"],
            {"name": "New Name"},
        )

        update = collection.find_one_and_update.await_args.args[1]
        assert update["$set"]["isActive"] is True
        assert update["$set"]["name"] == "New Name"
        assert update["$unset"] == {"unsubscribedAt": ""}

    async def test_deactivate_records_time(
        self,
        collection: MagicMock,
        subscription_doc: dict[str, Any],
    ) -> None:
        collection.find_one_and_update.return_value = {**subscription_doc, "isActive": False}

        result = await SubscriptionRepository(collection).deactivate(subscription_doc["_id"])

        update = collection.find_one_and_update.await_args.args[1]
        assert update["$set"]["isActive"] is False
        assert update["$set"]["unsubscribedAt"] is not None
        assert result["isActive"] is False


class TestExport:
    """Mailing-list export."""

    async def test_forces_active_and_verified(self, collection: MagicMock, make_cursor: Any) -> None:
        cursor = make_cursor(
            [
                {"email": "a@example.com", "name": "A", "subscriptionType": "all"},
                {"email": "b@example.com", "name": None, "subscriptionType": "newsletter"},
            ],
        )
        collection.find.return_value = cursor

        entries = await SubscriptionRepository(collection).export()

        predicate = collection.find.call_args.args[0]
        assert predicate == {"isActive": True, "verified": True}
        assert cursor.sort_spec == [("email", 1)]
        assert entries == [
            {"email": "a@example.com", "name": "A", "type": "all"},
            {"email": "b@example.com", "name": "", "type": "newsletter"},
        ]

    async def test_type_filter(self, collection: MagicMock) -> None:
        await SubscriptionRepository(collection).export("blog_updates")
        predicate = collection.find.call_args.args[0]
        assert predicate == {"isActive": True, "verified": True, "subscriptionType": "blog_updates"}


class TestStats:
    async def test_shape(self, collection: MagicMock, make_cursor: Any) -> None:
        collection.count_documents.side_effect = [10, 7, 3, 1]
        collection.aggregate.return_value = make_cursor([{"_id": "all", "count": 7}])

        stats = await SubscriptionRepository(collection).stats()

        assert stats["total"] == 10
        assert stats["active"] == 7
        assert stats["inactive"] == 3
        assert stats["today"] == 1
        assert stats["byType"] == [{"_id": "all", "count": 7}]
        today_predicate = collection.count_documents.await_args_list[3].args[0]
        assert today_predicate["isActive"] is True
        pipeline = collection.aggregate.call_args.args[0]
        assert pipeline[0] == {"$match": {"isActive": True}}
