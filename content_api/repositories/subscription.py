"""Email subscription repository."""

from typing import Any

from bson import ObjectId

from content_api.repositories.base import BaseRepository, Document
from content_api.utils.helpers import local_midnight, utc_now


class SubscriptionRepository(BaseRepository):
    """
    Storage for subscriptions.

    ``email`` is unique regardless of state and ``unsubscribeToken`` is a
    sparse unique index, so lookups by either return at most one document.
    """

    entity = "Subscription"
    duplicate_message = "This email is already subscribed"

    async def find_by_email(self, email: str) -> Document | None:
        return await self.collection.find_one({"email": email})

    async def find_by_token(self, token: str) -> Document | None:
        return await self.collection.find_one({"unsubscribeToken": token})

    async def reactivate(self, record_id: ObjectId, changes: dict[str, Any]) -> Document:
        return await self.update_by_id(
            record_id,
            {**changes, "isActive": True},
            unset=("unsubscribedAt",),
        )

    async def deactivate(self, record_id: ObjectId) -> Document:
        return await self.update_by_id(
            record_id,
            {"isActive": False, "unsubscribedAt": utc_now()},
        )

    async def export(self, subscription_type: str | None = None) -> list[Document]:
        """Active and verified addresses only, sorted by email."""
        predicate: Document = {"isActive": True, "verified": True}
        if subscription_type:
            predicate["subscriptionType"] = subscription_type
        cursor = self.collection.find(
            predicate,
            {"_id": 0, "email": 1, "name": 1, "subscriptionType": 1},
        ).sort("email", 1)
        return [
            {
                "email": document["email"],
                "name": document.get("name") or "",
                "type": document.get("subscriptionType"),
            }
            async for document in cursor
        ]

    async def stats(self) -> Document:
        return {
            "total": await self.count(),
            "active": await self.count({"isActive": True}),
            "inactive": await self.count({"isActive": False}),
            "today": await self.count(
                {"isActive": True, "createdAt": {"$gte": local_midnight()}},
            ),
            "byType": await self.group_count("subscriptionType", {"isActive": True}),
        }
