"""Base repository for MongoDB collections."""

from collections.abc import Iterable
from dataclasses import dataclass
from math import ceil
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from content_api.errors.database import DuplicateEntryError, RecordNotFoundError
from content_api.models import PRIVATE_FIELDS
from content_api.utils.filters import ListQuery
from content_api.utils.helpers import to_object_id, utc_now

type Document = dict[str, Any]

HIDDEN: dict[str, int] = dict.fromkeys(sorted(PRIVATE_FIELDS), 0)


@dataclass(frozen=True, slots=True)
class Page:
    """One page of a filtered listing plus the total matching count."""

    items: list[Document]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return ceil(self.total / self.limit) if self.total else 0

    def to_envelope(self) -> dict[str, Any]:
        return {
            "success": True,
            "count": len(self.items),
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
            "data": self.items,
        }


class BaseRepository:
    """
    Common CRUD operations over one Motor collection.

    Subclasses set ``entity`` for error messages and add resource-specific
    queries. Identifiers arrive as strings; anything that is not a valid
    ObjectId simply matches nothing.

    Attributes:
        entity: Human readable name used in ``not found`` messages.
        duplicate_message: Detail used when a unique index rejects a write.
    """

    entity: str = "Record"
    duplicate_message: str = "A record with this value already exists"

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    def not_found(self, record_id: str) -> RecordNotFoundError:
        return RecordNotFoundError(detail=f"{self.entity} not found with id: {record_id}")

    async def find_page(self, predicate: Document, query: ListQuery) -> Page:
        """
        Fetch one page and the total count using the same predicate.

        Args:
            predicate: MongoDB filter built from ``query``.
            query: Normalized pagination and sort descriptor.

        Returns:
            Page: Items for the requested page and the overall total.
        """
        cursor = (
            self.collection.find(predicate, HIDDEN)
            .sort(query.sort)
            .skip(query.skip)
            .limit(query.limit)
        )
        items = await cursor.to_list(length=query.limit)
        total = await self.collection.count_documents(predicate)
        return Page(items=items, total=total, page=query.page, limit=query.limit)

    async def get_by_id(self, record_id: str) -> Document | None:
        object_id = to_object_id(record_id)
        if object_id is None:
            return None
        return await self.collection.find_one({"_id": object_id}, HIDDEN)

    async def get_or_raise(self, record_id: str) -> Document:
        """
        Get a document by id or raise.

        Raises:
            RecordNotFoundError: If no document has this id.
        """
        document = await self.get_by_id(record_id)
        if document is None:
            raise self.not_found(record_id)
        return document

    async def insert(self, document: Document) -> Document:
        """
        Insert a document, stamping ``createdAt``/``updatedAt``.

        Raises:
            DuplicateEntryError: If a unique index rejects the document.
        """
        now = utc_now()
        document = {**document, "createdAt": now, "updatedAt": now}
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateEntryError(detail=self.duplicate_message) from e
        document["_id"] = result.inserted_id
        return document

    async def update_by_id(
        self,
        record_id: str | ObjectId,
        changes: Document,
        unset: Iterable[str] = (),
    ) -> Document:
        """
        Apply ``$set``/``$unset`` atomically and return the updated document.

        Raises:
            RecordNotFoundError: If no document has this id.
            DuplicateEntryError: If a unique index rejects the change.
        """
        object_id = record_id if isinstance(record_id, ObjectId) else to_object_id(record_id)
        if object_id is None:
            raise self.not_found(str(record_id))

        update: Document = {"$set": {**changes, "updatedAt": utc_now()}}
        if fields := [name for name in unset if name not in changes]:
            update["$unset"] = dict.fromkeys(fields, "")

        try:
            document = await self.collection.find_one_and_update(
                {"_id": object_id},
                update,
                projection=HIDDEN,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateEntryError(detail=self.duplicate_message) from e
        if document is None:
            raise self.not_found(str(record_id))
        return document

    async def delete(self, record_id: str) -> None:
        object_id = to_object_id(record_id)
        if object_id is None:
            raise self.not_found(record_id)
        result = await self.collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise self.not_found(record_id)

    async def count(self, predicate: Document | None = None) -> int:
        return await self.collection.count_documents(predicate or {})

    async def group_count(self, field: str, predicate: Document | None = None) -> list[Document]:
        """Count documents per distinct value of ``field``."""
        pipeline: list[Document] = []
        if predicate:
            pipeline.append({"$match": predicate})
        pipeline.append({"$group": {"_id": f"${field}", "count": {"$sum": 1}}})
        pipeline.append({"$sort": {"count": -1, "_id": 1}})
        return await self.collection.aggregate(pipeline).to_list(length=None)
