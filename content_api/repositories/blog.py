"""Blog repository for database operations."""

from logging import getLogger
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument

from content_api.configs import file_logger
from content_api.errors.database import RecordNotFoundError
from content_api.repositories.base import HIDDEN, BaseRepository, Document
from content_api.schemas.blog import BlogCreate, BlogUpdate
from content_api.utils.helpers import is_object_id, to_object_id, utc_now
from content_api.utils.slug import slugify, with_suffix

logger = file_logger(getLogger(__name__))

POPULAR_TAGS_LIMIT = 20
MAX_SLUG_ATTEMPTS = 50


class BlogRepository(BaseRepository):
    """
    Repository for blog posts.

    Slugs are derived from the title and kept unique by suffixing
    ``-2``, ``-3``... ; the unique index on ``slug`` rejects any race that
    slips through. Counters use atomic ``$inc``.
    """

    entity = "Blog"
    duplicate_message = "A blog with this slug already exists"

    async def unique_slug(self, title: str, exclude_id: ObjectId | None = None) -> str:
        """
        Derive a slug for ``title`` that no other post uses.

        Args:
            title: Post title.
            exclude_id: The post being updated, which may keep its own slug.

        Returns:
            str: The first free candidate.
        """
        base = slugify(title)
        for attempt in range(1, MAX_SLUG_ATTEMPTS + 1):
            candidate = with_suffix(base, attempt)
            predicate: Document = {"slug": candidate}
            if exclude_id is not None:
                predicate["_id"] = {"$ne": exclude_id}
            if await self.collection.find_one(predicate, {"_id": 1}) is None:
                return candidate
        logger.warning(f"Slug '{base}' exhausted {MAX_SLUG_ATTEMPTS} suffixes")
        return with_suffix(base, MAX_SLUG_ATTEMPTS + 1)

    async def create(self, data: BlogCreate) -> Document:
        document = data.to_document()
        document["slug"] = await self.unique_slug(document["title"])
        document["views"] = 0
        document["likes"] = 0
        if document["published"]:
            document["publishedAt"] = utc_now()
        created = await self.insert(document)
        logger.info(f"Created blog '{created['slug']}'")
        return created

    async def view(self, id_or_slug: str) -> Document:
        """
        Fetch a post by id (24 hex chars) or slug and count the view.

        Raises:
            RecordNotFoundError: If nothing matches.
        """
        predicate: Document = (
            {"_id": ObjectId(id_or_slug)} if is_object_id(id_or_slug) else {"slug": id_or_slug}
        )
        document = await self.collection.find_one_and_update(
            predicate,
            {"$inc": {"views": 1}},
            projection=HIDDEN,
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise RecordNotFoundError(detail=f"Blog not found with id/slug: {id_or_slug}")
        return document

    async def update(self, record_id: str, data: BlogUpdate) -> Document:
        """
        Apply a partial update.

        The slug follows a changed title, and ``publishedAt`` is stamped the
        first time the post is published and never again.
        """
        current = await self.get_or_raise(record_id)
        changes: dict[str, Any] = data.to_document()

        if "title" in changes and changes["title"] != current.get("title"):
            changes["slug"] = await self.unique_slug(changes["title"], exclude_id=current["_id"])

        if changes.get("published") is True and not current.get("publishedAt"):
            changes["publishedAt"] = utc_now()

        return await self.update_by_id(current["_id"], changes)

    async def like(self, record_id: str) -> int:
        """Atomically increment ``likes`` and return the new count."""
        object_id = to_object_id(record_id)
        if object_id is None:
            raise self.not_found(record_id)
        document = await self.collection.find_one_and_update(
            {"_id": object_id},
            {"$inc": {"likes": 1}},
            projection={"likes": 1},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            raise self.not_found(record_id)
        return int(document.get("likes", 0))

    async def categories(self) -> list[str]:
        values = await self.collection.distinct("category", {"published": True})
        return sorted(value for value in values if value)

    async def popular_tags(self, limit: int = POPULAR_TAGS_LIMIT) -> list[Document]:
        """Top tags by number of published posts using them."""
        pipeline: list[Document] = [
            {"$match": {"published": True}},
            {"$unwind": "$tags"},
            {"$group": {"_id": "$tags", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
            {"$limit": limit},
        ]
        return await self.collection.aggregate(pipeline).to_list(length=None)
