# tests/repositories/test_blog_repository.py
"""Tests for content_api/repositories/blog.py module."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from bson import ObjectId

from content_api.errors import RecordNotFoundError
from content_api.repositories import BlogRepository
from content_api.schemas import BlogCreate, BlogUpdate


def _create_payload(**overrides: Any) -> BlogCreate:
    payload: dict[str, Any] = {
        "title": "Hello World",
        "description": "A first post",
        "content": "Body",
        "author": {"name": "Jane"},
        "category": "Technology",
        "tags": [" python ", "python", ""],
    }
    payload.update(overrides)
    return BlogCreate.model_validate(payload)


class TestUniqueSlug:
    """Slug collision handling."""

    async def test_free_slug_is_used_as_is(self, collection: MagicMock) -> None:
        assert await BlogRepository(collection).unique_slug("Hello World") == "hello-world"

    async def test_taken_slug_gets_suffix(self, collection: MagicMock) -> None:
        collection.find_one.side_effect = [{"_id": ObjectId()}, {"_id": ObjectId()}, None]
        slug = await BlogRepository(collection).unique_slug("Hello World")
        assert slug == "hello-world-3"

    async def test_own_slug_is_excluded(self, collection: MagicMock) -> None:
        own_id = ObjectId()
        await BlogRepository(collection).unique_slug("Hello World", exclude_id=own_id)
        predicate = collection.find_one.await_args.args[0]
        assert predicate == {"slug": "hello-world", "_id": {"$ne": own_id}}


class TestCreate:
    """Blog creation."""

    async def test_server_fields(self, collection: MagicMock) -> None:
        created = await BlogRepository(collection).create(_create_payload())

        assert created["slug"] == "hello-world"
        assert created["views"] == 0
        assert created["likes"] == 0
        assert created["tags"] == ["python"]
        assert "publishedAt" not in created

    async def test_published_post_gets_published_at(self, collection: MagicMock) -> None:
        created = await BlogRepository(collection).create(_create_payload(published=True))
        assert created["publishedAt"] is not None

    async def test_client_cannot_set_counters(self, collection: MagicMock) -> None:
        created = await BlogRepository(collection).create(
            _create_payload(views=100, likes=5, slug="custom"),
        )
        assert created["views"] == 0
        assert created["likes"] == 0
        assert created["slug"] == "hello-world"


class TestView:
    """Fetch with view counting."""

    async def test_by_id(self, collection: MagicMock, blog_doc: dict[str, Any]) -> None:
        collection.find_one_and_update.return_value = blog_doc
        await BlogRepository(collection).view(str(blog_doc["_id"]))
        predicate, update = collection.find_one_and_update.await_args.args
        assert predicate == {"_id": blog_doc["_id"]}
        assert update == {"$inc": {"views": 1}}

    async def test_by_slug(self, collection: MagicMock, blog_doc: dict[str, Any]) -> None:
        collection.find_one_and_update.return_value = blog_doc
        await BlogRepository(collection).view("scaling-a-startup-backend")
        predicate = collection.find_one_and_update.await_args.args[0]
        assert predicate == {"slug": "scaling-a-startup-backend"}

    async def test_not_found(self, collection: MagicMock) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            await BlogRepository(collection).view("missing")
        assert exc_info.value.detail == "Blog not found with id/slug: missing"


class TestUpdate:
    """Partial updates."""

    async def test_title_change_reslugs(
        self,
        collection: MagicMock,
        blog_doc: dict[str, Any],
    ) -> None:
        collection.find_one.side_effect = [blog_doc, None]
        collection.find_one_and_update.return_value = blog_doc

        await BlogRepository(collection).update(
            str(blog_doc["_id"]),
            BlogUpdate.model_validate({"title": "Brand New Title"}),
        )

        changes = collection.find_one_and_update.await_args.args[1]["$set"]
        assert changes["title"] == "Brand New Title"
        assert changes["slug"] == "brand-new-title"

    async def test_unchanged_title_keeps_slug(
        self,
        collection: MagicMock,
        blog_doc: dict[str, Any],
    ) -> None:
        collection.find_one.return_value = blog_doc
        collection.find_one_and_update.return_value = blog_doc

        await BlogRepository(collection).update(
            str(blog_doc["_id"]),
            BlogUpdate.model_validate({"title": blog_doc["title"], "featured": True}),
        )

        changes = collection.find_one_and_update.await_args.args[1]["$set"]
        assert "slug" not in changes
        assert changes["featured"] is True

    async def test_first_publish_sets_published_at(
        self,
        collection: MagicMock,
        blog_doc: dict[str, Any],
    ) -> None:
        draft = {**blog_doc, "published": False, "publishedAt": None}
        collection.find_one.return_value = draft
        collection.find_one_and_update.return_value = draft

        await BlogRepository(collection).update(
            str(draft["_id"]),
            BlogUpdate.model_validate({"published": True}),
        )

        changes = collection.find_one_and_update.await_args.args[1]["$set"]
        assert changes["publishedAt"] is not None

    async def test_republish_keeps_published_at(
        self,
        collection: MagicMock,
        blog_doc: dict[str, Any],
    ) -> None:
        collection.find_one.return_value = blog_doc
        collection.find_one_and_update.return_value = blog_doc

        await BlogRepository(collection).update(
            str(blog_doc["_id"]),
            BlogUpdate.model_validate({"published": True}),
        )

        changes = collection.find_one_and_update.await_args.args[1]["$set"]
        assert "publishedAt" not in changes

    async def test_only_present_fields_are_written(
        self,
        collection: MagicMock,
        blog_doc: dict[str, Any],
    ) -> None:
        collection.find_one.return_value = blog_doc
        collection.find_one_and_update.return_value = blog_doc

        await BlogRepository(collection).update(
            str(blog_doc["_id"]),
            BlogUpdate.model_validate({"metaTitle": None, "tags": ["x"]}),
        )

        changes = collection.find_one_and_update.await_args.args[1]["$set"]
        assert set(changes) == {"metaTitle", "tags", "updatedAt"}

    async def test_missing_post(self, collection: MagicMock) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            await BlogRepository(collection).update(str(ObjectId()), BlogUpdate())
        assert exc_info.value.detail.startswith("Blog not found with id: ")


class TestCountersAndAggregates:
    """Likes, categories and popular tags."""

    async def test_like_returns_new_count(self, collection: MagicMock) -> None:
        collection.find_one_and_update.return_value = {"likes": 8}
        object_id = ObjectId()

        assert await BlogRepository(collection).like(str(object_id)) == 8

        predicate, update = collection.find_one_and_update.await_args.args
        assert predicate == {"_id": object_id}
        assert update == {"$inc": {"likes": 1}}

    async def test_like_invalid_id(self, collection: MagicMock) -> None:
        with pytest.raises(RecordNotFoundError):
            await BlogRepository(collection).like("not-an-id")

    async def test_categories_are_sorted_published_only(self, collection: MagicMock) -> None:
        collection.distinct.return_value = ["Startup", "Design", None]
        assert await BlogRepository(collection).categories() == ["Design", "Startup"]
        collection.distinct.assert_awaited_once_with("category", {"published": True})

    async def test_popular_tags_pipeline(self, collection: MagicMock, make_cursor: Any) -> None:
        collection.aggregate.return_value = make_cursor([{"_id": "python", "count": 4}])

        tags = await BlogRepository(collection).popular_tags()

        pipeline = collection.aggregate.call_args.args[0]
        assert pipeline[0] == {"$match": {"published": True}}
        assert pipeline[1] == {"$unwind": "$tags"}
        assert pipeline[-1] == {"$limit": 20}
        assert tags == [{"_id": "python", "count": 4}]
