# tests/repositories/test_base_repository.py
"""Tests for content_api/repositories/base.py module."""

from typing import Any
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from content_api.errors import DuplicateEntryError, RecordNotFoundError
from content_api.repositories.base import HIDDEN, BaseRepository, Page
from content_api.utils.filters import CONTACT_FILTERS, normalize_filters


class WidgetRepository(BaseRepository):
    entity = "Widget"
    duplicate_message = "Widget already exists"


class TestPage:
    """Tests for the Page value object and its envelope."""

    @pytest.mark.parametrize(
        ("total", "limit", "pages"),
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (12, 5, 3)],
    )
    def test_page_count(self, total: int, limit: int, pages: int) -> None:
        assert Page(items=[], total=total, page=1, limit=limit).pages == pages

    def test_envelope(self) -> None:
        items = [{"_id": 1}, {"_id": 2}]
        envelope = Page(items=items, total=12, page=2, limit=5).to_envelope()
        assert envelope == {
            "success": True,
            "count": 2,
            "total": 12,
            "page": 2,
            "pages": 3,
            "data": items,
        }


class TestFindPage:
    """Tests for BaseRepository.find_page."""

    async def test_same_predicate_for_page_and_count(
        self,
        collection: MagicMock,
        make_cursor: Any,
    ) -> None:
        cursor = make_cursor([{"_id": ObjectId()} for _ in range(5)])
        collection.find.return_value = cursor
        collection.count_documents.return_value = 12
        query = normalize_filters({"page": "2", "limit": "5", "sort": "-createdAt"}, CONTACT_FILTERS)
        predicate = {"status": "new"}

        page = await WidgetRepository(collection).find_page(predicate, query)

        collection.find.assert_called_once_with(predicate, HIDDEN)
        collection.count_documents.assert_awaited_once_with(predicate)
        assert cursor.sort_spec == [("createdAt", DESCENDING)]
        assert cursor.skipped == 5
        assert cursor.limited == 5
        assert (page.total, page.page, page.pages, len(page.items)) == (12, 2, 3, 5)

    async def test_page_past_the_end_is_empty(
        self,
        collection: MagicMock,
        make_cursor: Any,
    ) -> None:
        collection.find.return_value = make_cursor([])
        collection.count_documents.return_value = 3
        query = normalize_filters({"page": "9"}, CONTACT_FILTERS)

        envelope = (await WidgetRepository(collection).find_page({}, query)).to_envelope()

        assert envelope["count"] == 0
        assert envelope["total"] == 3
        assert envelope["pages"] == 1


class TestReads:
    """Lookup by id."""

    async def test_invalid_id_matches_nothing(self, collection: MagicMock) -> None:
        assert await WidgetRepository(collection).get_by_id("not-an-id") is None
        collection.find_one.assert_not_awaited()

    async def test_get_or_raise_message(self, collection: MagicMock) -> None:
        with pytest.raises(RecordNotFoundError) as exc_info:
            await WidgetRepository(collection).get_or_raise("abc")
        assert exc_info.value.detail == "Widget not found with id: abc"
        assert exc_info.value.status_code == 404

    async def test_private_fields_are_projected_out(self, collection: MagicMock) -> None:
        object_id = ObjectId()
        collection.find_one.return_value = {"_id": object_id}
        await WidgetRepository(collection).get_by_id(str(object_id))
        collection.find_one.assert_awaited_once_with({"_id": object_id}, HIDDEN)
        assert HIDDEN == {"__v": 0, "verificationToken": 0}


class TestWrites:
    """Insert, update and delete."""

    async def test_insert_stamps_timestamps(self, collection: MagicMock) -> None:
        created = await WidgetRepository(collection).insert({"name": "w"})
        stored = collection.insert_one.await_args.args[0]
        assert stored["createdAt"] == stored["updatedAt"]
        assert stored["createdAt"].tzinfo is not None
        assert created["_id"] == collection.insert_one.return_value.inserted_id

    async def test_insert_duplicate(self, collection: MagicMock) -> None:
        collection.insert_one.side_effect = DuplicateKeyError("dup")
        with pytest.raises(DuplicateEntryError) as exc_info:
            await WidgetRepository(collection).insert({"name": "w"})
        assert exc_info.value.detail == "Widget already exists"
        assert exc_info.value.status_code == 400

    async def test_update_sets_and_unsets(self, collection: MagicMock) -> None:
        object_id = ObjectId()
        collection.find_one_and_update.return_value = {"_id": object_id, "a": 1}

        await WidgetRepository(collection).update_by_id(
            str(object_id),
            {"a": 1},
            unset=("b", "a"),
        )

        args = collection.find_one_and_update.await_args
        predicate, update = args.args
        assert predicate == {"_id": object_id}
        assert update["$set"]["a"] == 1
        assert "updatedAt" in update["$set"]
        assert update["$unset"] == {"b": ""}
        assert args.kwargs["return_document"] is ReturnDocument.AFTER
        assert args.kwargs["projection"] == HIDDEN

    async def test_update_missing_record(self, collection: MagicMock) -> None:
        with pytest.raises(RecordNotFoundError):
            await WidgetRepository(collection).update_by_id(str(ObjectId()), {"a": 1})

    async def test_update_invalid_id(self, collection: MagicMock) -> None:
        with pytest.raises(RecordNotFoundError):
            await WidgetRepository(collection).update_by_id("nope", {"a": 1})
        collection.find_one_and_update.assert_not_awaited()

    async def test_delete_missing_record(self, collection: MagicMock) -> None:
        collection.delete_one.return_value = MagicMock(deleted_count=0)
        with pytest.raises(RecordNotFoundError):
            await WidgetRepository(collection).delete(str(ObjectId()))


class TestAggregates:
    """Counting helpers."""

    async def test_count_defaults_to_everything(self, collection: MagicMock) -> None:
        collection.count_documents.return_value = 4
        assert await WidgetRepository(collection).count() == 4
        collection.count_documents.assert_awaited_once_with({})

    async def test_group_count_pipeline(self, collection: MagicMock, make_cursor: Any) -> None:
        collection.aggregate.return_value = make_cursor([{"_id": "new", "count": 2}])

        result = await WidgetRepository(collection).group_count("status", {"isActive": True})

        pipeline = collection.aggregate.call_args.args[0]
        assert pipeline == [
            {"$match": {"isActive": True}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
            {"$sort": {"count": -1, "_id": 1}},
        ]
        assert result == [{"_id": "new", "count": 2}]
