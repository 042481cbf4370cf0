"""Contact submission repository."""

from pymongo import ReturnDocument

from content_api.models import ContactStatus
from content_api.repositories.base import HIDDEN, BaseRepository, Document
from content_api.schemas.contact import ContactCreate, ContactUpdate
from content_api.utils.helpers import local_midnight, to_object_id, utc_now


class ContactRepository(BaseRepository):
    entity = "Contact"

    async def create(
        self,
        data: ContactCreate,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Document:
        document = data.model_dump()
        document["status"] = ContactStatus.NEW.value
        document["ipAddress"] = ip_address
        document["userAgent"] = user_agent
        return await self.insert(document)

    async def open(self, record_id: str) -> Document:
        """
        Read a submission, moving it from ``new`` to ``read``.

        Raises:
            RecordNotFoundError: If no submission has this id.
        """
        object_id = to_object_id(record_id)
        if object_id is None:
            raise self.not_found(record_id)
        document = await self.collection.find_one_and_update(
            {"_id": object_id, "status": ContactStatus.NEW.value},
            {"$set": {"status": ContactStatus.READ.value, "updatedAt": utc_now()}},
            projection=HIDDEN,
            return_document=ReturnDocument.AFTER,
        )
        return document if document is not None else await self.get_or_raise(record_id)

    async def update(self, record_id: str, data: ContactUpdate) -> Document:
        current = await self.get_or_raise(record_id)
        changes: Document = {}
        if data.status is not None:
            changes["status"] = data.status.value
            if (
                data.status is ContactStatus.REPLIED
                and current.get("status") != ContactStatus.REPLIED
                and not current.get("repliedAt")
            ):
                changes["repliedAt"] = utc_now()
        if "notes" in data.model_fields_set:
            changes["notes"] = data.notes
        return await self.update_by_id(current["_id"], changes)

    async def stats(self) -> Document:
        return {
            "total": await self.count(),
            "today": await self.count({"createdAt": {"$gte": local_midnight()}}),
            "byStatus": await self.group_count("status"),
        }
