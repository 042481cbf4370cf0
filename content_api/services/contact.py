"""Contact form submission workflow."""

from logging import getLogger

from content_api.configs import file_logger, redact_email, settings
from content_api.repositories.base import Document
from content_api.repositories.contact import ContactRepository
from content_api.schemas.contact import ContactCreate
from content_api.services.email_templates import contact_notification
from content_api.services.notifications import NotificationDispatcher

logger = file_logger(getLogger(__name__))

RECEIVED_MESSAGE = "Your message has been received. We will get back to you soon!"


class ContactService:
    def __init__(
        self,
        repo: ContactRepository,
        dispatcher: NotificationDispatcher,
        operator_email: str | None = None,
    ) -> None:
        self.repo = repo
        self.dispatcher = dispatcher
        self.operator_email = operator_email if operator_email is not None else str(
            settings.COMPANY_TARGET_EMAIL,
        )

    async def submit(
        self,
        data: ContactCreate,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Document:
        """
        Persist a submission and queue the operator notification.

        The notification is queued only after the write succeeds and its
        outcome never affects the returned document.
        """
        contact = await self.repo.create(data, ip_address=ip_address, user_agent=user_agent)
        logger.info(f"Contact submission {contact['_id']} from {redact_email(data.email)}")

        if self.operator_email:
            self.dispatcher.submit(contact_notification(contact, self.operator_email))
        else:
            logger.warning("COMPANY_TARGET_EMAIL is not set; contact notification skipped")
        return contact
