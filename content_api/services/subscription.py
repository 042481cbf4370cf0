"""
Subscription lifecycle.

An address is absent, active or inactive. Subscribing creates (absent) or
reactivates (inactive) and is rejected while active; unsubscribing by
token deactivates and is a no-op when already inactive. Operator updates
go straight to the repository and bypass these rules.
"""

from dataclasses import dataclass
from logging import getLogger
from secrets import token_hex

from content_api.configs import file_logger, redact_email, settings
from content_api.errors import ConflictError, InvalidTokenError, ValidationError
from content_api.models import SubscriptionSource, SubscriptionType
from content_api.repositories.base import Document
from content_api.repositories.subscription import SubscriptionRepository
from content_api.schemas.subscription import Preferences, SubscriptionCreate
from content_api.services.email_templates import subscription_notification, welcome_email
from content_api.services.notifications import NotificationDispatcher
from content_api.utils.helpers import utc_now

logger = file_logger(getLogger(__name__))

SUBSCRIBED_MESSAGE = "Successfully subscribed to our mailing list!"
REACTIVATED_MESSAGE = "Successfully reactivated your subscription!"
UNSUBSCRIBED_MESSAGE = "Successfully unsubscribed from our mailing list"
ALREADY_SUBSCRIBED_MESSAGE = "This email is already subscribed"
INVALID_UNSUBSCRIBE_MESSAGE = "Invalid unsubscribe link"

TOKEN_BYTES = 32


def new_unsubscribe_token() -> str:
    """64 hex characters from the OS CSPRNG."""
    return token_hex(TOKEN_BYTES)


@dataclass(frozen=True, slots=True)
class SubscribeOutcome:
    subscription: Document
    created: bool

    @property
    def message(self) -> str:
        return SUBSCRIBED_MESSAGE if self.created else REACTIVATED_MESSAGE


class SubscriptionService:
    def __init__(
        self,
        repo: SubscriptionRepository,
        dispatcher: NotificationDispatcher,
        operator_email: str | None = None,
    ) -> None:
        self.repo = repo
        self.dispatcher = dispatcher
        self.operator_email = operator_email if operator_email is not None else str(
            settings.COMPANY_TARGET_EMAIL,
        )

    async def subscribe(
        self,
        data: SubscriptionCreate,
        ip_address: str | None = None,
    ) -> SubscribeOutcome:
        """
        Subscribe ``data.email``.

        Raises:
            ConflictError: If the address is already active.
        """
        existing = await self.repo.find_by_email(data.email)
        if existing is not None:
            if existing.get("isActive"):
                raise ConflictError(ALREADY_SUBSCRIBED_MESSAGE)
            return SubscribeOutcome(await self._reactivate(existing, data), created=False)

        now = utc_now()
        document: Document = {
            "email": data.email,
            "name": data.name,
            "isActive": True,
            "subscriptionType": (data.subscription_type or SubscriptionType.ALL).value,
            "preferences": (data.preferences or Preferences()).model_dump(mode="json"),
            "source": (data.source or SubscriptionSource.WEBSITE).value,
            "verified": True,
            "verifiedAt": now,
            "unsubscribeToken": new_unsubscribe_token(),
            "ipAddress": ip_address,
        }
        # A concurrent insert of the same address surfaces as DuplicateEntryError,
        # a ConflictError carrying the same message.
        subscription = await self.repo.insert(document)
        logger.info(f"New subscription from {redact_email(data.email)}")

        if self.operator_email:
            self.dispatcher.submit(subscription_notification(subscription, self.operator_email))
        self.dispatcher.submit(welcome_email(subscription))
        return SubscribeOutcome(subscription, created=True)

    async def _reactivate(self, existing: Document, data: SubscriptionCreate) -> Document:
        changes: Document = {}
        if data.name:
            changes["name"] = data.name
        if data.subscription_type:
            changes["subscriptionType"] = data.subscription_type.value
        if not existing.get("unsubscribeToken"):
            changes["unsubscribeToken"] = new_unsubscribe_token()
        subscription = await self.repo.reactivate(existing["_id"], changes)
        logger.info(f"Reactivated subscription for {redact_email(data.email)}")
        return subscription

    async def unsubscribe(self, token: str) -> Document:
        """
        Deactivate the subscription owning ``token``.

        Raises:
            InvalidTokenError: If no subscription has this token.
        """
        subscription = await self.repo.find_by_token(token) if token else None
        if subscription is None:
            raise InvalidTokenError(INVALID_UNSUBSCRIBE_MESSAGE)
        if subscription.get("isActive") is False:
            return subscription
        return await self.repo.deactivate(subscription["_id"])

    async def export(self, subscription_type: str | None = None) -> list[Document]:
        """
        Active, verified addresses for a mailing-list export.

        Raises:
            ValidationError: If ``subscription_type`` is not a known type.
        """
        if subscription_type and subscription_type not in SubscriptionType:
            raise ValidationError.for_field("subscriptionType", "Invalid subscription type")
        return await self.repo.export(subscription_type or None)
