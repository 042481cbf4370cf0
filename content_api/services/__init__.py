from content_api.services.contact import ContactService
from content_api.services.notifications import NotificationDispatcher
from content_api.services.subscription import SubscribeOutcome, SubscriptionService

__all__ = [
    "ContactService",
    "NotificationDispatcher",
    "SubscribeOutcome",
    "SubscriptionService",
]
