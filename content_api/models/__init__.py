"""Document models stored in MongoDB."""

from content_api.models.blog import BlogCategory
from content_api.models.contact import ContactStatus
from content_api.models.subscription import (
    PRIVATE_FIELDS,
    Frequency,
    SubscriptionSource,
    SubscriptionType,
)

__all__ = [
    "PRIVATE_FIELDS",
    "BlogCategory",
    "ContactStatus",
    "Frequency",
    "SubscriptionSource",
    "SubscriptionType",
]
