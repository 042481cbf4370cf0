"""Request and response schemas."""

from content_api.schemas.blog import (
    Author,
    BlogCreate,
    BlogResponse,
    BlogUpdate,
    LikesResponse,
)
from content_api.schemas.common import DocumentResponse, GroupCount
from content_api.schemas.contact import (
    ContactCreate,
    ContactResponse,
    ContactStats,
    ContactUpdate,
)
from content_api.schemas.envelope import (
    DataEnvelope,
    ErrorEnvelope,
    ExportEnvelope,
    FieldErrorEnvelope,
    MessageDataEnvelope,
    MessageEnvelope,
    PageEnvelope,
    error_examples,
)
from content_api.schemas.health import HealthCheckResponse, ServicesStatus
from content_api.schemas.subscription import (
    ExportEntry,
    Preferences,
    SubscriptionCreate,
    SubscriptionPublic,
    SubscriptionResponse,
    SubscriptionStats,
    SubscriptionUpdate,
)

__all__ = [
    "Author",
    "BlogCreate",
    "BlogResponse",
    "BlogUpdate",
    "ContactCreate",
    "ContactResponse",
    "ContactStats",
    "ContactUpdate",
    "DataEnvelope",
    "DocumentResponse",
    "ErrorEnvelope",
    "ExportEntry",
    "ExportEnvelope",
    "FieldErrorEnvelope",
    "GroupCount",
    "HealthCheckResponse",
    "LikesResponse",
    "MessageDataEnvelope",
    "MessageEnvelope",
    "PageEnvelope",
    "Preferences",
    "ServicesStatus",
    "SubscriptionCreate",
    "SubscriptionPublic",
    "SubscriptionResponse",
    "SubscriptionStats",
    "SubscriptionUpdate",
    "error_examples",
]
