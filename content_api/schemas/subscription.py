"""
Email subscription schemas.

Two read models exist: ``SubscriptionPublic`` is what a subscriber sees
after subscribing and never carries the unsubscribe token;
``SubscriptionResponse`` is the operator view and does.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from content_api.configs.settings import MAX_NAME_LENGTH
from content_api.models import Frequency, SubscriptionSource, SubscriptionType
from content_api.schemas.common import (
    DocumentResponse,
    GroupCount,
    choice,
    email_address,
    optional_text,
    string_list,
)


def normalize_email(value: Any) -> str:
    """Subscriptions are keyed by the trimmed, lower-cased address."""
    return email_address(value).lower()


class Preferences(BaseModel):
    frequency: Frequency = Frequency.WEEKLY
    categories: list[str] = Field(default_factory=list)

    @field_validator("frequency", mode="before")
    @classmethod
    def validate_frequency(cls, v: Any) -> Frequency:
        return Frequency.WEEKLY if v is None else choice(v, Frequency, "frequency")

    @field_validator("categories", mode="before")
    @classmethod
    def validate_categories(cls, v: Any) -> list[str]:
        return string_list(v, "Categories")


class _SubscriptionFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("name", mode="before", check_fields=False)
    @classmethod
    def validate_name(cls, v: Any) -> str | None:
        return optional_text(v, "Name", MAX_NAME_LENGTH)

    @field_validator("subscription_type", mode="before", check_fields=False)
    @classmethod
    def validate_subscription_type(cls, v: Any) -> SubscriptionType | None:
        return None if v is None else choice(v, SubscriptionType, "subscription type")

    @field_validator("source", mode="before", check_fields=False)
    @classmethod
    def validate_source(cls, v: Any) -> SubscriptionSource | None:
        return None if v is None else choice(v, SubscriptionSource, "source")


class SubscriptionCreate(_SubscriptionFields):
    """Public subscribe request."""

    email: str = Field(..., examples=["reader@example.com"])
    name: str | None = Field(default=None, examples=["Sam Reader"])
    subscription_type: SubscriptionType | None = Field(
        default=None,
        alias="subscriptionType",
        examples=["newsletter"],
    )
    preferences: Preferences | None = None
    source: SubscriptionSource | None = Field(default=None, examples=["blog"])

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        return normalize_email(v)


class SubscriptionUpdate(_SubscriptionFields):
    """
    Operator update.

    Fields are written as given, bypassing the subscribe/unsubscribe
    transitions.
    """

    name: str | None = None
    is_active: bool | None = Field(default=None, alias="isActive")
    subscription_type: SubscriptionType | None = Field(default=None, alias="subscriptionType")
    preferences: Preferences | None = None
    source: SubscriptionSource | None = None
    verified: bool | None = None

    def to_document(self) -> dict[str, Any]:
        changes = self.model_dump(by_alias=True, mode="json", exclude_unset=True)
        return {key: value for key, value in changes.items() if value is not None or key == "name"}


class SubscriptionPublic(DocumentResponse):
    email: str
    name: str | None = None
    is_active: bool = Field(default=True, alias="isActive")
    subscription_type: str = Field(default=SubscriptionType.ALL, alias="subscriptionType")
    preferences: Preferences = Field(default_factory=Preferences)
    source: str = SubscriptionSource.WEBSITE
    verified: bool = False
    verified_at: datetime | None = Field(default=None, alias="verifiedAt")
    unsubscribed_at: datetime | None = Field(default=None, alias="unsubscribedAt")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class SubscriptionResponse(SubscriptionPublic):
    unsubscribe_token: str | None = Field(default=None, alias="unsubscribeToken")
    ip_address: str | None = Field(default=None, alias="ipAddress")
    last_email_sent: datetime | None = Field(default=None, alias="lastEmailSent")


class SubscriptionStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    active: int
    inactive: int
    today: int
    by_type: list[GroupCount] = Field(alias="byType")


class ExportEntry(BaseModel):
    email: str
    name: str = ""
    type: str
