"""Contact form schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from content_api.configs.settings import (
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_SUBJECT_LENGTH,
)
from content_api.models import ContactStatus
from content_api.schemas.common import (
    DocumentResponse,
    GroupCount,
    choice,
    email_address,
    optional_text,
    required_text,
)

MAX_PHONE_LENGTH = 30
MAX_COMPANY_LENGTH = 100
MAX_NOTES_LENGTH = 2000


class ContactCreate(BaseModel):
    """Public contact-form submission."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., examples=["Jane Doe"])
    email: str = Field(..., examples=["jane@example.com"])
    phone: str | None = Field(default=None, examples=["+1 555 0100"])
    subject: str = Field(..., examples=["Partnership enquiry"])
    message: str = Field(..., examples=["Hello, I'd like to talk about..."])
    company: str | None = Field(default=None, examples=["Acme Inc."])

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: Any) -> str:
        return required_text(v, "Name", MAX_NAME_LENGTH)

    @field_validator("email", mode="before")
    @classmethod
    def validate_email(cls, v: Any) -> str:
        return email_address(v)

    @field_validator("subject", mode="before")
    @classmethod
    def validate_subject(cls, v: Any) -> str:
        return required_text(v, "Subject", MAX_SUBJECT_LENGTH)

    @field_validator("message", mode="before")
    @classmethod
    def validate_message(cls, v: Any) -> str:
        return required_text(v, "Message", MAX_MESSAGE_LENGTH)

    @field_validator("phone", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> str | None:
        return optional_text(v, "Phone", MAX_PHONE_LENGTH)

    @field_validator("company", mode="before")
    @classmethod
    def validate_company(cls, v: Any) -> str | None:
        return optional_text(v, "Company", MAX_COMPANY_LENGTH)


class ContactUpdate(BaseModel):
    """Operator update: status and/or notes."""

    model_config = ConfigDict(extra="ignore")

    status: ContactStatus | None = None
    notes: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> ContactStatus | None:
        return None if v is None else choice(v, ContactStatus, "status")

    @field_validator("notes", mode="before")
    @classmethod
    def validate_notes(cls, v: Any) -> str | None:
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError("Notes must be a string")
        if len(v) > MAX_NOTES_LENGTH:
            raise ValueError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")
        return v


class ContactResponse(DocumentResponse):
    name: str
    email: str
    phone: str | None = None
    subject: str
    message: str
    company: str | None = None
    status: str = ContactStatus.NEW
    ip_address: str | None = Field(default=None, alias="ipAddress")
    user_agent: str | None = Field(default=None, alias="userAgent")
    replied_at: datetime | None = Field(default=None, alias="repliedAt")
    notes: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


class ContactStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int
    today: int
    by_status: list[GroupCount] = Field(alias="byStatus")
