"""Shared field parsers and base models for request/response schemas."""

from enum import StrEnum
from typing import Annotated, Any

from bson import ObjectId
from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _stringify_id(value: Any) -> Any:
    return str(value) if isinstance(value, ObjectId) else value


ObjectIdStr = Annotated[str, BeforeValidator(_stringify_id)]


def required_text(value: Any, label: str, max_length: int | None = None) -> str:
    """Trim ``value`` and enforce presence and maximum length."""
    if value is None:
        raise ValueError(f"{label} is required")
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    text = value.strip()
    if not text:
        raise ValueError(f"{label} is required")
    if max_length is not None and len(text) > max_length:
        raise ValueError(f"{label} cannot exceed {max_length} characters")
    return text


def optional_text(value: Any, label: str, max_length: int | None = None) -> str | None:
    """Like ``required_text`` but blank or missing input becomes ``None``."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a string")
    text = value.strip()
    if max_length is not None and len(text) > max_length:
        raise ValueError(f"{label} cannot exceed {max_length} characters")
    return text or None


def email_address(value: Any) -> str:
    text = required_text(value, "Email")
    try:
        return validate_email(text, check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError("Please provide a valid email") from e


def choice[E: StrEnum](value: Any, enum: type[E], label: str) -> E:
    """Coerce ``value`` into ``enum`` with a readable error message."""
    try:
        return enum(value)
    except ValueError as e:
        raise ValueError(f"Invalid {label}") from e


def string_list(value: Any, label: str) -> list[str]:
    """Trim every entry and drop blanks; ``None`` is an empty list."""
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{label} must be a list of strings")
    return [item.strip() for item in value if item.strip()]


class GroupCount(BaseModel):
    """One bucket of a ``$group`` aggregation."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, alias="_id")
    count: int


class DocumentResponse(BaseModel):
    """Base for documents read back from MongoDB."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: ObjectIdStr = Field(alias="_id")
