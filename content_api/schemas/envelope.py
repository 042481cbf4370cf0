"""
Uniform JSON envelope returned by every endpoint.

Success responses carry ``success: true`` and either ``data`` or the
pagination fields. ``message`` appears only where the visitor is shown a
confirmation. Failures carry ``error`` or a list of field ``errors``.
"""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class MessageEnvelope(BaseModel):
    success: Literal[True] = True
    message: str


class DataEnvelope(BaseModel, Generic[T]):
    success: Literal[True] = True
    data: T


class MessageDataEnvelope(DataEnvelope[T], Generic[T]):
    """A payload plus a confirmation message for the visitor."""

    message: str


class PageEnvelope(BaseModel, Generic[T]):
    success: Literal[True] = True
    count: int = Field(description="Items in this page")
    total: int = Field(description="Items matching the filters")
    page: int
    pages: int
    data: list[T]


class ErrorEnvelope(BaseModel):
    success: Literal[False] = False
    error: str


class FieldErrorItem(BaseModel):
    field: str
    message: str


class FieldErrorEnvelope(BaseModel):
    success: Literal[False] = False
    errors: list[FieldErrorItem]


class ExportEnvelope(BaseModel, Generic[T]):
    success: Literal[True] = True
    count: int
    data: list[T]


def error_examples(*codes: int) -> dict[int | str, dict[str, Any]]:
    """OpenAPI ``responses`` entries for the common failure envelopes."""
    catalogue: dict[int, dict[str, Any]] = {
        400: {"model": FieldErrorEnvelope, "description": "Invalid input"},
        404: {"model": ErrorEnvelope, "description": "Not found"},
        429: {"model": ErrorEnvelope, "description": "Rate limit exceeded"},
    }
    return {code: catalogue[code] for code in codes if code in catalogue}
