"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import TypedDict, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from content_api.configs import file_logger
from content_api.errors.base import BaseAppError
from content_api.utils.helpers import host

logger = file_logger(getLogger(__name__))

_VALUE_ERROR_PREFIX = "Value error, "


class FieldError(TypedDict):
    field: str
    message: str


class ValidationError(BaseAppError):
    """Input failed validation; carries per-field messages."""

    def __init__(
        self,
        detail: str = "Validation failed",
        errors: list[FieldError] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors: list[FieldError] = errors or [{"field": "", "message": detail}]

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(detail=message, errors=[{"field": field, "message": message}])


def _errors_response(errors: list[FieldError]) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={"success": False, "errors": errors},
    )


def format_pydantic_errors(raw_errors: list[dict]) -> list[FieldError]:
    """
    Flatten pydantic error dicts into ``{field, message}`` pairs.

    The first ``loc`` element (``body``, ``query``, ``path``) is dropped.
    """
    formatted: list[FieldError] = []
    for error in raw_errors:
        loc = error.get("loc", ())
        parts = loc[1:] if len(loc) > 1 else loc
        message = str(error.get("msg", "Invalid value"))
        formatted.append(
            {
                "field": ".".join(str(part) for part in parts),
                "message": message.removeprefix(_VALUE_ERROR_PREFIX),
            },
        )
    return formatted


async def validation_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render an application ``ValidationError`` as the field-error envelope."""
    error = cast(ValidationError, exc)
    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {error.errors}",
    )
    return _errors_response(error.errors)


async def request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle FastAPI request validation errors with the field-error envelope.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with status 400 and ``errors`` list.
    """
    exec_error = cast(RequestValidationError, exc)
    formatted_errors = format_pydantic_errors(list(exec_error.errors()))

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return _errors_response(formatted_errors)


class InvalidTokenError(BaseAppError):
    """A token-authenticated link did not match any record."""

    def __init__(self, detail: str = "Invalid link") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
