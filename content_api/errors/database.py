from logging import getLogger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from content_api.configs import file_logger
from content_api.errors.base import BaseAppError, create_exception_handler, error_response
from content_api.utils.helpers import host

logger = file_logger(getLogger(__name__))


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when the document store cannot be reached."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class ConflictError(DatabaseError):
    """Exception raised when a write collides with existing state."""

    def __init__(
        self,
        detail: str = "Conflict with existing record",
    ) -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class DuplicateEntryError(ConflictError):
    """Exception raised when a unique index rejects a write."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
    ) -> None:
        super().__init__(detail)


database_exception_handler = create_exception_handler(logger)


async def pymongo_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Driver errors that escaped a repository are reported as a generic 500."""
    logger.error(
        f"Database error for ip: {host(request)} at endpoint {request.url.path}",
        exc_info=exc,
    )
    return error_response(DatabaseError().detail, HTTP_500_INTERNAL_SERVER_ERROR)
