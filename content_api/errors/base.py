from collections.abc import Awaitable, Callable
from logging import Logger, getLogger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

from content_api.configs import file_logger, settings
from content_api.configs.settings import DEFAULT_ERROR_MESSAGE
from content_api.utils.helpers import host

logger = file_logger(getLogger(__name__))


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_response(detail: str, status_code: int) -> ORJSONResponse:
    """Build the failure envelope ``{"success": false, "error": ...}``."""
    return ORJSONResponse(
        content={"success": False, "error": detail},
        status_code=status_code,
    )


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = getattr(exc, "status_code", HTTP_500_INTERNAL_SERVER_ERROR)
        detail = getattr(exc, "detail", DEFAULT_ERROR_MESSAGE)

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        return error_response(detail, status_code)

    return handler


async def http_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Wrap Starlette HTTP errors (unknown routes, bad methods) in the envelope."""
    http_exc = exc if isinstance(exc, StarletteHTTPException) else None
    status_code = http_exc.status_code if http_exc else HTTP_500_INTERNAL_SERVER_ERROR
    if status_code == HTTP_404_NOT_FOUND:
        detail = "Route not found"
    else:
        detail = str(http_exc.detail) if http_exc else DEFAULT_ERROR_MESSAGE
    return error_response(detail, status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Last-resort handler: log with traceback, hide details in production."""
    logger.error(
        f"Unhandled error for ip: {host(request)} at endpoint {request.url.path}",
        exc_info=exc,
    )
    detail = DEFAULT_ERROR_MESSAGE if settings.is_production else str(exc) or DEFAULT_ERROR_MESSAGE
    return error_response(detail, HTTP_500_INTERNAL_SERVER_ERROR)


app_exception_handler = create_exception_handler(logger)
