"""Rate limiter configuration using slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from content_api.configs import LimiterConfig, file_logger, settings
from content_api.configs.settings import (
    CONTACT_RATE_LIMIT_MESSAGE,
    RATE_LIMIT_MESSAGE,
    SUBSCRIPTION_RATE_LIMIT_MESSAGE,
)
from content_api.errors.base import error_response
from content_api.managers.metrics import metrics_manager
from content_api.utils.helpers import host

logger = file_logger(getLogger(__name__))

# Per-IP sliding window; the general limit applies to every route via the
# middleware, the stricter ones are attached to the public write endpoints.
limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_remote_address)

contact_limit = limiter.limit(
    settings.CONTACT_RATE_LIMIT,
    error_message=CONTACT_RATE_LIMIT_MESSAGE,
)
subscription_limit = limiter.limit(
    settings.SUBSCRIPTION_RATE_LIMIT,
    error_message=SUBSCRIPTION_RATE_LIMIT_MESSAGE,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """
    Render ``RateLimitExceeded`` as ``{"success": false, "error": ...}``.

    Limits declared with an ``error_message`` use it; the general limit
    uses the default message.
    """
    limit_exc = cast(RateLimitExceeded, exc)
    limit = getattr(limit_exc, "limit", None)
    custom = getattr(limit, "error_message", None)
    detail = str(limit_exc.detail) if custom else RATE_LIMIT_MESSAGE

    metrics_manager.record_rate_limit_hit()
    logger.warning(f"Rate limit exceeded for ip: {host(request)} at {request.url.path}")
    return error_response(detail, HTTP_429_TOO_MANY_REQUESTS)
