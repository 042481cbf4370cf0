"""
Middleware components and the application lifespan.

Logging is configured here at import time: a rich console handler on the
root logger plus the rotating JSON file handler from ``file_logger``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import basicConfig, getLogger
from time import perf_counter

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from rich.logging import RichHandler
from rich.traceback import install
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from content_api.clients import build_mail_sender
from content_api.configs import file_logger, settings
from content_api.db import mongo
from content_api.managers.metrics import metrics_manager
from content_api.services.notifications import NotificationDispatcher
from content_api.utils.helpers import get_summary, host

basicConfig(
    level=settings.LOG_LEVEL,
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = file_logger(getLogger("content_api"))

install()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Connect MongoDB, ensure indexes and start the email dispatcher."""
    logger.info(f"Starting {app.title} ({settings.ENVIRONMENT})...")

    try:
        await mongo.connect()
        await mongo.create_indexes()

        sender = build_mail_sender(settings)
        dispatcher = NotificationDispatcher(sender, metrics=metrics_manager)
        await dispatcher.start()
        app.state.mail_sender = sender
        app.state.dispatcher = dispatcher

        logger.info(f"Mail provider: {settings.MAIL_PROVIDER}")
        logger.info(f"API mounted at {settings.API_PREFIX}, health check at /health")
    except Exception:
        logger.exception("Failed to initialize services")
        await mongo.disconnect()
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        try:
            await dispatcher.stop()
        except Exception:
            logger.exception("Error while stopping the email dispatcher")
        try:
            await sender.close()
        except Exception:
            logger.exception("Error while closing the mail sender")
    finally:
        await mongo.disconnect()
    logger.info("Services cleaned up successfully")


def configure_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing information."""
        start_time = perf_counter()
        route_info = get_summary(request) or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        response = await call_next(request)

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {perf_counter() - start_time:.3f}s",
        )
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response
