# content_api/main.py

"""Content API - blog, contact form and mailing-list backend for FastAPI."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import ORJSONResponse
from pymongo.errors import PyMongoError
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from content_api.configs import settings
from content_api.db import mongo
from content_api.errors import (
    BaseAppError,
    DatabaseError,
    ValidationError,
    app_exception_handler,
    database_exception_handler,
    http_exception_handler,
    pymongo_exception_handler,
    request_validation_exception_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from content_api.managers import limiter, metrics_manager, rate_limit_exceeded_handler
from content_api.middleware import (
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from content_api.routes import blog_router, contact_router, subscription_router
from content_api.schemas import HealthCheckResponse, ServicesStatus
from content_api.services.notifications import NotificationDispatcher
from content_api.utils.helpers import today_str

app = FastAPI(
    title=settings.APP_NAME,
    description="Blog, contact form and email subscription API",
    version="1.0.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
    default_response_class=ORJSONResponse,
    swagger_ui_parameters={
        "docExpansion": "none",
        "operationsSorter": "method",
    },
)

configure_cors(app)

app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(GZipMiddleware, minimum_size=1000)
# Client addresses come from X-Forwarded-For when deployed behind a proxy
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")


routes = [
    blog_router,
    contact_router,
    subscription_router,
]

_ = [app.include_router(router, prefix=settings.API_PREFIX) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (ValidationError, validation_error_handler),
    (RequestValidationError, request_validation_exception_handler),
    (DatabaseError, database_exception_handler),
    (BaseAppError, app_exception_handler),
    (PyMongoError, pymongo_exception_handler),
    (StarletteHTTPException, http_exception_handler),
    (Exception, unhandled_exception_handler),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthCheckResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Server is running",
                        "timestamp": "2025-01-01 10:00:00",
                        "services": {
                            "database": "connected",
                            "email_circuit_breaker": {
                                "name": "mail_provider",
                                "state": "closed",
                                "failure_count": 0,
                                "failure_threshold": 3,
                                "time_until_reset": 0.0,
                            },
                            "email_queue": {
                                "running": True,
                                "pending": 0,
                                "capacity": 100,
                                "workers": 2,
                            },
                        },
                        "metrics": {"request_counts": {}, "rate_limit_hits": 0},
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> HealthCheckResponse:
    """
    Health check endpoint with service status.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    HealthCheckResponse
        Database reachability, mail circuit breaker and queue state, and
        request counters.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"success": true, "message": "Server is running", "timestamp": "...", "services": { ... }}
    """
    dispatcher: NotificationDispatcher | None = getattr(request.app.state, "dispatcher", None)

    services = ServicesStatus(
        database="connected" if await mongo.ping() else "disconnected",
        email_circuit_breaker=dispatcher.breaker.get_state() if dispatcher else None,
        email_queue=dispatcher.get_state() if dispatcher else None,
    )

    return HealthCheckResponse(
        timestamp=today_str(),
        services=services,
        metrics=metrics_manager.get_metrics(),
    )
