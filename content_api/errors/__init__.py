from content_api.errors.base import (
    BaseAppError,
    app_exception_handler,
    create_exception_handler,
    error_response,
    http_exception_handler,
    unhandled_exception_handler,
)
from content_api.errors.circuit_breaker import CircuitBreakerError
from content_api.errors.database import (
    ConflictError,
    DatabaseConnectionError,
    DatabaseError,
    DuplicateEntryError,
    RecordNotFoundError,
    database_exception_handler,
    pymongo_exception_handler,
)
from content_api.errors.email import (
    TRANSIENT_EMAIL_ERRORS,
    AuthenticationError,
    ConfigurationError,
    EmailServiceError,
    NetworkError,
    SendingError,
)
from content_api.errors.validation import (
    FieldError,
    InvalidTokenError,
    ValidationError,
    format_pydantic_errors,
    request_validation_exception_handler,
    validation_error_handler,
)

__all__ = [
    "TRANSIENT_EMAIL_ERRORS",
    "AuthenticationError",
    "BaseAppError",
    "CircuitBreakerError",
    "ConfigurationError",
    "ConflictError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DuplicateEntryError",
    "EmailServiceError",
    "FieldError",
    "InvalidTokenError",
    "NetworkError",
    "RecordNotFoundError",
    "SendingError",
    "ValidationError",
    "app_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "error_response",
    "format_pydantic_errors",
    "http_exception_handler",
    "pymongo_exception_handler",
    "request_validation_exception_handler",
    "unhandled_exception_handler",
    "validation_error_handler",
]
