from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_502_BAD_GATEWAY,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from content_api.errors.base import BaseAppError


class EmailServiceError(BaseAppError):
    """Base class for all email service related errors."""

    def __init__(
        self,
        detail: str = "Email service error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ConfigurationError(EmailServiceError):
    """Raised when credentials or sender configuration are missing."""

    def __init__(self, detail: str = "Email service configuration error") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class AuthenticationError(EmailServiceError):
    """Raised when OAuth2 token refresh fails."""

    def __init__(self, detail: str = "Email service authentication error") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED)


class SendingError(EmailServiceError):
    """Raised when the provider refuses to send the message."""

    def __init__(self, detail: str = "Email service sending error") -> None:
        super().__init__(detail, HTTP_502_BAD_GATEWAY)


class NetworkError(EmailServiceError):
    """Raised when network connectivity issues occur."""

    def __init__(self, detail: str = "Email service network error") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


# Errors worth another delivery attempt
TRANSIENT_EMAIL_ERRORS: tuple[type[Exception], ...] = (
    SendingError,
    NetworkError,
    ConnectionError,
    TimeoutError,
)
