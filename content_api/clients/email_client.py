"""Mail sender backed by the Gmail API with OAuth2 authentication."""

from asyncio import get_running_loop
from base64 import urlsafe_b64encode
from email.message import EmailMessage
from email.utils import parseaddr
from logging import getLogger
from os import chmod
from re import compile as re_compile
from stat import S_IRUSR, S_IRWXG, S_IRWXO, S_IWUSR
from threading import Lock
from typing import Any, cast

from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError

from content_api.clients.protocols import OutboundEmail, SendResult
from content_api.configs import file_logger, redact_email, settings
from content_api.errors import (
    AuthenticationError,
    ConfigurationError,
    EmailServiceError,
    NetworkError,
    SendingError,
)

logger = file_logger(getLogger(__name__))

_HEADER_INJECTION_PATTERN = re_compile(r"[\r\n]")

# Provider answers worth retrying.
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


class EmailClient:
    """
    Sends ``OutboundEmail`` messages through the Gmail API.

    The Google client is blocking, so each send runs in the default
    executor. The service object is built lazily under a lock.
    """

    provider = "gmail"

    def __init__(self, sender: str | None = None) -> None:
        self._sender = sender or str(settings.MAIL_FROM)
        self._credentials: Credentials | None = None
        self._service: Resource | None = None
        self._service_lock = Lock()

    def _validate_token_file_permissions(self) -> None:
        """Tighten the token file to owner-only access if needed."""
        token_file = settings.GMAIL_TOKEN_FILE
        if not token_file.exists():
            return
        try:
            if token_file.stat().st_mode & (S_IRWXG | S_IRWXO):
                logger.warning("Token file has insecure permissions, fixing to owner-only access")
                chmod(token_file, S_IRUSR | S_IWUSR)
        except OSError:
            logger.exception("Failed to validate token file permissions")

    def _validate_email(self, email: str) -> str:
        """
        Validate an address and reject header injection.

        Raises:
            ValueError: If the address is malformed.
        """
        if _HEADER_INJECTION_PATTERN.search(email):
            mssg = "Email contains invalid characters (potential header injection)"
            raise ValueError(mssg)

        _, addr = parseaddr(email)
        if not addr or "@" not in addr:
            mssg = f"Invalid email address: {email}"
            raise ValueError(mssg)
        return addr

    def _sanitize_header(self, value: str) -> str:
        return _HEADER_INJECTION_PATTERN.sub(" ", value).strip()

    def _get_credentials(self) -> Credentials:
        """
        Load and, when expired, refresh the stored OAuth2 credentials.

        Raises:
            AuthenticationError: If the token is corrupt or refresh fails.
            ConfigurationError: If no usable token exists.
        """
        self._validate_token_file_permissions()
        token_file = settings.GMAIL_TOKEN_FILE

        if not token_file.exists():
            mssg = f"Valid token not found at {token_file}."
            logger.error(mssg)
            raise ConfigurationError(mssg)

        try:
            creds = Credentials.from_authorized_user_file(str(token_file), settings.GMAIL_SCOPES)
        except ValueError as e:
            mssg = "Token file is corrupt."
            logger.exception(mssg)
            raise AuthenticationError(mssg) from e

        if creds.valid:
            return creds

        if not (creds.expired and creds.refresh_token):
            mssg = f"Token at {token_file} is invalid and cannot be refreshed."
            logger.error(mssg)
            raise ConfigurationError(mssg)

        logger.info("Refreshing expired Gmail access token.")
        try:
            creds.refresh(Request())
        except RefreshError as e:
            logger.exception("Token refresh failed.")
            raise AuthenticationError("Token expired and refresh failed.") from e
        except TransportError as e:
            raise NetworkError(f"Could not reach Google to refresh token: {e}") from e
        return creds

    @property
    def service(self) -> Resource:
        """Gmail API resource, built once (double-checked locking)."""
        if self._service is None:
            with self._service_lock:
                if self._service is None:
                    self._credentials = self._get_credentials()
                    self._service = build(
                        "gmail",
                        "v1",
                        credentials=self._credentials,
                        cache_discovery=False,
                    )
        return self._service

    def build_message(self, message: OutboundEmail) -> dict[str, str]:
        """
        Encode ``message`` as the ``raw`` payload the Gmail API expects.

        Plain text is always present; HTML is added as an alternative part.

        Raises:
            ValueError: If any address is invalid.
        """
        if not self._sender:
            raise ConfigurationError("MAIL_FROM is not configured")

        mime = EmailMessage()
        mime["To"] = self._validate_email(message.to)
        mime["From"] = self._validate_email(self._sender)
        mime["Subject"] = self._sanitize_header(message.subject)
        if message.reply_to:
            mime["Reply-To"] = self._validate_email(message.reply_to)

        mime.set_content(message.text)
        if message.html:
            mime.add_alternative(message.html, subtype="html")

        return {"raw": urlsafe_b64encode(mime.as_bytes()).decode()}

    def send_sync(self, message: OutboundEmail) -> SendResult:
        """
        Blocking send. Use ``send`` from async code.

        Raises:
            SendingError: Provider rejected or failed the request.
            NetworkError: Transport-level failure.
            ConfigurationError | AuthenticationError: Credentials problems.
        """
        try:
            body = self.build_message(message)
            service = cast(Any, self.service)
            result = service.users().messages().send(userId="me", body=body).execute()
        except HttpError as error:
            status = getattr(error.resp, "status", None)
            mssg = f"Gmail API refused request ({status}): {error.reason}"
            logger.warning(mssg)
            if status in _RETRYABLE_STATUS:
                raise SendingError(mssg) from error
            raise EmailServiceError(mssg) from error
        except ValueError as error:
            raise EmailServiceError(f"Invalid message: {error}") from error
        except (TimeoutError, ConnectionError, TransportError) as error:
            raise NetworkError(f"Network error talking to Gmail: {error}") from error

        message_id = result.get("id")
        logger.info(f"[{message.kind}] sent to {redact_email(message.to)}. ID: {message_id}")
        return SendResult(provider=self.provider, message_id=message_id)

    async def send(self, message: OutboundEmail) -> SendResult:
        """Send without blocking the event loop."""
        loop = get_running_loop()
        return await loop.run_in_executor(None, self.send_sync, message)

    async def close(self) -> None:
        with self._service_lock:
            service, self._service = self._service, None
        if service is not None:
            cast(Any, service).close()
