"""Outbound clients: mail senders and the typed API client."""

from content_api.clients.console_client import ConsoleEmailClient
from content_api.clients.content_client import (
    ApiError,
    ApiNetworkError,
    ApiRequestError,
    ApiTimeoutError,
    ContentApiClient,
)
from content_api.clients.email_client import EmailClient
from content_api.clients.protocols import MailSender, OutboundEmail, SendResult
from content_api.configs import Settings, settings


def build_mail_sender(config: Settings = settings) -> MailSender:
    """Pick the sender for ``MAIL_PROVIDER``; built once per process."""
    if config.MAIL_PROVIDER == "gmail":
        return EmailClient(sender=str(config.MAIL_FROM))
    return ConsoleEmailClient()


__all__ = [
    "ApiError",
    "ApiNetworkError",
    "ApiRequestError",
    "ApiTimeoutError",
    "ConsoleEmailClient",
    "ContentApiClient",
    "EmailClient",
    "MailSender",
    "OutboundEmail",
    "SendResult",
    "build_mail_sender",
]
