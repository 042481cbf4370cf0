"""Mail sender that logs messages instead of delivering them."""

from collections import deque
from logging import getLogger
from uuid import uuid4

from content_api.clients.protocols import OutboundEmail, SendResult
from content_api.configs import file_logger, redact_email

logger = file_logger(getLogger(__name__))


class ConsoleEmailClient:
    """Development sender; every message is logged and reported as sent."""

    provider = "console"

    def __init__(self) -> None:
        self.sent: deque[OutboundEmail] = deque(maxlen=100)

    async def send(self, message: OutboundEmail) -> SendResult:
        self.sent.append(message)
        logger.info(
            f"[{message.kind}] to {redact_email(message.to)}: {message.subject}",
        )
        return SendResult(provider=self.provider, message_id=uuid4().hex)

    async def close(self) -> None:
        self.sent.clear()
