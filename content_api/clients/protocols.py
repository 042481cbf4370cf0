"""Protocol and message types shared by the mail senders."""

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class OutboundEmail:
    """A provider-independent email ready to be sent."""

    to: str
    subject: str
    text: str
    html: str | None = None
    reply_to: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)

    @property
    def kind(self) -> str:
        """First tag, used to label logs and metrics."""
        return self.tags[0] if self.tags else "email"


@dataclass(frozen=True, slots=True)
class SendResult:
    provider: str
    message_id: str | None = None


@runtime_checkable
class MailSender(Protocol):
    """
    Anything able to deliver an ``OutboundEmail``.

    Implementations raise the ``EmailServiceError`` family on failure and
    are constructed once per process.
    """

    async def send(self, message: OutboundEmail) -> SendResult: ...

    async def close(self) -> None: ...
