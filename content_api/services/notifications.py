"""
Background delivery of notification emails.

Request handlers call ``submit`` and return immediately. A fixed pool of
worker tasks drains a bounded queue, sending each message through the mail
circuit breaker with exponential-backoff retries. Messages that cannot be
queued or delivered are dead-lettered: logged with the recipient reduced to
its domain and counted. Nothing here ever raises into the request path.
"""

from asyncio import CancelledError, Queue, QueueFull, Task, create_task, gather, wait_for
from logging import getLogger
from typing import Any

from content_api.clients.protocols import MailSender, OutboundEmail, SendResult
from content_api.configs import file_logger, redact_email, settings
from content_api.decorators import with_retry
from content_api.errors.email import TRANSIENT_EMAIL_ERRORS
from content_api.managers.circuit_breaker import CircuitBreaker, build_mail_circuit_breaker
from content_api.managers.metrics import MetricsManager, metrics_manager

logger = file_logger(getLogger(__name__))


class NotificationDispatcher:
    """
    Bounded fire-and-forget email queue.

    Args:
        sender: The process-wide mail sender.
        maxsize: Queue capacity; ``submit`` dead-letters when full.
        workers: Number of concurrent delivery tasks.
        max_attempts: Delivery attempts per message for transient errors.
        base_delay: First backoff delay in seconds.
        max_delay: Backoff ceiling in seconds.
        drain_timeout: Seconds ``stop`` waits for queued messages.
        breaker: Circuit breaker guarding the provider.
        metrics: Metrics sink for email outcomes.
    """

    def __init__(
        self,
        sender: MailSender,
        *,
        maxsize: int = settings.EMAIL_QUEUE_MAXSIZE,
        workers: int = settings.EMAIL_WORKERS,
        max_attempts: int = settings.EMAIL_MAX_RETRIES,
        base_delay: float = settings.EMAIL_RETRY_BASE_DELAY,
        max_delay: float = settings.EMAIL_RETRY_MAX_DELAY,
        drain_timeout: float = settings.EMAIL_DRAIN_TIMEOUT,
        breaker: CircuitBreaker | None = None,
        metrics: MetricsManager | None = None,
    ) -> None:
        self.sender = sender
        self.maxsize = maxsize
        self.worker_count = max(1, workers)
        self.drain_timeout = drain_timeout
        self.metrics = metrics or metrics_manager
        self.breaker = breaker or build_mail_circuit_breaker(self.metrics)

        self._queue: Queue[OutboundEmail] | None = None
        self._workers: list[Task[None]] = []
        self._running = False
        self._send = with_retry(
            max_attempts=max_attempts,
            base_delay=base_delay,
            max_delay=max_delay,
            exec_retry=TRANSIENT_EMAIL_ERRORS,
        )(self._attempt)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    async def start(self) -> None:
        if self._running:
            return
        self._queue = Queue(maxsize=self.maxsize)
        self._workers = [
            create_task(self._worker(), name=f"email-worker-{index}")
            for index in range(self.worker_count)
        ]
        self._running = True
        logger.info(f"Notification dispatcher started with {self.worker_count} workers")

    def submit(self, message: OutboundEmail) -> bool:
        """
        Queue ``message`` without waiting for delivery.

        Returns:
            bool: ``False`` if the message was dead-lettered instead.
        """
        if not self._running or self._queue is None:
            self._dead_letter(message, "dispatcher is not running")
            return False
        try:
            self._queue.put_nowait(message)
        except QueueFull:
            self._dead_letter(message, "queue is full")
            return False
        return True

    async def stop(self) -> None:
        """Drain the queue within ``drain_timeout``, then cancel the workers."""
        if not self._running or self._queue is None:
            return
        self._running = False
        queue = self._queue

        try:
            await wait_for(queue.join(), timeout=self.drain_timeout)
        except TimeoutError:
            logger.warning(f"Email queue not drained within {self.drain_timeout}s")

        for worker in self._workers:
            worker.cancel()
        await gather(*self._workers, return_exceptions=True)
        self._workers = []

        while not queue.empty():
            self._dead_letter(queue.get_nowait(), "dispatcher stopped")
            queue.task_done()
        logger.info("Notification dispatcher stopped")

    async def _worker(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            message = await queue.get()
            try:
                await self._deliver(message)
            finally:
                queue.task_done()

    async def _deliver(self, message: OutboundEmail) -> None:
        try:
            result: SendResult = await self._send(message)
        except CancelledError:
            self._dead_letter(message, "cancelled during delivery")
            raise
        except Exception as e:  # noqa: BLE001
            self._dead_letter(message, f"{type(e).__name__}: {e}")
            return
        self.metrics.record_email("sent")
        logger.debug(f"[{message.kind}] delivered via {result.provider} ({result.message_id})")

    async def _attempt(self, message: OutboundEmail) -> SendResult:
        try:
            return await self.breaker.call(self.sender.send, message)
        except TRANSIENT_EMAIL_ERRORS:
            self.metrics.record_email("failed")
            raise

    def _dead_letter(self, message: OutboundEmail, reason: str) -> None:
        self.metrics.record_email("dead_lettered")
        logger.error(
            f"Dead-lettered [{message.kind}] email to {redact_email(message.to)}: {reason}",
        )

    def get_state(self) -> dict[str, Any]:
        return {
            "running": self._running,
            "pending": self.pending,
            "capacity": self.maxsize,
            "workers": len(self._workers),
        }
