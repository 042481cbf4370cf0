"""
Circuit breaker for the outbound mail provider.

After ``failure_threshold`` consecutive failures the circuit opens and
deliveries fail fast with ``CircuitBreakerError`` until ``recovery_timeout``
has elapsed. Half-open admits one trial call at a time; callers arriving
while it is in flight are rejected like an open circuit.
"""

from asyncio import Lock
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from logging import getLogger
from time import monotonic
from typing import TYPE_CHECKING, Any

from content_api.configs import file_logger
from content_api.errors import CircuitBreakerError, EmailServiceError

if TYPE_CHECKING:
    from content_api.managers.metrics import MetricsManager

logger = file_logger(getLogger(__name__))


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass
class CircuitBreakerConfig:
    name: str = "default"
    failure_threshold: int = 5
    recovery_timeout: float = 60.0
    expected_exceptions: tuple[type[Exception], ...] = (Exception,)
    success_threshold: int = 1
    metrics_manager: "MetricsManager | None" = None


class CircuitBreaker:
    """
    Async-safe circuit breaker.

    Only ``expected_exceptions`` count as failures; anything else passes
    through without touching the state.
    """

    def __init__(self, config: CircuitBreakerConfig) -> None:
        self.name = config.name
        self.failure_threshold = config.failure_threshold
        self.recovery_timeout = config.recovery_timeout
        self.expected_exceptions = config.expected_exceptions
        self.success_threshold = config.success_threshold
        self.metrics_manager = config.metrics_manager

        self._failure_count = 0
        self._half_open_successes = 0
        self._opened_at: float | None = None
        self._trial_in_flight = False
        self._state = CircuitState.CLOSED
        self._lock = Lock()

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failure_count

    async def call[T](
        self,
        func: Callable[..., Awaitable[T]],
        *args: Any,  # noqa: ANN401
        **kwargs: Any,  # noqa: ANN401
    ) -> T:
        """
        Run ``func`` under the breaker.

        Raises:
            CircuitBreakerError: If the circuit is open.
            Exception: Whatever ``func`` raised.
        """
        async with self._lock:
            trial = self._before_call()

        try:
            result = await func(*args, **kwargs)
        except self.expected_exceptions:
            await self._on_failure()
            raise
        else:
            await self._on_success()
            return result
        finally:
            if trial:
                self._trial_in_flight = False

    def _before_call(self) -> bool:
        """Admit or reject a call; return whether it is the half-open trial."""
        if self._state is CircuitState.CLOSED:
            return False
        if self._state is CircuitState.OPEN:
            retry_after = self._time_until_reset()
            if retry_after > 0:
                raise self._rejection(retry_after)
            self._state = CircuitState.HALF_OPEN
            self._half_open_successes = 0
            logger.info(f"Circuit breaker '{self.name}' entering HALF_OPEN state")
        elif self._trial_in_flight:
            raise self._rejection(0.0)
        self._trial_in_flight = True
        return True

    def _rejection(self, retry_after: float) -> CircuitBreakerError:
        return CircuitBreakerError(
            detail=f"Service '{self.name}' temporarily unavailable",
            retry_after=retry_after,
            circuit_name=self.name,
        )

    def _time_until_reset(self) -> float:
        if self._opened_at is None:
            return 0.0
        return max(0.0, self.recovery_timeout - (monotonic() - self._opened_at))

    async def _on_success(self) -> None:
        async with self._lock:
            if self._state is CircuitState.HALF_OPEN:
                self._half_open_successes += 1
                if self._half_open_successes < self.success_threshold:
                    return
                self._state = CircuitState.CLOSED
                logger.info(f"Circuit breaker '{self.name}' recovered, now CLOSED")
            self._failure_count = 0

    async def _on_failure(self) -> None:
        async with self._lock:
            self._failure_count += 1
            if self._state is CircuitState.HALF_OPEN or (
                self._state is CircuitState.CLOSED
                and self._failure_count >= self.failure_threshold
            ):
                self._open()

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = monotonic()
        self._half_open_successes = 0
        logger.error(
            f"Circuit breaker '{self.name}' OPENED after {self._failure_count} consecutive failures",
        )
        if self.metrics_manager is not None:
            self.metrics_manager.record_circuit_breaker_open()

    async def reset(self) -> None:
        async with self._lock:
            self._failure_count = 0
            self._half_open_successes = 0
            self._opened_at = None
            self._trial_in_flight = False
            self._state = CircuitState.CLOSED

    def get_state(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "state": self._state.value,
            "failure_count": self._failure_count,
            "failure_threshold": self.failure_threshold,
            "time_until_reset": (
                self._time_until_reset() if self._state is CircuitState.OPEN else 0.0
            ),
        }


def build_mail_circuit_breaker(metrics_manager: "MetricsManager | None" = None) -> CircuitBreaker:
    return CircuitBreaker(
        CircuitBreakerConfig(
            name="mail_provider",
            failure_threshold=3,
            recovery_timeout=30.0,
            expected_exceptions=(EmailServiceError, ConnectionError, TimeoutError),
            metrics_manager=metrics_manager,
        ),
    )
