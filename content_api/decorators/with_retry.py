from collections.abc import Awaitable, Callable
from logging import getLogger
from typing import ParamSpec, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from content_api.configs import file_logger
from content_api.errors.email import TRANSIENT_EMAIL_ERRORS

logger = file_logger(getLogger(__name__))

P = ParamSpec("P")
T = TypeVar("T")


def _log_before_sleep(max_attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep_callback(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        sleep_duration = retry_state.next_action.sleep if retry_state.next_action else 0
        func_name = retry_state.fn.__name__ if retry_state.fn else "unknown"

        logger.warning(
            "Attempt %d/%d of %s failed, retrying in %.2fs: %s",
            retry_state.attempt_number,
            max_attempts,
            func_name,
            sleep_duration,
            exception,
        )

    return before_sleep_callback


def with_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exec_retry: tuple[type[Exception], ...] = TRANSIENT_EMAIL_ERRORS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async callable with exponential backoff using Tenacity.

    Only ``exec_retry`` exceptions are retried; the last exception is
    re-raised once ``max_attempts`` is reached.

    Args:
        max_attempts: Total attempts including the first one.
        base_delay: Initial delay between attempts in seconds.
        max_delay: Upper bound for a single delay in seconds.
        exec_retry: Exception types worth another attempt.

    Returns:
        Decorator applying the retry policy.
    """
    return retry(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_log_before_sleep(max_attempts),
        reraise=True,
    )
