from collections.abc import Awaitable, Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from content_api.managers.metrics import MetricsManager, RequestTimer

P = ParamSpec("P")
R = TypeVar("R")


def timed(
    endpoint: str | None = None,
    metrics: MetricsManager | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """
    Record call count, duration and errors of an async route handler.

    Args:
        endpoint: Metrics key (defaults to the function name).
        metrics: Optional metrics manager (defaults to the global one).

    Example:
        @timed("/blogs/list")
        async def list_blogs(...) -> ...:
            ...
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        key = endpoint or func.__name__

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            async with RequestTimer(key, metrics):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
