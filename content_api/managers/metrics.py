"""
In-process metrics for the API and the notification pipeline.

Counters are guarded by a ``threading.Lock`` so they may be updated from
worker threads (the Gmail client runs in an executor) as well as the loop.
"""

from collections import defaultdict, deque
from dataclasses import dataclass, field
from logging import getLogger
from threading import Lock
from time import perf_counter
from types import TracebackType
from typing import Any, Self

from content_api.configs import file_logger

logger = file_logger(getLogger(__name__))

_MAX_RESPONSE_TIMES = 1000


@dataclass(slots=True)
class ResponseTimeStats:
    """Rolling window of response times with a running sum."""

    times: deque[float] = field(default_factory=lambda: deque(maxlen=_MAX_RESPONSE_TIMES))
    _sum: float = field(default=0.0, repr=False)

    def add(self, duration: float) -> None:
        if len(self.times) == self.times.maxlen:
            self._sum -= self.times[0]
        self.times.append(duration)
        self._sum += duration

    @property
    def average(self) -> float:
        return self._sum / len(self.times) if self.times else 0.0


class MetricsManager:
    """Thread-safe counters for requests, rate limiting and email delivery."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._request_counts: dict[str, int] = defaultdict(int)
        self._error_counts: dict[str, int] = defaultdict(int)
        self._response_times: dict[str, ResponseTimeStats] = defaultdict(ResponseTimeStats)
        self._email_counts: dict[str, int] = defaultdict(int)
        self._circuit_breaker_opens = 0
        self._rate_limit_hits = 0

    def record_request(self, endpoint: str) -> None:
        with self._lock:
            self._request_counts[endpoint] += 1

    def record_error(self, endpoint: str) -> None:
        with self._lock:
            self._error_counts[endpoint] += 1

    def record_response_time(self, endpoint: str, duration: float) -> None:
        with self._lock:
            self._response_times[endpoint].add(duration)

    def record_email(self, outcome: str) -> None:
        """
        Count one email outcome.

        Args:
            outcome: ``sent``, ``failed`` (one attempt) or ``dead_lettered``.
        """
        with self._lock:
            self._email_counts[outcome] += 1

    def record_circuit_breaker_open(self) -> None:
        with self._lock:
            self._circuit_breaker_opens += 1

    def record_rate_limit_hit(self) -> None:
        with self._lock:
            self._rate_limit_hits += 1

    def get_metrics(self) -> dict[str, Any]:
        with self._lock:
            return {
                "request_counts": dict(self._request_counts),
                "error_counts": dict(self._error_counts),
                "avg_response_times": {
                    endpoint: round(stats.average, 6)
                    for endpoint, stats in self._response_times.items()
                    if stats.times
                },
                "emails": dict(self._email_counts),
                "circuit_breaker_opens": self._circuit_breaker_opens,
                "rate_limit_hits": self._rate_limit_hits,
            }

    def reset_metrics(self) -> None:
        with self._lock:
            self._request_counts.clear()
            self._error_counts.clear()
            self._response_times.clear()
            self._email_counts.clear()
            self._circuit_breaker_opens = 0
            self._rate_limit_hits = 0
        logger.info("Metrics reset")


metrics_manager = MetricsManager()


class RequestTimer:
    """Async context manager timing one request into ``MetricsManager``."""

    __slots__ = ("_endpoint", "_metrics", "_start_time")

    def __init__(self, endpoint: str, metrics: MetricsManager | None = None) -> None:
        self._endpoint = endpoint
        self._start_time = 0.0
        self._metrics = metrics or metrics_manager

    async def __aenter__(self) -> Self:
        self._start_time = perf_counter()
        self._metrics.record_request(self._endpoint)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        self._metrics.record_response_time(self._endpoint, perf_counter() - self._start_time)
        if exc_type is not None:
            self._metrics.record_error(self._endpoint)
