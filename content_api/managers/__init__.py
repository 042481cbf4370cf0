from content_api.managers.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitState,
    build_mail_circuit_breaker,
)
from content_api.managers.metrics import MetricsManager, RequestTimer, metrics_manager
from content_api.managers.rate_limiter import (
    contact_limit,
    limiter,
    rate_limit_exceeded_handler,
    subscription_limit,
)

__all__ = [
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitState",
    "MetricsManager",
    "RequestTimer",
    "build_mail_circuit_breaker",
    "contact_limit",
    "limiter",
    "metrics_manager",
    "rate_limit_exceeded_handler",
    "subscription_limit",
]
