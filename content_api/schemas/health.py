"""Health check response models."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class CircuitBreakerStatus(BaseModel):
    name: str
    state: str
    failure_count: int
    failure_threshold: int
    time_until_reset: float


class EmailQueueStatus(BaseModel):
    running: bool
    pending: int
    capacity: int
    workers: int


class ServicesStatus(BaseModel):
    """Services status model for health check."""

    database: Literal["connected", "disconnected"]
    email_circuit_breaker: CircuitBreakerStatus | None = None
    email_queue: EmailQueueStatus | None = None


class HealthCheckResponse(BaseModel):
    success: Literal[True] = True
    message: str = "Server is running"
    timestamp: str = Field(description="Current timestamp")
    services: ServicesStatus = Field(description="Status of dependent services")
    metrics: dict[str, Any] = Field(default_factory=dict, description="API counters")
