"""Dispatch, retry and verification settings."""

from typing import Optional

from pydantic import Field, field_validator

from courier.configuration.base import CourierSettings
from courier.resilience.retry.policy import BackoffKind, RetryPolicy


class DispatchSettings(CourierSettings):
    """Retry policy, verification and worker pool configuration.

    Environment Variables:
        COURIER_MAX_ATTEMPTS: Maximum send attempts per request (default: 3)
        COURIER_BACKOFF_KIND: FIXED or EXPONENTIAL (default: EXPONENTIAL)
        COURIER_BASE_DELAY_SECONDS: Base retry delay (default: 1.0)
        COURIER_MAX_DELAY_SECONDS: Optional cap on exponential delay
        COURIER_JITTER: Apply +/-20% jitter to exponential delays (default: True)
        COURIER_POLL_INTERVAL_SECONDS: Delivery-status poll interval (default: 2.0)
        COURIER_VERIFY_DEADLINE_SECONDS: Verification deadline (default: 20.0)
        COURIER_MAX_WORKERS: Parallel dispatch workers (default: 4)
        COURIER_REQUEST_TIMEOUT_SECONDS: HTTP timeout per channel call (default: 10.0)
        COURIER_IDEMPOTENCY_TTL_SECONDS: How long settled results are reused
            for a repeated request id; 0 disables caching (default: 3600)

    Exponential Backoff:
        Delay calculation: base_delay * 2 ^ (attempt - 1)

        Example with base=1s:
            Attempt 1 failed: wait 1s
            Attempt 2 failed: wait 2s
            Attempt 3 failed: wait 4s
    """

    max_attempts: int = Field(
        default=3,
        alias="COURIER_MAX_ATTEMPTS",
        description="Maximum send attempts per request",
    )
    backoff_kind: BackoffKind = Field(
        default=BackoffKind.EXPONENTIAL,
        alias="COURIER_BACKOFF_KIND",
        description="Backoff strategy: FIXED or EXPONENTIAL",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        alias="COURIER_BASE_DELAY_SECONDS",
        description="Base delay between attempts (seconds)",
    )
    max_delay_seconds: Optional[float] = Field(
        default=None,
        alias="COURIER_MAX_DELAY_SECONDS",
        description="Optional cap on the exponential delay (seconds)",
    )
    jitter: bool = Field(
        default=True,
        alias="COURIER_JITTER",
        description="Jitter exponential delays by +/-20%",
    )
    poll_interval_seconds: float = Field(
        default=2.0,
        alias="COURIER_POLL_INTERVAL_SECONDS",
        description="Delivery-status store poll interval (seconds)",
    )
    verify_deadline_seconds: float = Field(
        default=20.0,
        alias="COURIER_VERIFY_DEADLINE_SECONDS",
        description="Deadline for async delivery confirmation (seconds)",
    )
    max_workers: int = Field(
        default=4,
        alias="COURIER_MAX_WORKERS",
        description="Parallel dispatch workers for batch submission",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        alias="COURIER_REQUEST_TIMEOUT_SECONDS",
        description="HTTP timeout per channel call (seconds)",
    )
    idempotency_ttl_seconds: int = Field(
        default=3600,
        alias="COURIER_IDEMPOTENCY_TTL_SECONDS",
        description="TTL for cached settled results (seconds, 0 disables)",
    )

    @field_validator("backoff_kind", mode="before")
    @classmethod
    def normalize_backoff_kind(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("poll_interval_seconds")
    @classmethod
    def validate_poll_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("poll interval must be positive")
        return v

    @field_validator("verify_deadline_seconds", "request_timeout_seconds")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("value must not be negative")
        return v

    @field_validator("max_attempts")
    @classmethod
    def validate_max_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_attempts must be at least 1")
        return v

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_workers must be at least 1")
        return v

    def retry_policy(self) -> RetryPolicy:
        """Build the immutable RetryPolicy bound to each dispatch."""
        return RetryPolicy(
            max_attempts=self.max_attempts,
            backoff_kind=self.backoff_kind,
            base_delay=self.base_delay_seconds,
            jitter=self.jitter,
            max_delay=self.max_delay_seconds,
        )
