"""Classified outcome of a channel call or health check.

Every HTTP response and transport failure a channel adapter sees is turned
into an OperationResult first, so that the retry decision is made from the
status alone and never from raw status codes.
"""

from dataclasses import dataclass, replace
from typing import Any, Optional

from courier.operations.status import OperationStatus


@dataclass(frozen=True)
class OperationResult:
    """Classified outcome.

    Attributes:
        status: Classification driving the retry decision
        message: Human-friendly message for logs and ErrorDetail
        data: Extra detail (health check data, parsed bodies)
        error_code: Machine error code, None on success
        retry_after: Seconds the platform asked callers to wait
        http_status: Status code the classification was made from
    """

    status: OperationStatus
    message: str
    data: Optional[Any] = None
    error_code: Optional[str] = None
    retry_after: Optional[int] = None
    http_status: Optional[int] = None

    @property
    def is_success(self) -> bool:
        return self.status == OperationStatus.SUCCESS

    @property
    def is_retryable(self) -> bool:
        return self.status == OperationStatus.TRANSIENT_ERROR

    def with_http_status(self, http_status: int) -> "OperationResult":
        return replace(self, http_status=http_status)

    @classmethod
    def success(cls, data: Optional[Any] = None, message: str = "ok") -> "OperationResult":
        return cls(status=OperationStatus.SUCCESS, message=message, data=data)

    @classmethod
    def transient_error(
        cls,
        message: str,
        error_code: Optional[str] = None,
        retry_after: Optional[int] = None,
    ) -> "OperationResult":
        """Failure worth another attempt: timeouts, rate limits, 5xx."""
        return cls(
            status=OperationStatus.TRANSIENT_ERROR,
            message=message,
            error_code=error_code,
            retry_after=retry_after,
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None
    ) -> "OperationResult":
        """Failure that repeats on every attempt: rejected payloads,
        malformed acceptance bodies, unusable requests."""
        return cls(
            status=OperationStatus.PERMANENT_ERROR,
            message=message,
            error_code=error_code,
        )

    @classmethod
    def unauthorized(
        cls, message: str, error_code: str = "UNAUTHORIZED"
    ) -> "OperationResult":
        return cls(
            status=OperationStatus.UNAUTHORIZED, message=message, error_code=error_code
        )

    @classmethod
    def not_found(cls, message: str) -> "OperationResult":
        return cls(
            status=OperationStatus.NOT_FOUND, message=message, error_code="NOT_FOUND"
        )

    @classmethod
    def not_configured(cls, channel_name: str) -> "OperationResult":
        """Channel has no endpoint in ChannelSettings."""
        return cls.permanent_error(
            f"Channel {channel_name} is not configured",
            error_code="NOT_CONFIGURED",
        )
