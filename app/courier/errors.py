"""Custom exceptions for the dispatch engine.

Provides the error taxonomy used to classify why a notification did not
settle successfully. Only TransientSendError is recovered locally (by
retrying); every other kind is reported to the caller inside a
DispatchResult rather than raised.
"""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from courier.contracts.models import Violation


class CourierError(Exception):
    """Base exception for all dispatch engine errors.

    Attributes:
        message: human-friendly message
        code: machine error code carried into ErrorDetail
    """

    retryable = False
    default_code = "COURIER_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    @property
    def kind(self) -> str:
        return type(self).__name__


class TransientSendError(CourierError):
    """Network or 5xx failure; retryable per policy."""

    retryable = True
    default_code = "TRANSIENT_SEND_ERROR"


class TerminalSendError(CourierError):
    """4xx or malformed payload/response; never retried."""

    default_code = "TERMINAL_SEND_ERROR"


class SchemaViolationError(CourierError):
    """Payload failed contract validation and bypass was not requested.

    Example:
        >>> raise SchemaViolationError.from_violations(violations)
        Traceback (most recent call last):
        ...
        SchemaViolationError: Payload violates contract: /text: missing required field
    """

    default_code = "SCHEMA_VIOLATION"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        violations: Optional[List["Violation"]] = None,
    ):
        super().__init__(message, code)
        self.violations = violations or []

    @classmethod
    def from_violations(cls, violations: List["Violation"]) -> "SchemaViolationError":
        summary = "; ".join(f"{v.path or '/'}: {v.reason}" for v in violations)
        return cls(f"Payload violates contract: {summary}", violations=violations)


class VerificationTimeoutError(CourierError):
    """Async delivery confirmation did not arrive before the deadline."""

    default_code = "VERIFICATION_TIMEOUT"


class DeliveryFailedError(CourierError):
    """The delivery-status store reported an explicit negative acknowledgment."""

    default_code = "DELIVERY_FAILED"


class ConfigurationError(CourierError):
    """Missing schema, adapter, or policy binding. Fatal, never retried."""

    default_code = "CONFIGURATION_ERROR"


class InvalidTransitionError(CourierError):
    """A state machine was asked to move along an edge it does not have."""

    default_code = "INVALID_TRANSITION"
