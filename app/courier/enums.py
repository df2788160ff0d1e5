"""Enumerations shared across the engine.

Kept in a leaf module so contracts, verification and notifications can
all depend on them without importing each other.
"""

from enum import Enum


class Channel(Enum):
    """Target notification platform."""

    SLACK = "slack"
    JIRA = "jira"
    EMAIL = "email"
    WEBHOOK = "webhook"
    S3 = "s3"
    SERVICENOW = "servicenow"


class AckMode(Enum):
    """How a channel acknowledges a send.

    SYNCHRONOUS channels confirm delivery in the send response.
    ASYNCHRONOUS channels only acknowledge acceptance; delivery is
    confirmed later through the delivery-status store.
    """

    SYNCHRONOUS = "synchronous"
    ASYNCHRONOUS = "asynchronous"


class AttemptOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class DeliveryStatus(Enum):
    """Eventual delivery state tracked by a DeliveryRecord.

    PENDING is the only non-terminal value.
    """

    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self != DeliveryStatus.PENDING


class DispatchState(Enum):
    """Lifecycle state of a single dispatch."""

    CREATED = "created"
    SENDING = "sending"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    AWAITING_VERIFICATION = "awaiting_verification"
    SETTLED = "settled"


class SettlementOutcome(Enum):
    SUCCESS = "success"
    FAILURE = "failure"
