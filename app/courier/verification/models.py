"""Delivery tracking models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from courier.enums import DeliveryStatus
from courier.errors import InvalidTransitionError


class StatusEntry(BaseModel):
    """Value written to the delivery-status store by the upstream consumer.

    Attributes:
        status: Raw status string reported by the consumer
        timestamp: When the consumer observed the status
    """

    status: str
    timestamp: datetime


class DeliveryRecord(BaseModel):
    """Eventual delivery state of an async dispatch.

    Created PENDING when an async channel accepts a request. Only the
    verifier mutates it, and once the status leaves PENDING it is final.

    Attributes:
        notification_id: Id of the NotificationRequest
        status: PENDING, DELIVERED, FAILED or TIMED_OUT
        last_checked_at: When the store was last read
        trace_id: Acceptance id returned by the channel
        polls: Number of store reads performed
        detail: Raw status string or timeout note
    """

    notification_id: str
    status: DeliveryStatus = DeliveryStatus.PENDING
    last_checked_at: Optional[datetime] = None
    trace_id: Optional[str] = None
    polls: int = 0
    detail: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def record_poll(self, checked_at: datetime) -> None:
        self._ensure_pending()
        self.polls += 1
        self.last_checked_at = checked_at

    def transition(
        self,
        status: DeliveryStatus,
        checked_at: datetime,
        detail: Optional[str] = None,
    ) -> None:
        """Move to a terminal status.

        Raises:
            InvalidTransitionError: If the record is already terminal or the
                target status is PENDING
        """
        self._ensure_pending()
        if not status.is_terminal:
            raise InvalidTransitionError(
                f"Delivery record {self.notification_id} cannot move to {status.value}"
            )
        self.status = status
        self.last_checked_at = checked_at
        self.detail = detail

    def _ensure_pending(self) -> None:
        if self.is_terminal:
            raise InvalidTransitionError(
                f"Delivery record {self.notification_id} is already {self.status.value}"
            )
