"""Async delivery verifier.

Asynchronous channels only acknowledge acceptance. Actual delivery is
recorded later by an upstream consumer in the delivery-status store, so
the verifier polls that store at a fixed interval until it sees a
terminal status or the deadline elapses. The loop is bounded: a caller
always gets a terminal DeliveryRecord within deadline + poll_interval.
"""

from typing import List, Optional

from courier.clock import Clock, SystemClock
from courier.enums import DeliveryStatus
from courier.logging import get_module_logger
from courier.verification.models import DeliveryRecord, StatusEntry
from courier.verification.store import DeliveryStatusStore

logger = get_module_logger()

DELIVERED_STATUSES = frozenset({"delivered", "sent", "success", "completed", "resolved"})
FAILED_STATUSES = frozenset({"failed", "rejected", "bounced", "error", "cancelled"})


def map_store_status(raw_status: str) -> DeliveryStatus:
    """Map a raw store status string to a DeliveryStatus (case-insensitive).

    Unrecognized values are treated as still pending.
    """
    normalized = (raw_status or "").strip().lower()
    if normalized in DELIVERED_STATUSES:
        return DeliveryStatus.DELIVERED
    if normalized in FAILED_STATUSES:
        return DeliveryStatus.FAILED
    return DeliveryStatus.PENDING


class AsyncDeliveryVerifier:
    """Bounded polling of the delivery-status store.

    Attributes:
        store: Read-only DeliveryStatusStore
        poll_interval: Seconds between store reads
        default_deadline: Deadline used when verify() is called without one
        clock: Time source for sleeping and elapsed time

    Example:
        verifier = AsyncDeliveryVerifier(store, poll_interval=2, default_deadline=20)
        record = verifier.verify("n-123", trace_id="OPS-42")
        if record.status == DeliveryStatus.TIMED_OUT:
            ...
    """

    def __init__(
        self,
        store: DeliveryStatusStore,
        poll_interval: float = 2.0,
        default_deadline: float = 20.0,
        clock: Optional[Clock] = None,
    ):
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        if default_deadline < 0:
            raise ValueError("default_deadline must not be negative")
        self.store = store
        self.poll_interval = poll_interval
        self.default_deadline = default_deadline
        self.clock = clock or SystemClock()

    def verify(
        self,
        notification_id: str,
        deadline: Optional[float] = None,
        trace_id: Optional[str] = None,
    ) -> DeliveryRecord:
        """Poll until the delivery status is terminal or the deadline elapses.

        The store is read immediately, then every poll_interval. The last
        sleep is shortened to the time left so the final read happens at
        the deadline.

        Args:
            notification_id: Id of the accepted NotificationRequest
            deadline: Seconds to wait for a terminal status
            trace_id: Acceptance id returned by the channel, checked first

        Returns:
            DeliveryRecord with status DELIVERED, FAILED or TIMED_OUT
        """
        deadline = self.default_deadline if deadline is None else deadline
        if deadline < 0:
            raise ValueError("deadline must not be negative")

        record = DeliveryRecord(notification_id=notification_id, trace_id=trace_id)
        keys = self._lookup_keys(notification_id, trace_id)
        started = self.clock.monotonic()

        logger.info(
            "delivery_verification_started",
            notification_id=notification_id,
            trace_id=trace_id,
            deadline_seconds=deadline,
            poll_interval_seconds=self.poll_interval,
        )

        while True:
            entry = self._read(keys)
            checked_at = self.clock.now()
            record.record_poll(checked_at)

            if entry is not None:
                status = map_store_status(entry.status)
                if status.is_terminal:
                    record.transition(status, checked_at, detail=entry.status)
                    logger.info(
                        "delivery_verification_completed",
                        notification_id=notification_id,
                        status=status.value,
                        polls=record.polls,
                        elapsed_seconds=self.clock.monotonic() - started,
                    )
                    return record
                logger.debug(
                    "delivery_status_pending",
                    notification_id=notification_id,
                    raw_status=entry.status,
                    polls=record.polls,
                )

            remaining = deadline - (self.clock.monotonic() - started)
            if remaining <= 0:
                record.transition(
                    DeliveryStatus.TIMED_OUT,
                    checked_at,
                    detail=f"No terminal status after {deadline}s",
                )
                logger.warning(
                    "delivery_verification_timed_out",
                    notification_id=notification_id,
                    trace_id=trace_id,
                    polls=record.polls,
                    deadline_seconds=deadline,
                )
                return record

            self.clock.sleep(min(self.poll_interval, remaining))

    @staticmethod
    def _lookup_keys(notification_id: str, trace_id: Optional[str]) -> List[str]:
        keys = []
        for key in (trace_id, notification_id):
            if key and key not in keys:
                keys.append(key)
        return keys

    def _read(self, keys: List[str]) -> Optional[StatusEntry]:
        for key in keys:
            try:
                entry = self.store.get(key)
            except Exception as e:
                # A failed read counts as "not yet observed"; the deadline still bounds the loop
                logger.warning(
                    "delivery_status_read_failed",
                    key=key,
                    error=str(e),
                )
                continue
            if entry is not None:
                return entry
        return None
