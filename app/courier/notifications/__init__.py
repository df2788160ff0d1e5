"""Notification dispatch.

Usage:
    from courier.notifications import Channel, NotificationRequest, build_engine

    engine = build_engine(settings)
    result = engine.submit(
        NotificationRequest(id="n-1", channel=Channel.JIRA, payload={"summary": "Disk full"})
    )
"""

from courier.notifications.models import (
    AckMode,
    AttemptOutcome,
    Channel,
    DeliveryRecord,
    DeliveryStatus,
    DispatchAttempt,
    DispatchResult,
    DispatchState,
    ErrorDetail,
    NotificationRequest,
    RequestMetadata,
    SendResult,
    SettlementOutcome,
)
from courier.notifications.state import DispatchStateMachine
from courier.notifications.coordinator import DispatchCoordinator
from courier.notifications.inflight import InFlightRegistry
from courier.notifications.engine import NotificationEngine, build_engine

__all__ = [
    "AckMode",
    "AttemptOutcome",
    "Channel",
    "DeliveryRecord",
    "DeliveryStatus",
    "DispatchAttempt",
    "DispatchCoordinator",
    "DispatchResult",
    "DispatchState",
    "DispatchStateMachine",
    "ErrorDetail",
    "InFlightRegistry",
    "NotificationEngine",
    "NotificationRequest",
    "RequestMetadata",
    "SendResult",
    "SettlementOutcome",
    "build_engine",
]
