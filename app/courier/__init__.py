"""Courier: notification dispatch and delivery verification engine."""

from courier.configuration import Settings
from courier.errors import (
    ConfigurationError,
    CourierError,
    DeliveryFailedError,
    InvalidTransitionError,
    SchemaViolationError,
    TerminalSendError,
    TransientSendError,
    VerificationTimeoutError,
)
from courier.notifications import (
    Channel,
    DispatchResult,
    NotificationEngine,
    NotificationRequest,
    RequestMetadata,
    build_engine,
)

__all__ = [
    "Channel",
    "ConfigurationError",
    "CourierError",
    "DeliveryFailedError",
    "DispatchResult",
    "InvalidTransitionError",
    "NotificationEngine",
    "NotificationRequest",
    "RequestMetadata",
    "SchemaViolationError",
    "Settings",
    "TerminalSendError",
    "TransientSendError",
    "VerificationTimeoutError",
    "build_engine",
]
