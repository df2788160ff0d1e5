"""Async delivery verification.

Usage:
    from courier.verification import (
        AsyncDeliveryVerifier,
        InMemoryDeliveryStatusStore,
    )

    store = InMemoryDeliveryStatusStore()
    verifier = AsyncDeliveryVerifier(store, poll_interval=2, default_deadline=20)
    record = verifier.verify("n-123")
"""

from courier.verification.models import DeliveryRecord, StatusEntry
from courier.verification.store import DeliveryStatusStore, InMemoryDeliveryStatusStore
from courier.verification.verifier import AsyncDeliveryVerifier, map_store_status

__all__ = [
    "AsyncDeliveryVerifier",
    "DeliveryRecord",
    "DeliveryStatusStore",
    "InMemoryDeliveryStatusStore",
    "StatusEntry",
    "map_store_status",
]
