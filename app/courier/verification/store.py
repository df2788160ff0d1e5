"""Delivery-status store interface and in-memory implementation.

The store is written by the upstream consumer (for example a message
queue consumer recording provider callbacks) and only read by the
verifier.
"""

import threading
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from courier.logging import get_module_logger
from courier.verification.models import StatusEntry

logger = get_module_logger()


class DeliveryStatusStore(Protocol):
    """Read interface used by the verifier.

    Keys are trace ids or notification ids.
    """

    def get(self, key: str) -> Optional[StatusEntry]:
        """Return the latest status entry for a key, or None if absent."""
        ...


class InMemoryDeliveryStatusStore:
    """Thread-safe in-memory delivery-status store.

    ``publish`` is the writer side used by the consumer simulation and by
    tests; the verifier only calls ``get``.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, StatusEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[StatusEntry]:
        with self._lock:
            return self._entries.get(key)

    def publish(
        self, key: str, status: str, timestamp: Optional[datetime] = None
    ) -> StatusEntry:
        entry = StatusEntry(
            status=status, timestamp=timestamp or datetime.now(timezone.utc)
        )
        with self._lock:
            self._entries[key] = entry
        logger.debug("delivery_status_published", key=key, status=status)
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
