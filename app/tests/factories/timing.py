"""Manual clock and eventually consistent status store for timing tests."""

import threading
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from courier.verification import StatusEntry


class ManualClock:
    """Clock whose time only moves when slept on or advanced."""

    def __init__(self, start: Optional[datetime] = None):
        self._start = start or datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        self._elapsed = 0.0
        self.sleeps: List[float] = []
        self._lock = threading.Lock()

    def monotonic(self) -> float:
        with self._lock:
            return self._elapsed

    def now(self) -> datetime:
        return self._start + timedelta(seconds=self.monotonic())

    def sleep(self, seconds: float) -> None:
        with self._lock:
            self.sleeps.append(seconds)
            self._elapsed += max(0.0, seconds)

    def advance(self, seconds: float) -> None:
        with self._lock:
            self._elapsed += seconds


class TimedStatusStore:
    """Delivery-status store whose entries become visible at a clock time.

    ``publish_at(key, 6, "delivered")`` makes the status readable once the
    clock reaches t=6, the way a queue consumer lands a write some time
    after the channel accepted the request.
    """

    def __init__(self, clock: ManualClock):
        self.clock = clock
        self.reads: List[str] = []
        self._scheduled: Dict[str, List[Tuple[float, str]]] = {}
        self._lock = threading.Lock()

    def publish_at(self, key: str, at: float, status: str) -> None:
        with self._lock:
            entries = self._scheduled.setdefault(key, [])
            entries.append((at, status))
            entries.sort(key=lambda item: item[0])

    def get(self, key: str) -> Optional[StatusEntry]:
        now = self.clock.monotonic()
        with self._lock:
            self.reads.append(key)
            visible = [s for at, s in self._scheduled.get(key, []) if at <= now]
        if not visible:
            return None
        return StatusEntry(status=visible[-1], timestamp=self.clock.now())
