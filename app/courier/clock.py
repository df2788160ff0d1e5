"""Time source used by the coordinator and the verifier.

Every sleep and elapsed-time measurement in the engine goes through a
Clock so that retry backoff and verification deadlines can be exercised
in tests without real waiting.
"""

import time
from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Monotonic time, wall time, and sleeping."""

    def monotonic(self) -> float:
        ...

    def now(self) -> datetime:
        ...

    def sleep(self, seconds: float) -> None:
        ...


class SystemClock:
    """Clock backed by the time module."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
