"""At-most-once-in-flight guard keyed by request id."""

import threading
from concurrent.futures import Future
from typing import Dict, Optional, Tuple

from courier.notifications.models import DispatchResult


class InFlightRegistry:
    """Tracks dispatches that are currently running.

    The first submit for a request id claims it and receives a Future it
    must complete. Concurrent submits for the same id receive the same
    Future and wait on it instead of sending again.

    Example:
        future, owner = inflight.claim(request.id)
        if not owner:
            return future.result()
        try:
            result = coordinator.dispatch(request)
        except Exception as e:
            inflight.fail(request.id, e)
            raise
        inflight.complete(request.id, result)
    """

    def __init__(self):
        self._futures: Dict[str, "Future[DispatchResult]"] = {}
        self._lock = threading.Lock()

    def claim(self, key: str) -> Tuple["Future[DispatchResult]", bool]:
        """Claim a key.

        Returns:
            (future, owner) where owner is True for the caller that must
            run the dispatch
        """
        with self._lock:
            existing = self._futures.get(key)
            if existing is not None:
                return existing, False
            future: "Future[DispatchResult]" = Future()
            self._futures[key] = future
            return future, True

    def complete(self, key: str, result: DispatchResult) -> None:
        future = self._release(key)
        if future is not None:
            future.set_result(result)

    def fail(self, key: str, error: BaseException) -> None:
        future = self._release(key)
        if future is not None:
            future.set_exception(error)

    def is_in_flight(self, key: str) -> bool:
        with self._lock:
            return key in self._futures

    def __len__(self) -> int:
        with self._lock:
            return len(self._futures)

    def _release(self, key: str) -> Optional["Future[DispatchResult]"]:
        with self._lock:
            return self._futures.pop(key, None)
