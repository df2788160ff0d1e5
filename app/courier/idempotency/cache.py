"""Idempotency cache abstract base class."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IdempotencyCache(ABC):
    """Abstract base class for idempotency cache implementations.

    Holds the settled result of a dispatch, keyed by request id, so a
    caller retrying the same submit gets the original result instead of
    a second send.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get the cached result for a key.

        Args:
            key: Idempotency key (the request id).

        Returns:
            Cached result dict or None if not found/expired.
        """
        pass

    @abstractmethod
    def set(self, key: str, response: Dict[str, Any], ttl_seconds: int) -> None:
        """Cache a result for the given key.

        Args:
            key: Idempotency key.
            response: JSON-compatible result dict.
            ttl_seconds: Time-to-live in seconds.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all cached entries."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with cache statistics (implementation-specific).
        """
        pass
