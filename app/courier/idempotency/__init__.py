"""Idempotency cache for settled dispatch results.

Usage:
    from courier.idempotency import InMemoryIdempotencyCache

    cache = InMemoryIdempotencyCache()
    cached = cache.get(request.id)
    if cached is None:
        result = coordinator.dispatch(request)
        cache.set(request.id, result.model_dump(mode="json"), ttl_seconds=3600)
"""

from courier.idempotency.cache import IdempotencyCache
from courier.idempotency.memory import InMemoryIdempotencyCache

__all__ = [
    "IdempotencyCache",
    "InMemoryIdempotencyCache",
]
