"""Retry policy engine for channel sends.

Usage:
    from courier.resilience.retry import BackoffKind, RetryPolicy, RetryPolicyEngine

    engine = RetryPolicyEngine(RetryPolicy(max_attempts=5, base_delay=0.5))
    if engine.should_retry(attempt, result.status):
        clock.sleep(engine.next_delay(attempt))
"""

from courier.resilience.retry.policy import (
    BackoffKind,
    RetryPolicy,
    RetryPolicyEngine,
)

__all__ = [
    "BackoffKind",
    "RetryPolicy",
    "RetryPolicyEngine",
]
