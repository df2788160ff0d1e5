"""Resilience patterns for the dispatch engine.

Holds the retry policy engine that governs send attempts.
"""

from courier.resilience.retry import BackoffKind, RetryPolicy, RetryPolicyEngine

__all__ = [
    "BackoffKind",
    "RetryPolicy",
    "RetryPolicyEngine",
]
