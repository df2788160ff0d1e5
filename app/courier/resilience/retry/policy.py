"""Retry policy and backoff computation.

RetryPolicy is the immutable configuration bound to a dispatch;
RetryPolicyEngine answers the two questions the coordinator asks after
every failed attempt: should it try again, and how long should it wait.
The engine holds no per-request state and is shared across workers.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from courier.operations import OperationStatus

JITTER_RATIO = 0.2
# 2**30 seconds is decades; larger exponents only risk float overflow
MAX_BACKOFF_EXPONENT = 30


class BackoffKind(Enum):
    """Delay strategy between attempts.

    Values:
        FIXED: Constant delay every attempt
        EXPONENTIAL: base_delay * 2 ^ (attempt - 1)
    """

    FIXED = "fixed"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for send retries.

    Attributes:
        max_attempts: Maximum number of send attempts, including the first
        backoff_kind: FIXED or EXPONENTIAL
        base_delay: Base delay in seconds
        jitter: Spread exponential delays uniformly within +/-20%
        max_delay: Optional cap in seconds for exponential delays

    Example:
        policy = RetryPolicy(max_attempts=3, backoff_kind=BackoffKind.FIXED, base_delay=1)
    """

    max_attempts: int = 3
    backoff_kind: BackoffKind = BackoffKind.EXPONENTIAL
    base_delay: float = 1.0
    jitter: bool = False
    max_delay: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")
        if self.max_delay is not None and self.max_delay < self.base_delay:
            raise ValueError("max_delay must be >= base_delay")
        if not isinstance(self.backoff_kind, BackoffKind):
            raise ValueError(f"unknown backoff kind: {self.backoff_kind!r}")


class RetryPolicyEngine:
    """Decides whether and when a failed dispatch is re-attempted.

    Only TRANSIENT_ERROR outcomes are retried. Terminal failure classes
    (malformed payloads, auth failures, missing endpoints) are reported
    right away instead of burning the remaining attempts.

    Args:
        policy: RetryPolicy bound to the dispatch
        rng: Random source for jitter. Injected so tests can pin it.
    """

    def __init__(self, policy: RetryPolicy, rng: Optional[random.Random] = None):
        self.policy = policy
        self._rng = rng or random.Random()

    def next_delay(self, attempt_number: int) -> float:
        """Delay in seconds to wait after ``attempt_number`` failed.

        Args:
            attempt_number: 1-based number of the attempt that just failed

        Returns:
            Delay in seconds (never negative)
        """
        if attempt_number < 1:
            raise ValueError("attempt_number is 1-based")

        base = self.policy.base_delay
        if self.policy.backoff_kind == BackoffKind.FIXED:
            return base

        exponent = min(attempt_number - 1, MAX_BACKOFF_EXPONENT)
        delay = base * (2**exponent)
        if self.policy.jitter:
            delay *= self._rng.uniform(1 - JITTER_RATIO, 1 + JITTER_RATIO)
        if self.policy.max_delay is not None:
            delay = min(delay, self.policy.max_delay)
        return max(0.0, delay)

    def should_retry(self, attempt_number: int, last_outcome: OperationStatus) -> bool:
        """Whether another attempt should follow ``attempt_number``.

        Args:
            attempt_number: 1-based number of the attempt that just completed
            last_outcome: Classification of that attempt

        Returns:
            False once max_attempts is reached or the outcome is not retryable
        """
        if attempt_number >= self.policy.max_attempts:
            return False
        return last_outcome == OperationStatus.TRANSIENT_ERROR
