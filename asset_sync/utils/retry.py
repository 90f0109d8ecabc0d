"""
Exponential backoff with jitter for re-attempting failed network requests.
"""

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """
    Timing rules for retrying a request.

    The delay before attempt ``n + 1`` grows as ``base_delay * 2 ** (n - 1)``,
    gets up to 50% random jitter added on top, and is then clamped to
    ``max_delay``. A request is tried at most ``max_attempts`` times in total.
    """

    base_delay: float = 3.0
    max_delay: float = 20.0
    max_attempts: int = 5
    jitter: bool = True

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Retry delays cannot be negative.")

    def compute_delay(self, failed_attempt: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt."""
        delay = self.base_delay * (2 ** (failed_attempt - 1))
        if self.jitter:
            delay += random.uniform(0, delay / 2)  # noqa: S311
        return min(delay, self.max_delay)

    def should_retry(self, failed_attempt: int) -> bool:
        return failed_attempt < self.max_attempts
