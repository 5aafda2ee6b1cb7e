"""
Retry policy with exponential backoff and jitter.

Retry decisions read the error's `retryable` flag, never its message.
"""

import random
from dataclasses import dataclass
from enum import Enum

from huissier.domain.exceptions import HuissierException


class BackoffStrategy(str, Enum):
    """Backoff strategy for retries."""

    EXPONENTIAL = "exponential"
    CONSTANT = "constant"


@dataclass
class RetryPolicy:
    """Configuration for verification retries."""

    max_attempts: int = 3
    """Maximum number of attempts (including initial attempt)"""

    initial_delay: float = 0.5
    """Initial delay between attempts in seconds"""

    max_delay: float = 5.0
    """Maximum delay between attempts in seconds"""

    backoff_strategy: BackoffStrategy = BackoffStrategy.EXPONENTIAL
    """Backoff strategy: exponential or constant"""

    backoff_multiplier: float = 2.0
    """Multiplier for exponential backoff"""

    jitter: bool = True
    """Add random jitter to prevent thundering herd"""

    jitter_factor: float = 0.1
    """Jitter factor (0.0-1.0). 0.1 means +/-10% randomness"""

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def compute_delay(self, attempt: int) -> float:
        """
        Calculate delay after a failed attempt.

        Args:
            attempt: Failed attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        if self.backoff_strategy == BackoffStrategy.EXPONENTIAL:
            delay = self.initial_delay * (self.backoff_multiplier**attempt)
        else:
            delay = self.initial_delay

        delay = min(delay, self.max_delay)

        if self.jitter and delay > 0:
            jitter_range = delay * self.jitter_factor
            delay = max(0.0, delay + random.uniform(-jitter_range, jitter_range))

        return delay

    @staticmethod
    def should_retry(error: BaseException) -> bool:
        """True only for retryable domain errors."""
        return isinstance(error, HuissierException) and error.retryable
