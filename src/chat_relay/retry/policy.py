"""
Retry policy: how many attempts, how long to wait, what to retry.
"""

from dataclasses import dataclass, field
from typing import Callable

from chat_relay.exceptions import RelayError


def linear_backoff(base_delay: float) -> Callable[[int], float]:
    """
    Delay function ``base_delay * attempt_index``.
    
    ``attempt_index`` is the 0-based index of the attempt about to run,
    so with a 0.6s base the waits are 0.6s before the second attempt and
    1.2s before the third.
    """
    def delay(attempt_index: int) -> float:
        return base_delay * attempt_index
    
    return delay


def is_retryable_relay_error(error: BaseException) -> bool:
    """Retry OVERLOADED and TRANSPORT relay errors, nothing else."""
    return isinstance(error, RelayError) and error.retryable


@dataclass(frozen=True)
class RetryPolicy:
    """
    Attributes:
        max_attempts: Total attempts including the first one
        delay: Seconds to wait before attempt ``attempt_index`` (>= 1)
        is_retryable: Predicate deciding whether an error may be retried
    """
    
    max_attempts: int = 3
    delay: Callable[[int], float] = field(default_factory=lambda: linear_backoff(0.6))
    is_retryable: Callable[[BaseException], bool] = is_retryable_relay_error
    
    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
    
    @classmethod
    def from_settings(cls, settings) -> "RetryPolicy":
        """Build the upstream policy from RETRY_* settings."""
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            delay=linear_backoff(settings.RETRY_BASE_DELAY_MS / 1000.0),
        )
