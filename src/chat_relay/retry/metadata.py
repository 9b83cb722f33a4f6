"""
Retry state tracking.

RetryState lives for a single RetryEngine.execute() call and is never
shared between requests.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RetryOutcome(str, Enum):
    """Lifecycle of one retried call: pending -> success | fatal | exhausted."""
    
    PENDING = "pending"
    SUCCESS = "success"
    FATAL = "fatal"
    EXHAUSTED = "exhausted"


@dataclass
class RetryState:
    """
    Attributes:
        attempt_index: 0-based index of the current attempt
        last_error: Most recent failure, if any
        outcome: Current lifecycle state
    """
    
    attempt_index: int = 0
    last_error: Optional[BaseException] = None
    outcome: RetryOutcome = RetryOutcome.PENDING
    
    @property
    def attempts_made(self) -> int:
        return self.attempt_index + 1
    
    @property
    def finished(self) -> bool:
        return self.outcome is not RetryOutcome.PENDING
