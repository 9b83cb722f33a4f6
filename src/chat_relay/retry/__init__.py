"""
Bounded retry with backoff for upstream calls.

The engine is transport-agnostic: it runs any awaitable-returning
callable under a RetryPolicy (attempt ceiling, delay function,
retryable predicate) and keeps a transient RetryState per call.

Usage:
    >>> from chat_relay.retry import RetryEngine, RetryPolicy
    >>> engine = RetryEngine(RetryPolicy(max_attempts=3))
    >>> data = await engine.execute(lambda: client.generate(turns))
"""

from chat_relay.retry.engine import RetryEngine
from chat_relay.retry.metadata import RetryOutcome, RetryState
from chat_relay.retry.policy import RetryPolicy, is_retryable_relay_error, linear_backoff

__all__ = [
    "RetryEngine",
    "RetryOutcome",
    "RetryPolicy",
    "RetryState",
    "is_retryable_relay_error",
    "linear_backoff",
]
