"""
Retry engine for upstream calls.

Runs an async operation up to ``policy.max_attempts`` times. Before each
attempt after the first it sleeps ``policy.delay(attempt_index)``.

    pending --(retryable error, attempts left)--> retry
    pending --(result)--> success
    pending --(non-retryable error)--> fatal       (raised immediately)
    pending --(retryable error, no attempts left)--> exhausted
                                                   (last error re-raised)

Usage:
    engine = RetryEngine(RetryPolicy.from_settings(settings))
    data = await engine.execute(lambda: client.generate(turns))
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import structlog

from chat_relay.exceptions import RelayError
from chat_relay.monitoring.metrics import retries_total
from chat_relay.retry.metadata import RetryOutcome, RetryState
from chat_relay.retry.policy import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _error_kind(error: BaseException) -> str:
    if isinstance(error, RelayError):
        return error.kind.value
    return type(error).__name__


class RetryEngine:
    """
    Stateless retry executor; safe to share across concurrent requests.

    Attributes:
        policy: Attempt ceiling, delay function and retryable predicate
        sleep: Coroutine used for backoff (swapped out in tests)
    """

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.policy = policy
        self.sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        state: Optional[RetryState] = None,
    ) -> T:
        """
        Run ``operation`` under the retry policy.

        Args:
            operation: Zero-argument callable returning a fresh awaitable
            state: Optional RetryState to record progress into; a new
                one is used when omitted

        Returns:
            The operation's result

        Raises:
            The first non-retryable error, or the last retryable error once
            attempts are exhausted
        """
        if state is None:
            state = RetryState()

        for attempt_index in range(self.policy.max_attempts):
            state.attempt_index = attempt_index

            if attempt_index > 0:
                delay = self.policy.delay(attempt_index)
                logger.info(
                    "Retrying upstream call",
                    attempt=attempt_index + 1,
                    max_attempts=self.policy.max_attempts,
                    delay_s=delay,
                    previous_error=_error_kind(state.last_error),
                )
                await self.sleep(delay)

            try:
                result = await operation()
            except Exception as e:
                state.last_error = e

                if not self.policy.is_retryable(e):
                    state.outcome = RetryOutcome.FATAL
                    logger.warning(
                        "Upstream call failed with non-retryable error",
                        attempt=attempt_index + 1,
                        error_kind=_error_kind(e),
                    )
                    raise

                if attempt_index + 1 >= self.policy.max_attempts:
                    state.outcome = RetryOutcome.EXHAUSTED
                    logger.error(
                        "Retry attempts exhausted",
                        attempts=attempt_index + 1,
                        error_kind=_error_kind(e),
                    )
                    raise

                retries_total.labels(kind=_error_kind(e)).inc()
                logger.warning(
                    "Retryable upstream failure",
                    attempt=attempt_index + 1,
                    error_kind=_error_kind(e),
                    error=str(e),
                )
                continue

            state.outcome = RetryOutcome.SUCCESS
            if attempt_index > 0:
                logger.info("Upstream call succeeded after retry", attempts=attempt_index + 1)
            return result

        # max_attempts >= 1 is enforced by RetryPolicy
        raise RuntimeError("retry loop exited without a result")
