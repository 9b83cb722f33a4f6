"""Unit test fixtures (mocks and stubs).

Provides mock objects for testing without external dependencies.
"""

import pytest
from unittest.mock import AsyncMock

from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.retry.engine import RetryEngine
from chat_relay.retry.policy import RetryPolicy, linear_backoff


@pytest.fixture
def recorded_sleeps() -> list[float]:
    """Delays passed to the fake sleep, in call order."""
    return []


@pytest.fixture
def fake_sleep(recorded_sleeps):
    """Sleep replacement that records delays instead of waiting."""
    async def _sleep(delay: float) -> None:
        recorded_sleeps.append(delay)
    
    return _sleep


@pytest.fixture
def retry_engine(fake_sleep) -> RetryEngine:
    """RetryEngine with the production policy (3 attempts, 0.6s linear) and no real waits."""
    return RetryEngine(
        RetryPolicy(max_attempts=3, delay=linear_backoff(0.6)),
        sleep=fake_sleep,
    )


@pytest.fixture
def mock_llm_client(create_gemini_payload):
    """Mock upstream client returning a single-candidate reply."""
    mock = AsyncMock(spec=BaseLLMClient)
    mock.generate = AsyncMock(return_value=create_gemini_payload("Why did the chicken cross the road?"))
    mock.close = AsyncMock(return_value=None)
    return mock
