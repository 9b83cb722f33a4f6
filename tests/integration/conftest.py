"""Integration test fixtures: app instances wired to a fake upstream client."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.main import create_app


@pytest.fixture
def fake_upstream(create_gemini_payload):
    """Upstream client double; set ``generate.side_effect`` per test."""
    mock = AsyncMock(spec=BaseLLMClient)
    mock.generate = AsyncMock(return_value=create_gemini_payload("Hello from Gemini"))
    mock.close = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def build_client(test_settings, fake_upstream):
    """Factory fixture building a TestClient, optionally with overridden settings.
    
    Usage:
        def test_something(build_client):
            client = build_client(GEMINI_API_KEY=None)
    """
    def _build(**overrides) -> TestClient:
        settings = test_settings.model_copy(update=overrides) if overrides else test_settings
        app = create_app(settings, llm_client=fake_upstream)
        return TestClient(app)
    
    return _build


@pytest.fixture
def client(build_client) -> TestClient:
    return build_client()
