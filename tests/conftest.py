"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from typing import Any, Dict

import pytest

from chat_relay.config import Settings
from chat_relay.exceptions import ErrorKind, RelayError
from chat_relay.models.chat_models import ConversationTurn
from chat_relay.models.enums import Role


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.
    
    Settings are frozen; derive variants with model_copy:
        def test_something(test_settings):
            settings = test_settings.model_copy(update={"GEMINI_API_KEY": None})
    """
    return Settings(
        _env_file=None,
        
        # === Application ===
        APP_NAME="Chat Relay (Test)",
        APP_VERSION="0.1.0",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        
        # === Upstream ===
        GEMINI_API_KEY="test-api-key",
        GEMINI_MODEL="gemini-1.5-flash",
        GEMINI_BASE_URL="https://gemini.test/v1beta",
        UPSTREAM_TIMEOUT=5.0,
        
        # === Retry ===
        RETRY_MAX_ATTEMPTS=3,
        RETRY_BASE_DELAY_MS=0,  # No real waiting in tests
        
        # === HTTP ===
        CLIENT_ORIGIN="http://localhost:5173, https://chat.example.com",
        MAX_BODY_BYTES=1024 * 1024,
        
        PROMETHEUS_ENABLED=False,  # Disable metrics in tests unless explicitly needed
    )


@pytest.fixture
def sample_turns() -> list[ConversationTurn]:
    """Short valid conversation."""
    return [
        ConversationTurn(role=Role.SYSTEM, content="You are a helpful assistant."),
        ConversationTurn(role=Role.USER, content="Hi!"),
        ConversationTurn(role=Role.MODEL, content="Hello, how can I help?"),
        ConversationTurn(role=Role.USER, content="Tell me a joke."),
    ]


@pytest.fixture
def create_gemini_payload():
    """Factory fixture to build a generateContent success body.
    
    Usage:
        def test_something(create_gemini_payload):
            data = create_gemini_payload("Hello", " world")
    """
    def _create(*texts: str) -> Dict[str, Any]:
        return {
            "candidates": [
                {
                    "content": {
                        "role": "model",
                        "parts": [{"text": text} for text in texts],
                    },
                    "finishReason": "STOP",
                }
            ]
        }
    
    return _create


@pytest.fixture
def overloaded_error() -> RelayError:
    """Retryable upstream capacity failure."""
    return RelayError(ErrorKind.OVERLOADED, "The model is overloaded.", upstream_status=503)
