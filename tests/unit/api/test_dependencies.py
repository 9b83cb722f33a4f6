"""
Unit tests for API dependency injection.
"""

from types import SimpleNamespace

from chat_relay.api.dependencies import (
    get_chat_relay,
    get_llm_client,
    get_retry_engine,
    get_settings,
)
from chat_relay.relay.service import ChatRelay
from chat_relay.retry.engine import RetryEngine


def make_request(settings, llm_client):
    """Minimal stand-in for a Starlette Request carrying app.state."""
    state = SimpleNamespace(settings=settings, llm_client=llm_client)
    return SimpleNamespace(app=SimpleNamespace(state=state))


def test_get_settings_reads_app_state(test_settings, mock_llm_client):
    request = make_request(test_settings, mock_llm_client)
    assert get_settings(request) is test_settings


def test_get_llm_client_is_shared(test_settings, mock_llm_client):
    request = make_request(test_settings, mock_llm_client)
    assert get_llm_client(request) is mock_llm_client
    assert get_llm_client(request) is get_llm_client(request)


def test_get_retry_engine_uses_settings(test_settings):
    settings = test_settings.model_copy(update={"RETRY_MAX_ATTEMPTS": 4})
    
    engine1 = get_retry_engine(settings)
    engine2 = get_retry_engine(settings)
    
    # Not cached, but built from the same settings
    assert isinstance(engine1, RetryEngine)
    assert engine1 is not engine2
    assert engine1.policy.max_attempts == 4


def test_get_chat_relay(test_settings, mock_llm_client):
    engine = get_retry_engine(test_settings)
    
    relay = get_chat_relay(llm_client=mock_llm_client, retry_engine=engine, settings=test_settings)
    
    assert isinstance(relay, ChatRelay)
    assert relay.llm_client is mock_llm_client
    assert relay.retry_engine is engine
    assert relay.credential_configured is True


def test_get_chat_relay_without_key(test_settings, mock_llm_client):
    settings = test_settings.model_copy(update={"GEMINI_API_KEY": None})
    
    relay = get_chat_relay(
        llm_client=mock_llm_client,
        retry_engine=get_retry_engine(settings),
        settings=settings,
    )
    
    assert relay.credential_configured is False
