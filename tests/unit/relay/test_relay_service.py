"""
Unit tests for ChatRelay.
"""

from unittest.mock import AsyncMock

import pytest

from chat_relay.exceptions import ErrorKind, RelayError
from chat_relay.models.enums import Role
from chat_relay.relay.service import ChatRelay


@pytest.fixture
def relay(mock_llm_client, retry_engine) -> ChatRelay:
    return ChatRelay(
        llm_client=mock_llm_client,
        retry_engine=retry_engine,
        credential_configured=True,
    )


@pytest.mark.asyncio
async def test_relay_returns_trimmed_reply(relay, mock_llm_client, create_gemini_payload):
    mock_llm_client.generate.return_value = create_gemini_payload("  Sure", ", here you go. ")
    
    reply = await relay.relay([{"role": "user", "content": "Help?"}])
    
    assert reply == "Sure, here you go."


@pytest.mark.asyncio
async def test_relay_forwards_only_valid_turns_in_order(relay, mock_llm_client):
    await relay.relay(
        [
            {"role": "System", "content": "Be nice."},
            {"role": "bot", "content": "dropped"},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": ""},
            {"role": "Assistant", "content": "Hello"},
            {"role": "user", "content": "Joke?"},
        ]
    )
    
    mock_llm_client.generate.assert_awaited_once()
    turns = mock_llm_client.generate.await_args.args[0]
    assert [(t.role, t.content) for t in turns] == [
        (Role.SYSTEM, "Be nice."),
        (Role.USER, "Hi"),
        (Role.MODEL, "Hello"),
        (Role.USER, "Joke?"),
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("messages", [[], None, "hello", {"role": "user"}])
async def test_relay_rejects_missing_messages(relay, mock_llm_client, messages):
    with pytest.raises(RelayError) as exc_info:
        await relay.relay(messages)
    
    assert exc_info.value.kind is ErrorKind.INVALID_INPUT
    assert exc_info.value.message == "Request body must include a messages array"
    mock_llm_client.generate.assert_not_called()


@pytest.mark.asyncio
async def test_relay_rejects_all_invalid_turns(relay, mock_llm_client):
    with pytest.raises(RelayError) as exc_info:
        await relay.relay([{"role": "bot", "content": "hi"}, {"role": "user", "content": ""}])
    
    assert exc_info.value.kind is ErrorKind.INVALID_INPUT
    assert exc_info.value.message == "No valid messages provided"
    assert exc_info.value.status_code == 400
    mock_llm_client.generate.assert_not_called()


@pytest.mark.asyncio
async def test_relay_missing_credential(mock_llm_client, retry_engine):
    relay = ChatRelay(mock_llm_client, retry_engine, credential_configured=False)
    
    with pytest.raises(RelayError) as exc_info:
        await relay.relay([{"role": "user", "content": "Hi"}])
    
    assert exc_info.value.kind is ErrorKind.MISSING_CREDENTIAL
    assert exc_info.value.status_code == 500
    mock_llm_client.generate.assert_not_called()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"candidates": []},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": [{"text": "   "}]}}]},
    ],
)
async def test_relay_empty_upstream_response(relay, mock_llm_client, payload):
    mock_llm_client.generate.return_value = payload
    
    with pytest.raises(RelayError) as exc_info:
        await relay.relay([{"role": "user", "content": "Hi"}])
    
    assert exc_info.value.kind is ErrorKind.EMPTY_UPSTREAM_RESPONSE
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_relay_retries_overloaded_upstream(
    relay, mock_llm_client, recorded_sleeps, overloaded_error, create_gemini_payload
):
    mock_llm_client.generate = AsyncMock(
        side_effect=[overloaded_error, overloaded_error, create_gemini_payload("finally")]
    )
    
    assert await relay.relay([{"role": "user", "content": "Hi"}]) == "finally"
    assert mock_llm_client.generate.await_count == 3
    assert recorded_sleeps == [pytest.approx(0.6), pytest.approx(1.2)]


@pytest.mark.asyncio
async def test_relay_surfaces_overloaded_after_retries(relay, mock_llm_client, overloaded_error):
    mock_llm_client.generate = AsyncMock(side_effect=overloaded_error)
    
    with pytest.raises(RelayError) as exc_info:
        await relay.relay([{"role": "user", "content": "Hi"}])
    
    assert exc_info.value.kind is ErrorKind.OVERLOADED
    assert mock_llm_client.generate.await_count == 3
