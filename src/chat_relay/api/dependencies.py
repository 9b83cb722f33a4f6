"""
FastAPI dependency injection for Chat Relay.

Settings and the upstream client are created once by create_app() and
stored on ``app.state``; the dependencies below hand them to handlers.
"""

from fastapi import Depends, Request

from chat_relay.config import Settings
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.relay.service import ChatRelay
from chat_relay.retry.engine import RetryEngine
from chat_relay.retry.policy import RetryPolicy


def get_settings(request: Request) -> Settings:
    """Immutable settings the app was built with."""
    return request.app.state.settings


def get_llm_client(request: Request) -> BaseLLMClient:
    """
    Shared upstream client.
    
    The client keeps a pooled httpx connection and is closed on shutdown.
    """
    return request.app.state.llm_client


def get_retry_engine(settings: Settings = Depends(get_settings)) -> RetryEngine:
    """
    Create retry engine for the upstream call.
    
    Not cached: RetryEngine is lightweight and stateless.
    """
    return RetryEngine(RetryPolicy.from_settings(settings))


def get_chat_relay(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    retry_engine: RetryEngine = Depends(get_retry_engine),
    settings: Settings = Depends(get_settings),
) -> ChatRelay:
    """
    Create chat relay with injected dependencies.
    
    Args:
        llm_client: Upstream client singleton (injected)
        retry_engine: Retry engine (injected)
        settings: Application settings (injected)
    
    Returns:
        ChatRelay instance
    """
    return ChatRelay(
        llm_client=llm_client,
        retry_engine=retry_engine,
        credential_configured=settings.has_api_key,
    )
