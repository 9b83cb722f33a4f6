"""
API routes: health check and chat relay.
"""

import time

import structlog
from fastapi import APIRouter, Depends, status

from chat_relay.api.dependencies import get_chat_relay, get_settings
from chat_relay.api.models import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from chat_relay.config import Settings
from chat_relay.exceptions import ErrorKind, RelayError
from chat_relay.monitoring.metrics import chat_requests_total
from chat_relay.relay.service import ChatRelay

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/")
async def root(settings: Settings = Depends(get_settings)):
    """Root endpoint with service info and links."""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "chat": "/api/chat",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
)
async def health_check() -> HealthResponse:
    """Report that the process is up. Does not call the upstream API."""
    return HealthResponse(status="ok")


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Relay a conversation to Gemini",
    description="""
    Forward the conversation to the Gemini API and return the first reply.
    
    Roles are normalized (assistant/model -> model, system/tool -> system);
    turns with unknown roles or empty content are dropped. Overloaded
    upstream responses are retried with linear backoff before giving up.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "No valid messages"},
        500: {"model": ErrorResponse, "description": "Missing API key or unexpected failure"},
        502: {"model": ErrorResponse, "description": "Empty or unreachable upstream"},
        503: {"model": ErrorResponse, "description": "Upstream overloaded after retries"},
    },
)
async def chat(
    request: ChatRequest,
    relay: ChatRelay = Depends(get_chat_relay),
) -> ChatResponse:
    """
    Relay one conversation.
    
    Args:
        request: Chat request with raw messages
        relay: ChatRelay instance (injected)
    
    Returns:
        ChatResponse with the reply text
    """
    start_time = time.perf_counter()
    
    try:
        reply = await relay.relay(request.messages)
    except RelayError as exc:
        chat_requests_total.labels(status=exc.kind.value).inc()
        raise
    except Exception as exc:
        chat_requests_total.labels(status=ErrorKind.UNEXPECTED.value).inc()
        logger.exception("Unexpected error while relaying chat", error_type=type(exc).__name__)
        raise RelayError(
            ErrorKind.UNEXPECTED,
            str(exc),
            details={"error_type": type(exc).__name__},
        ) from exc
    
    chat_requests_total.labels(status="success").inc()
    logger.info(
        "Chat relayed",
        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
    )
    return ChatResponse(reply=reply)
