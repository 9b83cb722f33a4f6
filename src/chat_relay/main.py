"""
FastAPI application entry point for Chat Relay.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from chat_relay.api.error_handlers import EXCEPTION_HANDLERS
from chat_relay.api.middleware import (
    BodySizeLimitMiddleware,
    OriginAllowListMiddleware,
    RequestTracingMiddleware,
)
from chat_relay.api.routes import router
from chat_relay.config import Settings
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.gemini_client import GeminiClient
from chat_relay.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def build_llm_client(settings: Settings) -> BaseLLMClient:
    """Upstream client for the configured Gemini model."""
    return GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_BASE_URL,
        timeout=settings.UPSTREAM_TIMEOUT,
    )


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[BaseLLMClient] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Immutable settings (read from the environment when omitted)
        llm_client: Upstream client (GeminiClient when omitted)

    Returns:
        Configured FastAPI app
    """
    if settings is None:
        settings = Settings()
    if llm_client is None:
        llm_client = build_llm_client(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Application startup",
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
            model=settings.GEMINI_MODEL,
            allowed_origins=settings.allowed_origins,
        )
        yield
        await app.state.llm_client.close()
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Chat Relay",
        description="Browser chat backend that relays conversations to the Gemini API",
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.llm_client = llm_client

    if not settings.has_api_key:
        logger.warning("Missing GEMINI_API_KEY. Requests to Gemini will fail until it is provided.")

    # Added last = outermost: tracing -> origin check -> body limit -> CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)
    app.add_middleware(OriginAllowListMiddleware, allowed_origins=settings.allowed_origins)
    app.add_middleware(RequestTracingMiddleware)

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(router)

    if settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


_settings = Settings()
configure_logging(_settings.LOG_LEVEL, _settings.ENVIRONMENT)
app = create_app(_settings)


def run() -> None:
    """Serve the app with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(app, host=_settings.HOST, port=_settings.PORT)


if __name__ == "__main__":
    run()
