"""FastAPI middleware for request tracing, origin checks and body limits."""

import time
import uuid
from typing import Callable, Iterable

import structlog
from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = structlog.get_logger(__name__)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Middleware to add request ID tracing to all requests.
    
    - Generates a UUID4 request_id per request
    - Binds request_id to structlog context (appears in all logs)
    - Adds X-Request-ID response header for client correlation
    - Logs request completion with duration
    """
    
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = str(uuid.uuid4())
        
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )
        
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
            duration_ms = (time.perf_counter() - start_time) * 1000
            
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
            
            response.headers["X-Request-ID"] = request_id
            return response
            
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "Request failed",
                exc_info=exc,
                duration_ms=round(duration_ms, 2),
            )
            raise
        
        finally:
            # Prevent context leaking into the next request on this worker
            structlog.contextvars.clear_contextvars()


class OriginAllowListMiddleware(BaseHTTPMiddleware):
    """Reject cross-origin requests from origins outside the allow-list.
    
    Origins are compared by exact string equality. Requests without an
    Origin header (curl, server-to-server) pass through.
    """
    
    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]):
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)
    
    def is_allowed(self, origin: str | None) -> bool:
        return origin is None or origin in self.allowed_origins
    
    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        origin = request.headers.get("origin")
        if not self.is_allowed(origin):
            logger.warning("Blocked origin", origin=origin)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "Origin not allowed"},
            )
        return await call_next(request)


class RequestBodyTooLarge(StarletteHTTPException):
    """Raised from the wrapped ``receive`` once the body exceeds the limit."""
    
    def __init__(self, max_bytes: int):
        super().__init__(status_code=413, detail="Request body too large")
        self.max_bytes = max_bytes


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_bytes``.
    
    A declared Content-Length over the limit is refused up front. Bodies
    without one (chunked uploads) are counted as they are received, and
    reading past the limit raises RequestBodyTooLarge, which the app's
    HTTPException handler turns into a 413.
    """
    
    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes
    
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                declared = int(content_length)
            except ValueError:
                response = JSONResponse(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    content={"error": "Invalid Content-Length header"},
                )
                await response(scope, receive, send)
                return
            if declared > self.max_bytes:
                logger.warning(
                    "Request body too large",
                    content_length=declared,
                    max_bytes=self.max_bytes,
                )
                await self._reject(scope, receive, send)
                return
        
        received = 0
        response_started = False
        
        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning(
                        "Streamed request body too large",
                        received_bytes=received,
                        max_bytes=self.max_bytes,
                    )
                    raise RequestBodyTooLarge(self.max_bytes)
            return message
        
        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)
        
        try:
            await self.app(scope, limited_receive, tracking_send)
        except RequestBodyTooLarge:
            # Body read outside FastAPI's exception handling
            if response_started:
                raise
            await self._reject(scope, receive, send)
    
    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(status_code=413, content={"error": "Request body too large"})
        await response(scope, receive, send)
