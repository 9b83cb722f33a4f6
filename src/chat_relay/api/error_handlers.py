"""
FastAPI exception handlers for structured error responses.

Maps RelayError kinds to HTTP status codes. Every error body is
``{"error": "<message>"}``.
"""

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_relay.exceptions import ErrorKind, RelayError
from chat_relay.monitoring.metrics import chat_requests_total

logger = structlog.get_logger(__name__)

OVERLOADED_MESSAGE = "Gemini is overloaded right now. Please retry in a few seconds."
UNEXPECTED_MESSAGE = "Unexpected server error"
INTERNAL_MESSAGE = "Internal server error"
INVALID_BODY_MESSAGE = "Request body must include a messages array"


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def client_message(exc: RelayError) -> str:
    """Message safe to send to the client for a RelayError."""
    if exc.kind is ErrorKind.OVERLOADED:
        return OVERLOADED_MESSAGE
    # Transport failures that outlast the retries are reported like any
    # other unexpected failure
    if exc.kind in (ErrorKind.TRANSPORT, ErrorKind.UNEXPECTED):
        return UNEXPECTED_MESSAGE
    return exc.message


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """
    Handle tagged relay errors.
    
    - INVALID_INPUT -> 400
    - MISSING_CREDENTIAL -> 500
    - OVERLOADED -> 503 (client should retry shortly)
    - UPSTREAM_ERROR -> upstream status, upstream message
    - EMPTY_UPSTREAM_RESPONSE -> 502
    - TRANSPORT, UNEXPECTED -> 500 "Unexpected server error", details only logged
    """
    if exc.kind is ErrorKind.INVALID_INPUT:
        logger.info("Invalid chat request", error_message=exc.message)
    elif exc.kind is ErrorKind.UNEXPECTED:
        logger.error("Unexpected relay error", error_message=exc.message, details=exc.details)
    else:
        logger.error(
            "Gemini API error",
            kind=exc.kind.value,
            upstream_status=exc.upstream_status,
            error_message=exc.message,
        )
    
    return _error_response(exc.status_code, client_message(exc))


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies.
    
    Maps to 400 Bad Request like any other invalid input.
    """
    chat_requests_total.labels(status=ErrorKind.INVALID_INPUT.value).inc()
    logger.info("Invalid request format", errors=exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Keep framework errors (404, 405, ...) in the ``{"error"}`` shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.
    
    Maps to 500 Internal Server Error. Details stay in the server log.
    """
    logger.exception("Unhandled error", error_type=type(exc).__name__)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_MESSAGE)


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    RelayError: relay_error_handler,
    RequestValidationError: request_validation_error_handler,
    StarletteHTTPException: http_exception_handler,
    Exception: generic_error_handler,
}
