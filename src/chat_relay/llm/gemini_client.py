"""
Gemini client implementation for the upstream generation API.

Communicates with the Gemini REST API using httpx AsyncClient:
- POST /models/{model}:generateContent
- API key sent as x-goog-api-key header (never in the URL or logs)
- Connection pooling via a persistent AsyncClient
- Failure classification into RelayError kinds
"""

import time
from typing import Any, Dict, Optional
import httpx
import structlog

from chat_relay.exceptions import ErrorKind, RelayError, classify_upstream_failure
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.models.chat_models import ConversationTurn
from chat_relay.monitoring.metrics import upstream_attempts_total, upstream_latency_seconds


logger = structlog.get_logger(__name__)

DEFAULT_ERROR_MESSAGE = "Gemini API request failed"


class GeminiClient(BaseLLMClient):
    """
    Gemini generateContent client.

    One call to generate() is exactly one HTTP request. Retrying is left
    to RetryEngine, which relies on the error kinds raised here:

    - 429 / 503 / "overloaded" in the message -> OVERLOADED
    - httpx.TransportError (reset, DNS, timeout) -> TRANSPORT
    - any other non-2xx -> UPSTREAM_ERROR with the upstream status
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 30.0,
        connection_limits: Optional[httpx.Limits] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs
    ):
        """
        Initialize Gemini client.

        Args:
            api_key: Gemini API key (None leaves the client unusable)
            model: Model name used in the generateContent path
            base_url: API root including version
            timeout: Request timeout in seconds
            connection_limits: httpx connection pool limits
            transport: Custom httpx transport (tests use httpx.MockTransport)
            **kwargs: Additional config
        """
        super().__init__(base_url, timeout, **kwargs)

        if connection_limits is None:
            connection_limits = httpx.Limits(
                max_keepalive_connections=5,
                max_connections=20,
                keepalive_expiry=30.0
            )

        self.model = model
        self._api_key = api_key
        self._client: Optional[httpx.AsyncClient] = None
        self._connection_limits = connection_limits
        self._transport = transport

        logger.info(
            "Gemini client initialized",
            model=model,
            base_url=self.base_url,
            api_key_configured=bool(api_key),
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                limits=self._connection_limits,
                transport=self._transport,
            )
            logger.debug("Created new httpx AsyncClient")
        return self._client

    async def generate(self, turns: list[ConversationTurn]) -> Dict[str, Any]:
        """
        Send the conversation to generateContent.

        Payload:
        {
            "contents": [
                {"role": "user", "parts": [{"text": "..."}]},
                ...
            ]
        }
        """
        if not self._api_key:
            raise RelayError(ErrorKind.MISSING_CREDENTIAL, "Missing GEMINI_API_KEY")

        payload = {"contents": [turn.to_upstream() for turn in turns]}

        logger.debug(
            "Sending generateContent request",
            model=self.model,
            turns=len(turns),
        )

        start_time = time.perf_counter()
        try:
            client = await self._get_client()
            response = await client.post(
                f"/models/{self.model}:generateContent",
                json=payload,
                headers={"x-goog-api-key": self._api_key},
            )
        except httpx.TransportError as e:
            upstream_attempts_total.labels(outcome=ErrorKind.TRANSPORT.value).inc()
            logger.warning(
                "Gemini transport error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RelayError(
                ErrorKind.TRANSPORT,
                f"Network error: {e}",
                details={"error_type": type(e).__name__},
            ) from e
        finally:
            upstream_latency_seconds.observe(time.perf_counter() - start_time)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            message = _error_message(data)
            error = classify_upstream_failure(response.status_code, message)
            upstream_attempts_total.labels(outcome=error.kind.value).inc()
            logger.warning(
                "Gemini HTTP error",
                status_code=response.status_code,
                kind=error.kind.value,
                error_message=message,
            )
            raise error

        if data is None:
            upstream_attempts_total.labels(outcome=ErrorKind.UPSTREAM_ERROR.value).inc()
            raise RelayError(
                ErrorKind.UPSTREAM_ERROR,
                "Gemini API returned invalid JSON",
                details={"status": response.status_code},
            )

        upstream_attempts_total.labels(outcome="success").inc()
        logger.debug(
            "Gemini generation successful",
            model=self.model,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return data

    async def close(self):
        """Close the HTTP client connection."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("Closed Gemini client connection")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def _error_message(data: Any) -> str:
    """Pull ``error.message`` out of an upstream error body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
            return error["message"]
    return DEFAULT_ERROR_MESSAGE
