"""
Chat relay service.

Turns a raw ``messages`` list from a client into a single reply string:

1. Refuse when no upstream credential is configured
2. Normalize turns, dropping unusable ones
3. Call the upstream client under the retry engine
4. Extract the first candidate's text
"""

from typing import Any

import structlog

from chat_relay.exceptions import ErrorKind, RelayError
from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.text_utils import extract_reply_text
from chat_relay.models.chat_models import normalize_turns
from chat_relay.retry.engine import RetryEngine
from chat_relay.retry.metadata import RetryState

logger = structlog.get_logger(__name__)


class ChatRelay:
    """
    Relay between chat clients and the upstream generation API.
    
    Holds no per-request state; one instance serves all requests.
    
    Attributes:
        llm_client: Upstream client
        retry_engine: Retry executor wrapping each upstream call
        credential_configured: Whether an upstream API key is available
    """
    
    def __init__(
        self,
        llm_client: BaseLLMClient,
        retry_engine: RetryEngine,
        credential_configured: bool,
    ):
        self.llm_client = llm_client
        self.retry_engine = retry_engine
        self.credential_configured = credential_configured
    
    async def relay(self, messages: Any) -> str:
        """
        Forward a conversation upstream and return the reply text.
        
        Args:
            messages: Raw list of ``{"role", "content"}`` objects
        
        Returns:
            Trimmed reply text of the first candidate
        
        Raises:
            RelayError: MISSING_CREDENTIAL, INVALID_INPUT,
                EMPTY_UPSTREAM_RESPONSE, or whatever the retry engine
                surfaces from the upstream client
        """
        if not self.credential_configured:
            raise RelayError(ErrorKind.MISSING_CREDENTIAL, "Server is missing GEMINI_API_KEY")
        
        if not isinstance(messages, list) or not messages:
            raise RelayError(
                ErrorKind.INVALID_INPUT, "Request body must include a messages array"
            )
        
        turns = normalize_turns(messages)
        if not turns:
            raise RelayError(ErrorKind.INVALID_INPUT, "No valid messages provided")
        
        if len(turns) < len(messages):
            logger.info(
                "Dropped invalid turns",
                received=len(messages),
                forwarded=len(turns),
            )
        
        state = RetryState()
        data = await self.retry_engine.execute(
            lambda: self.llm_client.generate(turns),
            state=state,
        )
        
        reply = extract_reply_text(data)
        if not reply:
            logger.warning(
                "Upstream returned no reply text",
                attempts=state.attempts_made,
            )
            raise RelayError(
                ErrorKind.EMPTY_UPSTREAM_RESPONSE, "Gemini API returned an empty response"
            )
        
        logger.info(
            "Relay completed",
            turns=len(turns),
            attempts=state.attempts_made,
            reply_length=len(reply),
        )
        return reply
