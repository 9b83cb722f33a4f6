"""
Abstract base client for the upstream generation API.

The relay and the retry engine only depend on this interface, so tests
can substitute a fake upstream without touching HTTP.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict
import structlog

from chat_relay.models.chat_models import ConversationTurn


logger = structlog.get_logger(__name__)


class BaseLLMClient(ABC):
    """
    Abstract base class for upstream clients.
    
    Responsibilities:
    - Send one generation request per call
    - Turn HTTP and transport failures into tagged RelayErrors
    
    Does NOT handle:
    - Retries (that's RetryEngine's job)
    - Reply extraction (see text_utils.extract_reply_text)
    """
    
    def __init__(self, base_url: str, timeout: float = 30.0, **kwargs):
        """
        Args:
            base_url: Base URL of the upstream API
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific config
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.extra_config = kwargs
        
        logger.info(
            "Initialized LLM client",
            client_class=self.__class__.__name__,
            base_url=self.base_url,
            timeout=timeout,
        )
    
    @abstractmethod
    async def generate(self, turns: list[ConversationTurn]) -> Dict[str, Any]:
        """
        Run one generation call and return the decoded upstream payload.
        
        Args:
            turns: Validated conversation, oldest first
        
        Returns:
            Upstream JSON body
        
        Raises:
            RelayError: MISSING_CREDENTIAL, OVERLOADED, TRANSPORT or
                UPSTREAM_ERROR
        """
        pass
    
    async def close(self):
        """Release pooled connections. Default implementation does nothing."""
        logger.debug("Closing LLM client", client_class=self.__class__.__name__)
    
    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"base_url={self.base_url}, "
            f"timeout={self.timeout}s)"
        )
