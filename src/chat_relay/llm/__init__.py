"""
Upstream LLM client layer.

Components:
- BaseLLMClient: Interface the relay talks to
- GeminiClient: httpx client for the Gemini generateContent API
- text_utils: Reply extraction from upstream payloads
"""

from chat_relay.llm.base_client import BaseLLMClient
from chat_relay.llm.gemini_client import GeminiClient
from chat_relay.llm.text_utils import extract_reply_text

__all__ = [
    "BaseLLMClient",
    "GeminiClient",
    "extract_reply_text",
]
