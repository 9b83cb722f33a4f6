"""
Conversation turn model and normalization of raw client messages.

Clients send free-form ``{"role", "content"}`` objects. Only messages with
a recognized role and non-empty string content survive normalization;
everything else is dropped without failing the request.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from chat_relay.models.enums import ROLE_ALIASES, Role


class ConversationTurn(BaseModel):
    """One validated message in a conversation."""
    model_config = ConfigDict(frozen=True)
    
    role: Role = Field(..., description="Normalized role")
    content: str = Field(..., min_length=1, description="Message text")
    
    def to_upstream(self) -> dict[str, Any]:
        """Serialize as a Gemini ``contents`` entry."""
        return {"role": self.role.value, "parts": [{"text": self.content}]}


def normalize_role(role: Any) -> Optional[Role]:
    """
    Map a client role label onto a Role.
    
    Matching is case-insensitive. Returns None for unknown labels and
    non-string values.
    
    Examples:
        >>> normalize_role("Assistant")
        <Role.MODEL: 'model'>
        >>> normalize_role("bot") is None
        True
    """
    if not isinstance(role, str):
        return None
    return ROLE_ALIASES.get(role.lower())


def normalize_turns(messages: list[Any]) -> list[ConversationTurn]:
    """
    Keep the valid subset of raw messages, preserving order.
    
    A message is dropped when it is not an object, its role is unknown,
    or its content is not a non-empty string.
    """
    turns: list[ConversationTurn] = []
    for message in messages:
        if not isinstance(message, dict):
            continue
        
        role = normalize_role(message.get("role"))
        content = message.get("content")
        if role is None or not isinstance(content, str) or not content:
            continue
        
        turns.append(ConversationTurn(role=role, content=content))
    return turns
