"""
Data models for Chat Relay.

- enums: Role taxonomy for conversation turns
- chat_models: Conversation turns and upstream payload helpers
"""

from chat_relay.models.chat_models import ConversationTurn, normalize_role, normalize_turns
from chat_relay.models.enums import Role

__all__ = [
    "ConversationTurn",
    "Role",
    "normalize_role",
    "normalize_turns",
]
