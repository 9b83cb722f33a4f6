"""
Enumerations for Chat Relay data models.
"""

from enum import Enum


class Role(str, Enum):
    """
    Closed set of roles accepted by the upstream API.
    
    Client labels are folded onto these values by normalize_role().
    """
    
    USER = "user"
    MODEL = "model"
    SYSTEM = "system"


# Lower-cased client label -> upstream role
ROLE_ALIASES: dict[str, Role] = {
    "user": Role.USER,
    "assistant": Role.MODEL,
    "model": Role.MODEL,
    "system": Role.SYSTEM,
    "tool": Role.SYSTEM,
}
