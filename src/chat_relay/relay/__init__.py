"""
Chat relay service: validate turns, call upstream with retry, unwrap reply.
"""

from chat_relay.relay.service import ChatRelay

__all__ = ["ChatRelay"]
