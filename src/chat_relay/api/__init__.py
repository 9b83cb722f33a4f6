"""
FastAPI API layer.

- routes.py: GET /, GET /health, POST /api/chat
- dependencies.py: Dependency injection for settings, client, relay
- middleware.py: Request tracing, origin allow-list, body size limit
- models.py: Request/response models
- error_handlers.py: RelayError -> HTTP response mapping
"""

from chat_relay.api import dependencies, error_handlers, models
from chat_relay.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
