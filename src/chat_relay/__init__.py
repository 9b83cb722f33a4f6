"""
Chat Relay for browser chat clients.

Forwards conversation turns to the Gemini generation API while keeping
the API key server-side:
- Turn validation and role normalization
- Bounded retry with linear backoff for overloaded upstream
- Origin allow-list for cross-origin browser clients

Architecture: FastAPI endpoint + httpx upstream client + retry engine
"""

__version__ = "0.1.0"
