"""
Integration tests for Chat Relay.

Exercise the full FastAPI app (middleware, routing, exception handlers)
through TestClient with a fake upstream client.
"""
