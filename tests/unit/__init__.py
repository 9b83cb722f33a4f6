"""
Unit tests for Chat Relay.

Test individual components in isolation:
- Turn models and role normalization
- Error taxonomy
- Gemini client (httpx.MockTransport)
- Retry engine and policy
- Relay service
"""
