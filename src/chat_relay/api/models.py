"""
API request and response models for FastAPI endpoints.
"""

from typing import Any

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/chat."""
    
    messages: list[Any] = Field(
        description="Conversation turns, oldest first. Unusable entries are dropped.",
        examples=[[{"role": "user", "content": "Hello!"}]],
    )


class ChatResponse(BaseModel):
    """Response for POST /api/chat."""
    
    reply: str = Field(description="Trimmed text of the first generated candidate")


class HealthResponse(BaseModel):
    """Response for health check endpoint."""
    
    status: str = Field(default="ok", examples=["ok"])


class ErrorResponse(BaseModel):
    """Standard error response format."""
    
    error: str = Field(description="Human-readable error message")
