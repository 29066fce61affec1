"""Pydantic models for the API layer.

Defines request/response schemas for all endpoints.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ChatTurn(BaseModel):
    """Single prior turn supplied by the client. Any role other than "user" is the assistant."""
    role: str
    content: str


class ChatRequest(BaseModel):
    """Incoming chat message from the widget."""
    message: str = Field(..., min_length=1, description="User question")
    history: list[ChatTurn] = Field(default_factory=list, description="Prior turns, oldest first")

    @field_validator("history", mode="before")
    @classmethod
    def none_history_is_empty(cls, value):
        return [] if value is None else value


class ChatResponse(BaseModel):
    """Successful chat exchange."""
    success: Literal[True] = True
    response: str
    timestamp: str = Field(..., description="ISO-8601 UTC")


class SuggestionsResponse(BaseModel):
    success: Literal[True] = True
    suggestions: list[str]


class UsageResponse(BaseModel):
    """Caller's chatbot usage counter."""
    tenant_id: str
    total_messages: int = 0
    last_used: datetime | None = None
    updated_at: datetime | None = None


class ErrorDetail(BaseModel):
    kind: str
    message: str


class ErrorResponse(BaseModel):
    success: Literal[False] = False
    error: ErrorDetail
