"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from brain_agent.models.conversation import (
    AdvanceResponse,
    ConversationResponse,
    MessageResponse,
    SendMessageRequest,
    StartConversationRequest,
)
from brain_agent.models.health import HealthResponse
from brain_agent.models.tools import ToolListResponse

__all__ = [
    "AdvanceResponse",
    "ConversationResponse",
    "HealthResponse",
    "MessageResponse",
    "SendMessageRequest",
    "StartConversationRequest",
    "ToolListResponse",
]
