"""Conversation messages and history.

This package provides the message types exchanged with the model and the
tools, and the append-only history the agent loop advances.
"""

from brain_agent.conversation.history import ConversationHistory
from brain_agent.conversation.types import (
    ASSISTANT,
    SYSTEM,
    USER,
    ArgValue,
    Message,
    ToolCallRequest,
    optional_string,
    require_string,
)

__all__ = [
    "ConversationHistory",
    "Message",
    "ToolCallRequest",
    "ArgValue",
    "require_string",
    "optional_string",
    "SYSTEM",
    "USER",
    "ASSISTANT",
]
