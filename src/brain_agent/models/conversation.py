"""Pydantic models for the conversation API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from brain_agent.conversation import Message


class StartConversationRequest(BaseModel):
    """Request body for POST /api/v1/conversation."""

    system: str = Field(default="", description="System prompt")
    prompt: str = Field(description="First user message, must not be empty")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "system": "You are a helpful assistant.",
                    "prompt": "What is the weather in Paris?",
                }
            ]
        }
    )


class SendMessageRequest(BaseModel):
    """Request body for POST /api/v1/conversation/messages."""

    message: str = Field(description="The user message, must not be empty")


class ToolCallResponse(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class MessageResponse(BaseModel):
    """A single message of the conversation."""

    role: str = Field(description="system, user, assistant or the tool's name")
    content: str = Field(description="Message content")
    thinking: str = Field(default="", description="Reasoning trace, if any")
    tool_calls: list[ToolCallResponse] = Field(default_factory=list)
    tool_name: str | None = Field(
        default=None, description="Tool that produced this result message"
    )

    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            role=message.role,
            content=message.content,
            thinking=message.thinking,
            tool_calls=[
                ToolCallResponse(name=c.name, arguments=c.arguments)
                for c in message.tool_calls
            ],
            tool_name=message.tool_name,
        )


class AdvanceResponse(BaseModel):
    """Messages appended while the agent advanced the conversation."""

    state: str = Field(description="Agent state after advancing")
    limit_reached: bool = Field(description="Whether the history limit is exceeded")
    history_length: int = Field(description="Number of messages in the history")
    messages: list[MessageResponse] = Field(description="Newly appended messages")


class ConversationResponse(BaseModel):
    """The whole conversation with its rendered transcript."""

    model: str
    state: str
    limit: int
    limit_reached: bool
    messages: list[MessageResponse]
    transcript: str = Field(description="Markdown transcript of the conversation")
