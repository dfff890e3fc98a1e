"""Type definitions for Ollama integration.

This module converts between Ollama's wire shapes and the conversation
types used by the agent loop.
"""

from dataclasses import dataclass, field
from typing import Any

from brain_agent.conversation import ASSISTANT, Message, ToolCallRequest


def _get(obj: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from either a response object attribute or a dict key."""
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


@dataclass
class ModelInfo:
    """Information about an Ollama model relevant to tool calling.

    Attributes:
        name: Full model name (e.g., "qwen3:14b")
        family: Model family (e.g., "qwen3")
        capabilities: Model capabilities (e.g., ["completion", "tools", "thinking"])
        context_length: Maximum context window size in tokens
    """

    name: str
    family: str = "unknown"
    capabilities: list[str] = field(default_factory=list)
    context_length: int = 2048

    @property
    def supports_tools(self) -> bool:
        return "tools" in self.capabilities

    @property
    def supports_thinking(self) -> bool:
        return "thinking" in self.capabilities

    @staticmethod
    def from_show_response(name: str, show: Any) -> "ModelInfo":
        """Create a ModelInfo from an Ollama ``show`` response."""
        details = _get(show, "details") or {}
        family = _get(details, "family") or "unknown"
        capabilities = list(_get(show, "capabilities") or ["completion"])

        modelinfo = _get(show, "modelinfo") or {}
        context_length = 2048
        for key in (f"{family}.context_length", "context_length"):
            if key in modelinfo:
                context_length = int(modelinfo[key])
                break

        return ModelInfo(
            name=name,
            family=family,
            capabilities=capabilities,
            context_length=context_length,
        )


def message_to_ollama(message: Message) -> dict[str, Any]:
    """Convert a conversation message to an Ollama chat message.

    Tool results are sent with the "tool" role and the tool's name, since
    Ollama chat templates only recognize that role for tool output.
    """
    if message.is_tool_result:
        return {
            "role": "tool",
            "tool_name": message.tool_name,
            "content": message.content,
        }

    ollama_msg: dict[str, Any] = {"role": message.role, "content": message.content}
    if message.thinking:
        ollama_msg["thinking"] = message.thinking
    if message.tool_calls:
        ollama_msg["tool_calls"] = [call.to_dict() for call in message.tool_calls]
    return ollama_msg


def message_from_ollama(data: Any) -> Message:
    """Convert the message of an Ollama chat response into a Message."""
    tool_calls = []
    for call in _get(data, "tool_calls") or []:
        function = _get(call, "function")
        tool_calls.append(
            ToolCallRequest(
                name=_get(function, "name"),
                arguments=dict(_get(function, "arguments") or {}),
            )
        )

    return Message(
        role=_get(data, "role") or ASSISTANT,
        content=_get(data, "content") or "",
        thinking=_get(data, "thinking") or "",
        tool_calls=tool_calls,
    )
