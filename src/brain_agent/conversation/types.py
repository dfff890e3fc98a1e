"""Data types for conversation messages and tool call requests.

This module defines the core data structures exchanged between the agent
loop, the model backend and the tools.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from brain_agent.errors import ToolArgumentError

# A single tool argument as decoded from the model's JSON output
ArgValue = Union[str, int, float, bool, None]

SYSTEM = "system"
USER = "user"
ASSISTANT = "assistant"


@dataclass
class ToolCallRequest:
    """A tool invocation requested by the model.

    Attributes:
        name: Name of the target tool
        arguments: Mapping from parameter name to an untyped value
    """

    name: str
    arguments: dict[str, ArgValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the Ollama tool call shape."""
        return {"function": {"name": self.name, "arguments": dict(self.arguments)}}


@dataclass
class Message:
    """One turn in the conversation.

    ``role`` is "system", "user", "assistant" or, for tool results, the
    name of the tool that produced the content.
    """

    role: str
    content: str = ""
    thinking: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    tool_name: str | None = None

    @property
    def is_tool_result(self) -> bool:
        return self.tool_name is not None

    @property
    def is_anomalous(self) -> bool:
        """True for an assistant turn with neither content nor tool calls."""
        return (
            self.role.lower() == ASSISTANT
            and not self.tool_calls
            and not self.content.strip()
        )

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=USER, content=content)

    @classmethod
    def tool_result(cls, tool_name: str, content: str) -> "Message":
        return cls(role=tool_name, content=content, tool_name=tool_name)


def require_string(call: ToolCallRequest, parameter: str) -> str:
    """Extract a required string argument from a tool call.

    Args:
        call: The tool call carrying the arguments
        parameter: Name of the parameter to extract

    Returns:
        The argument value

    Raises:
        ToolArgumentError: If the argument is missing or not a string
    """
    if parameter not in call.arguments:
        raise ToolArgumentError(call.name, parameter, "not provided")
    value = call.arguments[parameter]
    if not isinstance(value, str):
        raise ToolArgumentError(
            call.name, parameter, f"expects a string, but got {value!r}"
        )
    return value


def optional_string(
    call: ToolCallRequest,
    parameter: str,
    default: str,
    choices: list[str] | None = None,
) -> str:
    """Extract an optional string argument, falling back to ``default``.

    Raises:
        ToolArgumentError: If the argument is present but not a string, or
            not one of ``choices`` when given
    """
    value = call.arguments.get(parameter)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ToolArgumentError(
            call.name, parameter, f"expects a string, but got {value!r}"
        )
    if choices is not None and value not in choices:
        raise ToolArgumentError(
            call.name, parameter, f"must be one of {choices}, but got {value!r}"
        )
    return value
