"""Error types raised by the agent core.

Backend failures (``ollama.ResponseError``, ``httpx`` transport errors) are
not wrapped; they propagate unchanged. Cancellation surfaces as
``asyncio.CancelledError`` or ``TimeoutError``.
"""

from __future__ import annotations


class BrainError(Exception):
    """Base exception for all brain-agent errors."""

    pass


class DuplicateToolError(BrainError):
    """Raised when a tool name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"tool with name {name!r} already exists")


class ToolRegistryFrozenError(BrainError):
    """Raised when adding tools to a registry that is in use by an agent."""

    pass


class SchemaViolationError(BrainError):
    """Raised when a tool schema cannot be normalized."""

    pass


class UnknownToolError(BrainError):
    """Raised when the model requests a tool that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"called non-existent tool {name!r}")


class ToolArgumentError(BrainError):
    """Raised when a tool call is missing an argument or has a wrong type."""

    def __init__(self, tool: str, parameter: str, reason: str):
        self.tool = tool
        self.parameter = parameter
        super().__init__(f"{tool}: `{parameter}` {reason}")


class ToolExecutionError(BrainError):
    """Raised when a tool reports that its execution failed."""

    pass


class EmptyPromptError(BrainError):
    """Raised when the user submits an empty prompt."""

    def __init__(self) -> None:
        super().__init__("`prompt` cannot be empty.")


class AgentStateError(BrainError):
    """Raised when an operation does not fit the agent's current state."""

    pass
