"""Capability contract shared by every tool."""

from abc import ABC, abstractmethod

from brain_agent.conversation import Message, ToolCallRequest
from brain_agent.tools.descriptor import ToolDescriptor


class Tool(ABC):
    """A named capability the model may request.

    Implementations describe themselves with a ToolDescriptor and execute a
    ToolCallRequest, validating their own arguments. Execution is async so
    that network I/O suspends and can be cancelled by the caller.
    """

    @property
    @abstractmethod
    def descriptor(self) -> ToolDescriptor:
        """The schema shown to the model."""

    @property
    def name(self) -> str:
        return self.descriptor.name

    @abstractmethod
    async def run(self, call: ToolCallRequest) -> Message:
        """Execute the call and return one result message.

        Raises:
            ToolArgumentError: If a required argument is missing or malformed
        """

    def result(self, content: str) -> Message:
        """Build a result message tagged with this tool's name."""
        return Message.tool_result(self.name, content)
