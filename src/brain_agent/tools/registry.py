"""Tool registry mapping tool names to executable tools.

The registry follows an explicit lifecycle: it is constructed, populated
with ``add`` and then frozen once an agent takes ownership of it.
"""

import logging

from brain_agent.conversation import Message, ToolCallRequest
from brain_agent.errors import (
    DuplicateToolError,
    ToolRegistryFrozenError,
    UnknownToolError,
)
from brain_agent.tools.base import Tool
from brain_agent.tools.descriptor import ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Owns the tools available to one agent.

    Attributes:
        frozen: True once the registry no longer accepts new tools
    """

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}
        self.frozen = False

    def add(self, *tools: Tool) -> None:
        """Register a batch of tools.

        The batch is applied atomically: if any name collides with an
        existing entry or with another tool in the same batch, nothing is
        registered.

        Args:
            *tools: Tools to register

        Raises:
            DuplicateToolError: On the first colliding name
            ToolRegistryFrozenError: If the registry has been frozen
        """
        if self.frozen:
            raise ToolRegistryFrozenError("cannot add tools to a frozen registry")

        batch: dict[str, Tool] = {}
        for tool in tools:
            name = tool.name
            if name in self._tools or name in batch:
                raise DuplicateToolError(name)
            batch[name] = tool

        self._tools.update(batch)
        for name in batch:
            logger.debug(f"Registered tool: {name}")

    def freeze(self) -> None:
        self.frozen = True

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def list(self) -> list[ToolDescriptor]:
        """Return the descriptors of all registered tools."""
        return [tool.descriptor for tool in self._tools.values()]

    async def invoke(self, call: ToolCallRequest) -> Message:
        """Resolve a tool call by name and execute it.

        Args:
            call: The tool call requested by the model

        Returns:
            The tool's result message, with the tool's name as role

        Raises:
            UnknownToolError: If no tool with that name is registered
        """
        tool = self._tools.get(call.name)
        if tool is None:
            raise UnknownToolError(call.name)

        logger.info(f"Invoking tool {call.name} with arguments {call.arguments}")
        message = await tool.run(call)
        # Tool results always carry the tool's name as provenance
        message.role = tool.name
        message.tool_name = tool.name
        return message

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools
