"""Schema translation and execution for tools served over MCP.

MCP servers describe their tools with a JSON schema ``inputSchema``. This
module normalizes those schemas into ToolDescriptors, follows the paginated
``tools/list`` listing, and wraps each remote tool so the registry can
invoke it like a local one.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Any, Protocol

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from brain_agent.config import MCPServerConfig
from brain_agent.conversation import Message, ToolCallRequest
from brain_agent.errors import SchemaViolationError, ToolExecutionError
from brain_agent.tools.base import Tool
from brain_agent.tools.descriptor import ToolDescriptor, ToolParameters, ToolProperty

logger = logging.getLogger(__name__)


class ToolProvider(Protocol):
    """The subset of ``mcp.ClientSession`` used to discover and call tools."""

    async def list_tools(self, cursor: str | None = None) -> Any: ...

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None = None
    ) -> Any: ...


def _field(obj: Any, key: str, default: Any = None) -> Any:
    # MCP results are pydantic models; tests and other providers may use dicts
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def _translate_property(tool: str, name: str, schema: Any) -> ToolProperty:
    if not isinstance(schema, dict):
        raise SchemaViolationError(
            f"{tool}: parameter {name!r} must be an object schema, but got {schema!r}"
        )

    param_type = schema.get("type", "")
    if not isinstance(param_type, str):
        raise SchemaViolationError(
            f"{tool}: parameter {name!r} has unsupported type {param_type!r}"
        )

    enums: list[str] = []
    for value in schema.get("enum") or []:
        if not isinstance(value, str):
            raise SchemaViolationError(
                f"{tool}: enum of {name!r} must be string, but got {value!r}"
            )
        enums.append(value)

    return ToolProperty(
        type=param_type,
        description=schema.get("description") or "",
        enum=enums,
    )


def descriptor_from_mcp(tool: Any) -> ToolDescriptor:
    """Convert an MCP tool definition into a ToolDescriptor.

    Args:
        tool: An ``mcp.types.Tool`` (or a dict with the same keys)

    Returns:
        ToolDescriptor: The normalized descriptor

    Raises:
        SchemaViolationError: If any parameter schema cannot be normalized,
            e.g. an enum entry that is not a string
    """
    name = _field(tool, "name")
    input_schema = _field(tool, "inputSchema") or {}
    properties = input_schema.get("properties") or {}

    translated = {
        param: _translate_property(name, param, schema)
        for param, schema in properties.items()
    }

    return ToolDescriptor(
        name=name,
        description=_field(tool, "description") or "",
        parameters=ToolParameters(
            type="object",
            required=list(input_schema.get("required") or []),
            properties=translated,
        ),
    )


async def list_mcp_tools(provider: ToolProvider) -> list[Any]:
    """Collect every tool a provider exposes, following pagination.

    Pages are requested until the provider returns no next cursor. Any page
    error propagates immediately; no partial list is returned.

    Args:
        provider: An initialized MCP client session

    Returns:
        The raw MCP tool definitions, in page order
    """
    tools: list[Any] = []
    cursor: str | None = None
    pages = 0

    while True:
        result = await provider.list_tools(cursor=cursor)
        pages += 1
        tools.extend(_field(result, "tools") or [])

        cursor = _field(result, "nextCursor")
        if not cursor:
            break

    logger.debug(f"Listed {len(tools)} MCP tools across {pages} page(s)")
    return tools


async def list_mcp_descriptors(provider: ToolProvider) -> list[ToolDescriptor]:
    """List a provider's tools and translate them into ToolDescriptors."""
    return [descriptor_from_mcp(tool) for tool in await list_mcp_tools(provider)]


class MCPTool(Tool):
    """A tool executed remotely by an MCP server."""

    def __init__(self, descriptor: ToolDescriptor, provider: ToolProvider) -> None:
        self._descriptor = descriptor
        self._provider = provider

    @property
    def descriptor(self) -> ToolDescriptor:
        return self._descriptor

    async def run(self, call: ToolCallRequest) -> Message:
        result = await self._provider.call_tool(call.name, dict(call.arguments))

        parts: list[str] = []
        for item in _field(result, "content") or []:
            text = _field(item, "text")
            if text is not None:
                parts.append(text)
        content = "\n".join(parts)

        if _field(result, "isError", False):
            raise ToolExecutionError(f"MCP tool {call.name!r} failed: {content}")

        return self.result(content)


async def load_mcp_tools(provider: ToolProvider) -> list[MCPTool]:
    """Discover a provider's tools and wrap them for the registry."""
    descriptors = await list_mcp_descriptors(provider)
    return [MCPTool(descriptor, provider) for descriptor in descriptors]


async def connect_mcp_servers(
    configs: list[MCPServerConfig],
    stack: AsyncExitStack,
    init_timeout: float,
) -> list[MCPTool]:
    """Start stdio MCP servers and load their tools.

    The server processes and sessions live as long as ``stack``.

    Args:
        configs: Servers to start
        stack: Exit stack owning the connections
        init_timeout: Seconds to wait for each session to initialize

    Returns:
        The tools of all servers, in configuration order
    """
    tools: list[MCPTool] = []
    for config in configs:
        params = StdioServerParameters(
            command=config.command,
            args=config.args,
            env=config.env or None,
        )
        read_stream, write_stream = await stack.enter_async_context(
            stdio_client(params)
        )
        session = await stack.enter_async_context(
            ClientSession(read_stream, write_stream)
        )
        await asyncio.wait_for(session.initialize(), timeout=init_timeout)

        server_tools = await load_mcp_tools(session)
        logger.info(
            f"Connected MCP server {config.name} with {len(server_tools)} tool(s)"
        )
        tools.extend(server_tools)
    return tools
