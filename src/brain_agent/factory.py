"""Composition root wiring the model client, tools and agent together.

Both the console and the HTTP driver build their agent here, so every
session gets a freshly constructed registry.
"""

import logging
from contextlib import AsyncExitStack

from brain_agent.agent import Agent
from brain_agent.config import BrainSettings
from brain_agent.ollama import OllamaClient
from brain_agent.tools import build_registry
from brain_agent.tools.mcp import connect_mcp_servers

logger = logging.getLogger(__name__)


async def validate_model(client: OllamaClient, model: str, think: bool) -> bool:
    """Check that the model exists and report missing capabilities.

    Args:
        client: The Ollama client
        model: Model name to check
        think: Whether reasoning traces were requested

    Returns:
        bool: Whether reasoning traces should be requested from this model

    Raises:
        ValueError: If the model does not exist
    """
    model_info = await client.get_model_info(model)
    if model_info is None:
        raise ValueError(f"Model '{model}' not found")

    if not model_info.supports_tools:
        logger.warning(f"Model {model} does not advertise tool support")
    if think and not model_info.supports_thinking:
        logger.warning(f"Model {model} does not support thinking, disabling it")
        return False
    return think


async def create_agent(
    settings: BrainSettings,
    client: OllamaClient,
    stack: AsyncExitStack,
) -> Agent:
    """Build an agent with the built-in tools and all configured MCP tools.

    Args:
        settings: Application settings
        client: The model backend client
        stack: Exit stack owning the MCP server connections

    Returns:
        Agent: An agent whose registry is populated and frozen

    Raises:
        DuplicateToolError: If two tools share a name
        SchemaViolationError: If an MCP tool schema cannot be normalized
    """
    mcp_tools = await connect_mcp_servers(
        settings.mcp_servers, stack, settings.mcp_init_timeout
    )
    registry = build_registry(settings, extra=mcp_tools)
    logger.info(f"Registered tools: {', '.join(registry.names)}")

    return Agent(
        client=client,
        registry=registry,
        model=settings.model,
        limit=settings.history_limit,
        think=settings.think,
        parallel_tools=settings.parallel_tools,
        step_timeout=settings.step_timeout,
    )
