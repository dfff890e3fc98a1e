"""Tool contract, registry, schema translation and built-in tools.

This package provides the Tool interface, the ToolRegistry the agent loop
invokes, the MCP schema translator and the built-in tools.
"""

from brain_agent.config import BrainSettings
from brain_agent.tools.base import Tool
from brain_agent.tools.descriptor import ToolDescriptor, ToolParameters, ToolProperty
from brain_agent.tools.registry import ToolRegistry
from brain_agent.tools.weather import WeatherTool
from brain_agent.tools.web_search import WebSearchTool


def default_tools(settings: BrainSettings) -> list[Tool]:
    """Create the built-in tools configured by ``settings``."""
    return [
        WebSearchTool(search_url=settings.search_url, timeout=settings.http_timeout),
        WeatherTool(base_url=settings.weather_url, timeout=settings.http_timeout),
    ]


def build_registry(settings: BrainSettings, extra: list[Tool] | None = None) -> ToolRegistry:
    """Construct and populate a new registry for one session.

    Args:
        settings: Configuration for the built-in tools
        extra: Additional tools, e.g. those discovered from MCP servers

    Returns:
        ToolRegistry: A populated, not yet frozen registry

    Raises:
        DuplicateToolError: If any two tools share a name
    """
    registry = ToolRegistry()
    registry.add(*default_tools(settings))
    if extra:
        registry.add(*extra)
    return registry


__all__ = [
    "Tool",
    "ToolDescriptor",
    "ToolParameters",
    "ToolProperty",
    "ToolRegistry",
    "WebSearchTool",
    "WeatherTool",
    "build_registry",
    "default_tools",
]
