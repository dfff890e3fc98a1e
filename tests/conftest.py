"""Pytest configuration and shared fixtures for brain-agent tests.

This module provides common fixtures used across all test modules,
including test settings, fake tools and the async API client.
"""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from brain_agent import create_app
from brain_agent.config import BrainSettings
from brain_agent.conversation import Message, ToolCallRequest
from brain_agent.tools import Tool, ToolDescriptor, ToolParameters, ToolProperty


class StaticTool(Tool):
    """Tool returning a fixed output, or raising a fixed error."""

    def __init__(self, name: str, output: str = "", error: Exception | None = None):
        self._descriptor = ToolDescriptor(
            name=name,
            description=f"{name} test tool",
            parameters=ToolParameters(
                required=["query"],
                properties={"query": ToolProperty(type="string", description="q")},
            ),
        )
        self.output = output
        self.error = error
        self.calls: list[ToolCallRequest] = []

    @property
    def descriptor(self) -> ToolDescriptor:
        return self._descriptor

    async def run(self, call: ToolCallRequest) -> Message:
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return self.result(self.output)


@pytest.fixture
def make_tool():
    """Factory fixture creating StaticTool instances."""
    return StaticTool


@pytest.fixture
def mock_backend():
    """An AsyncMock standing in for OllamaClient."""
    client = AsyncMock()
    client.host = "http://localhost:11434"
    client.chat.return_value = Message(role="assistant", content="Hello!")
    return client


@pytest.fixture
def test_settings():
    """Create test settings without MCP servers.

    Returns:
        BrainSettings: Settings instance configured for testing.
    """
    return BrainSettings(
        model="qwen3",
        history_limit=0,
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        search_url="http://search.test/html/",
        weather_url="http://weather.test",
        log_level="DEBUG",
        cors_origins=["*"],
        mcp_servers=[],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance."""
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
