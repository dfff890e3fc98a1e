"""brain-agent: tool-calling conversational agent for Ollama models.

This package provides the agent loop, the tool registry and MCP schema
translation, plus an interactive console and an HTTP driver.
"""

__version__ = "0.1.0"

from brain_agent.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
