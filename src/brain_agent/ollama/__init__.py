"""Ollama client wrapper and integration layer.

This package provides the async model backend client used by the agent loop.
"""

from brain_agent.ollama.client import OllamaClient
from brain_agent.ollama.types import ModelInfo, message_from_ollama, message_to_ollama

__all__ = ["OllamaClient", "ModelInfo", "message_from_ollama", "message_to_ollama"]
