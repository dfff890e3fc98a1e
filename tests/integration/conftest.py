"""Pytest configuration for integration tests.

Patches the Ollama client so the application lifespan builds its agent on
top of a mock backend.
"""

from unittest.mock import AsyncMock, patch

import pytest

from brain_agent.conversation import Message
from brain_agent.ollama import ModelInfo


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("brain_agent.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True
        mock_instance.get_model_info.return_value = ModelInfo(
            name="qwen3",
            family="qwen3",
            capabilities=["completion", "tools", "thinking"],
            context_length=40960,
        )
        mock_instance.chat.return_value = Message(role="assistant", content="Hi!")

        mock_client_class.return_value = mock_instance

        yield mock_instance
