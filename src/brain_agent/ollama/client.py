"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. Chat requests are single-shot: the
model returns one complete message per call, never streamed deltas.
"""

import logging

import ollama

from brain_agent.conversation import Message
from brain_agent.ollama.types import ModelInfo, message_from_ollama, message_to_ollama
from brain_agent.tools.descriptor import ToolDescriptor

logger = logging.getLogger(__name__)


class OllamaClient:
    """Async client for the model backend.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def get_model_info(self, model: str) -> ModelInfo | None:
        """Get capability information about a model.

        Args:
            model: Name of the model to query

        Returns:
            ModelInfo | None: Model information if found, None if not found

        Raises:
            ollama.ResponseError: If the request fails for another reason
        """
        try:
            show_response = await self._client.show(model)
        except ollama.ResponseError as e:
            if e.status_code == 404:
                logger.debug(f"Model not found: {model}")
                return None
            raise

        return ModelInfo.from_show_response(model, show_response)

    async def chat(
        self,
        model: str,
        messages: list[Message],
        tools: list[ToolDescriptor],
        think: bool = True,
    ) -> Message:
        """Send the conversation to the model and return its reply.

        Args:
            model: The model name to use for the chat
            messages: The full conversation history
            tools: Descriptors of the tools the model may call
            think: Request the model's reasoning trace alongside the content

        Returns:
            Message: The single assistant message, possibly with tool calls

        Raises:
            ollama.ResponseError: If the backend rejects the request
            httpx.HTTPError: On transport failures
        """
        logger.debug(
            f"Chat request: model={model}, messages={len(messages)}, tools={len(tools)}"
        )

        response = await self._client.chat(
            model=model,
            messages=[message_to_ollama(m) for m in messages],
            tools=[t.to_ollama() for t in tools],
            stream=False,
            think=think,
        )

        message = message_from_ollama(response["message"])
        logger.debug(
            f"Chat response: content_length={len(message.content)}, "
            f"tool_calls={[c.name for c in message.tool_calls]}"
        )
        return message

    async def close(self) -> None:
        """Close the client and clean up resources."""
        # ollama.AsyncClient uses httpx internally which handles cleanup
        logger.debug("OllamaClient closed")
