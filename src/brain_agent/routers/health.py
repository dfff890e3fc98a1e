"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from brain_agent import __version__
from brain_agent.agent import Agent
from brain_agent.models.health import HealthResponse
from brain_agent.ollama import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Return the service status and the Ollama connectivity.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    ollama_connected = None
    ollama_host = None

    if hasattr(request.app.state, "ollama_client"):
        ollama_client: OllamaClient = request.app.state.ollama_client
        ollama_host = ollama_client.host

        try:
            ollama_connected = await ollama_client.check_connection()
        except Exception as e:
            logger.warning(f"Ollama connectivity check failed: {e}")
            ollama_connected = False

    agent: Agent | None = getattr(request.app.state, "agent", None)

    return HealthResponse(
        status="ok",
        version=__version__,
        ollama_connected=ollama_connected,
        ollama_host=ollama_host,
        model=agent.model if agent is not None else None,
        tool_count=len(agent.registry) if agent is not None else None,
    )
