"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import asyncio
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brain_agent import __version__
from brain_agent.config import BrainSettings
from brain_agent.factory import create_agent, validate_model
from brain_agent.ollama import OllamaClient
from brain_agent.routers import conversation, health, tools

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Creates the Ollama client, connects the configured MCP servers and
    builds the agent once at startup. The MCP connections stay open until
    shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: BrainSettings = app.state.settings
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()

    async with AsyncExitStack() as stack:
        agent = await create_agent(settings, app.state.ollama_client, stack)
        if connected:
            logger.info("Successfully connected to Ollama")
            agent.think = await validate_model(
                app.state.ollama_client, settings.model, settings.think
            )
        else:
            logger.warning("Could not connect to Ollama - check if server is running")

        app.state.agent = agent
        app.state.agent_lock = asyncio.Lock()

        yield

    if hasattr(app.state, "ollama_client"):
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: BrainSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional BrainSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from brain_agent.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="brain-agent",
        description="Tool-calling conversational agent for Ollama models",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(tools.router)
    app.include_router(conversation.router)

    return app
