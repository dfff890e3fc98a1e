"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and the agent.
"""

import asyncio
from functools import lru_cache

from fastapi import HTTPException, Request

from brain_agent.agent import Agent
from brain_agent.config import BrainSettings


@lru_cache
def get_settings() -> BrainSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the BRAIN_ prefix.

    Returns:
        BrainSettings: The application configuration settings.
    """
    return BrainSettings()


def get_agent(request: Request) -> Agent:
    """Get the agent created during application startup.

    Raises:
        HTTPException: If the agent is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "agent"):
        raise HTTPException(
            status_code=503,
            detail="Agent not initialized",
        )
    return request.app.state.agent


def get_agent_lock(request: Request) -> asyncio.Lock:
    """Get the lock serializing access to the single conversation."""
    return request.app.state.agent_lock
