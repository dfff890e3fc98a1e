"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type.
"""

from brain_agent.routers import conversation, health, tools

__all__ = ["conversation", "health", "tools"]
