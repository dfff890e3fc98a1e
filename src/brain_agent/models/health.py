"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service status, backend connectivity and the agent's configuration.

    Backend and agent fields are None until the lifespan has created them.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of brain-agent")
    ollama_connected: bool | None = Field(
        default=None, description="Whether the Ollama server answered"
    )
    ollama_host: str | None = Field(default=None, description="Ollama host URL")
    model: str | None = Field(default=None, description="Model the agent talks to")
    tool_count: int | None = Field(
        default=None, description="Number of tools offered to the model"
    )
