"""Configuration module for brain-agent using pydantic-settings."""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MCPServerConfig(BaseModel):
    """A stdio MCP server whose tools are offered to the model."""

    name: str
    command: str
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)


class BrainSettings(BaseSettings):
    """Main configuration settings for brain-agent.

    All settings can be overridden via environment variables with the BRAIN_ prefix.
    For example, BRAIN_OLLAMA_HOST will override the ollama_host setting.
    Complex values such as BRAIN_MCP_SERVERS are read as JSON.
    """

    # Conversation
    model: str = "qwen3"
    history_limit: int = Field(default=0, ge=0)
    think: bool = True
    parallel_tools: bool = False
    step_timeout: float | None = None

    # Ollama
    ollama_host: str = "http://localhost:11434"

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Built-in tools
    search_url: str = "https://html.duckduckgo.com/html/"
    weather_url: str = "https://wttr.in"
    http_timeout: float = 30.0

    # MCP
    mcp_servers: list[MCPServerConfig] = Field(default_factory=list)
    mcp_init_timeout: float = 30.0

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="BRAIN_")
