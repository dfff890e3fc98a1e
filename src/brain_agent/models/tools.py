"""Response model for the tool listing endpoint."""

from pydantic import BaseModel, Field

from brain_agent.tools import ToolDescriptor


class ToolListResponse(BaseModel):
    """All tools offered to the model."""

    tools: list[ToolDescriptor] = Field(description="Registered tool descriptors")
    count: int = Field(description="Number of registered tools")
