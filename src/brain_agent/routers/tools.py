"""Tool listing endpoint."""

from fastapi import APIRouter, Depends

from brain_agent.agent import Agent
from brain_agent.dependencies import get_agent
from brain_agent.models.tools import ToolListResponse

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse)
async def list_tools(agent: Agent = Depends(get_agent)) -> ToolListResponse:
    """List the descriptors of all tools offered to the model."""
    tools = agent.registry.list()
    return ToolListResponse(tools=tools, count=len(tools))
