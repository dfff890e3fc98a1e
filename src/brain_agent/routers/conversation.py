"""Conversation API endpoints.

The server drives a single conversation. Starting a conversation replaces
the previous one; each request advances the agent until the model hands
the turn back to the user or the history limit is exceeded. This router
is the layer that translates agent errors into HTTP errors.
"""

import asyncio
import logging

import httpx
import ollama
from fastapi import APIRouter, Depends, HTTPException

from brain_agent.agent import Agent
from brain_agent.dependencies import get_agent, get_agent_lock
from brain_agent.errors import (
    AgentStateError,
    EmptyPromptError,
    SchemaViolationError,
    ToolArgumentError,
    ToolExecutionError,
    UnknownToolError,
)
from brain_agent.models.conversation import (
    AdvanceResponse,
    ConversationResponse,
    MessageResponse,
    SendMessageRequest,
    StartConversationRequest,
)
from brain_agent.transcript import render_transcript

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/conversation", tags=["conversation"])


def _error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": {"code": code, "message": message, "details": {}}},
    )


def _to_http_error(e: Exception) -> HTTPException:
    """Map an error raised by the agent to an HTTP error."""
    if isinstance(e, EmptyPromptError):
        return _error(400, "empty_prompt", str(e))
    if isinstance(e, AgentStateError):
        return _error(409, "invalid_state", str(e))
    if isinstance(e, UnknownToolError):
        return _error(422, "unknown_tool", str(e))
    if isinstance(e, ToolArgumentError):
        return _error(422, "tool_argument_error", str(e))
    if isinstance(e, SchemaViolationError):
        return _error(422, "schema_violation", str(e))
    if isinstance(e, ToolExecutionError):
        return _error(502, "tool_error", str(e))
    if isinstance(e, (asyncio.TimeoutError, TimeoutError)):
        return _error(504, "timeout", "Step timed out")
    if isinstance(e, (ollama.ResponseError, httpx.HTTPError)):
        return _error(502, "backend_error", f"Backend request failed: {e}")
    return _error(500, "internal_error", str(e))


async def _advance(agent: Agent) -> AdvanceResponse:
    try:
        messages = await agent.advance()
    except Exception as e:
        logger.error(f"Conversation step failed: {e}")
        raise _to_http_error(e)

    return AdvanceResponse(
        state=agent.state.value,
        limit_reached=not agent.within_limit,
        history_length=len(agent.history),
        messages=[MessageResponse.from_message(m) for m in messages],
    )


@router.post("", response_model=AdvanceResponse)
async def start_conversation(
    request_body: StartConversationRequest,
    agent: Agent = Depends(get_agent),
    lock: asyncio.Lock = Depends(get_agent_lock),
) -> AdvanceResponse:
    """Start a new conversation and advance it until the user's turn.

    Raises:
        HTTPException: 400 on an empty prompt, 422 on tool errors,
            502 on backend errors, 504 on timeout
    """
    async with lock:
        try:
            agent.start(request_body.system, request_body.prompt)
        except EmptyPromptError as e:
            raise _to_http_error(e)
        return await _advance(agent)


@router.post("/messages", response_model=AdvanceResponse)
async def send_message(
    request_body: SendMessageRequest,
    agent: Agent = Depends(get_agent),
    lock: asyncio.Lock = Depends(get_agent_lock),
) -> AdvanceResponse:
    """Reply to the assistant and advance until the user's turn.

    Raises:
        HTTPException: 404 without a conversation, 409 if the limit is
            reached or the agent is not awaiting input, 400 on empty input
    """
    async with lock:
        if not agent.started:
            raise _error(404, "no_conversation", "No conversation has been started")
        if not agent.within_limit:
            raise _error(409, "limit_reached", "History limit reached")
        try:
            agent.submit(request_body.message)
        except (AgentStateError, EmptyPromptError) as e:
            raise _to_http_error(e)
        return await _advance(agent)


@router.get("", response_model=ConversationResponse)
async def get_conversation(agent: Agent = Depends(get_agent)) -> ConversationResponse:
    """Return the conversation history and its markdown transcript."""
    if not agent.started:
        raise _error(404, "no_conversation", "No conversation has been started")

    return ConversationResponse(
        model=agent.model,
        state=agent.state.value,
        limit=agent.limit,
        limit_reached=not agent.within_limit,
        messages=[MessageResponse.from_message(m) for m in agent.history],
        transcript=render_transcript(agent.history),
    )
