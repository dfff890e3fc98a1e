"""Agent control loop.

The agent advances the conversation one step at a time. Each step inspects
the latest message in the history and either executes the tool calls it
carries or asks the model for the next message. Soliciting user input is
left to the outer loop in ``run`` and to the drivers built on it.
"""

import asyncio
import logging
from contextlib import AbstractContextManager, nullcontext
from enum import Enum
from typing import Awaitable, Callable

from brain_agent.conversation import (
    ASSISTANT,
    ConversationHistory,
    Message,
    ToolCallRequest,
)
from brain_agent.errors import AgentStateError, EmptyPromptError
from brain_agent.ollama import OllamaClient
from brain_agent.tools import ToolRegistry

logger = logging.getLogger(__name__)

PromptUser = Callable[[ConversationHistory], Awaitable[str]]


class AgentState(str, Enum):
    """What the agent needs next, derived from the latest message."""

    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_TOOL_EXECUTION = "awaiting_tool_execution"
    AWAITING_MODEL_RESPONSE = "awaiting_model_response"


def state_of(message: Message) -> AgentState:
    if message.tool_calls:
        return AgentState.AWAITING_TOOL_EXECUTION
    if message.role.lower() == ASSISTANT:
        return AgentState.AWAITING_USER_INPUT
    return AgentState.AWAITING_MODEL_RESPONSE


class Agent:
    """Drives one conversation between the user, the model and the tools.

    The agent exclusively owns its history and its tool registry; the
    registry is frozen on construction. Every error aborts the current step
    and propagates to the caller, leaving the history as it was before the
    step. Nothing is retried and no error turn is ever appended.

    Attributes:
        client: The model backend client
        registry: The tools offered to the model
        model: The model name
        limit: History length limit; 0 means no limit
        think: Request reasoning traces from the model
        parallel_tools: Execute a batch of tool calls concurrently
        step_timeout: Seconds before a step is cancelled, None for no timeout
        history: The conversation transcript
    """

    def __init__(
        self,
        client: OllamaClient,
        registry: ToolRegistry,
        model: str,
        limit: int = 0,
        think: bool = True,
        parallel_tools: bool = False,
        step_timeout: float | None = None,
    ) -> None:
        if limit < 0:
            raise ValueError(f"history limit must be >= 0, got {limit}")

        registry.freeze()
        self.client = client
        self.registry = registry
        self.model = model
        self.limit = limit
        self.think = think
        self.parallel_tools = parallel_tools
        self.step_timeout = step_timeout
        self.history = ConversationHistory()

    def start(self, system: str, prompt: str) -> None:
        """Seed a fresh history with a system and a user message.

        Raises:
            EmptyPromptError: If ``prompt`` is empty
        """
        if not prompt.strip():
            raise EmptyPromptError()
        self.history = ConversationHistory.seed(system, prompt)
        logger.info(f"Started conversation with model {self.model}")

    @property
    def started(self) -> bool:
        return len(self.history) > 0

    @property
    def state(self) -> AgentState:
        """Current state of the conversation.

        Raises:
            AgentStateError: If the conversation has not been started
        """
        if not self.started:
            raise AgentStateError("conversation has not been started")
        return state_of(self.history.latest)

    @property
    def within_limit(self) -> bool:
        return self.limit == 0 or len(self.history) <= self.limit

    def submit(self, text: str) -> None:
        """Append a user message in reply to the assistant.

        Raises:
            AgentStateError: If the agent is not awaiting user input
            EmptyPromptError: If ``text`` is empty
        """
        if self.state is not AgentState.AWAITING_USER_INPUT:
            raise AgentStateError(f"cannot accept user input while {self.state.value}")
        if not text.strip():
            raise EmptyPromptError()
        self.history.append(Message.user(text))

    async def step(self) -> None:
        """Advance the conversation by one tool batch or one model call.

        Raises:
            TimeoutError: If ``step_timeout`` elapses
            asyncio.CancelledError: If the step is cancelled
        """
        if self.step_timeout is None:
            await self._step()
        else:
            await asyncio.wait_for(self._step(), timeout=self.step_timeout)

    async def _step(self) -> None:
        if not self.started:
            raise AgentStateError("conversation has not been started")
        latest = self.history.latest
        if latest.tool_calls:
            await self._call_tools(latest.tool_calls)
        else:
            await self._chat()

    async def _call_tools(self, calls: list[ToolCallRequest]) -> None:
        # Results are appended only once the whole batch has succeeded
        if self.parallel_tools and len(calls) > 1:
            tasks = [asyncio.ensure_future(self.registry.invoke(c)) for c in calls]
            try:
                results = list(await asyncio.gather(*tasks))
            except BaseException:
                for task in tasks:
                    task.cancel()
                raise
        else:
            results = []
            for call in calls:
                results.append(await self.registry.invoke(call))

        self.history.extend(results)
        logger.debug(f"Appended {len(results)} tool result(s)")

    async def _chat(self) -> None:
        message = await self.client.chat(
            model=self.model,
            messages=list(self.history.messages),
            tools=self.registry.list(),
            think=self.think,
        )
        self.history.append(message)

    async def advance(self) -> list[Message]:
        """Step until the model hands the turn back to the user.

        Stops early when the history limit is exceeded.

        Returns:
            The messages appended during this call
        """
        start = len(self.history)
        while (
            self.within_limit
            and self.state is not AgentState.AWAITING_USER_INPUT
        ):
            await self.step()
        return list(self.history.messages[start:])

    async def run(
        self,
        prompt_user: PromptUser,
        status: Callable[[], AbstractContextManager] | None = None,
    ) -> None:
        """Run the conversation until the history limit is exceeded.

        With ``limit == 0`` this only returns when a collaborator raises,
        e.g. on operator interrupt.

        Args:
            prompt_user: Supplies the next user message
            status: Optional factory for a context manager wrapped around
                each step, such as a "thinking..." indicator
        """
        while self.within_limit:
            if self.state is AgentState.AWAITING_USER_INPUT:
                self.submit(await prompt_user(self.history))
            else:
                with status() if status is not None else nullcontext():
                    await self.step()
        logger.info(f"History limit {self.limit} reached after {len(self.history)} messages")
