"""Unit tests for the agent control loop."""

import asyncio

import pytest

from brain_agent.agent import Agent, AgentState, state_of
from brain_agent.conversation import ConversationHistory, Message, ToolCallRequest
from brain_agent.errors import (
    AgentStateError,
    EmptyPromptError,
    ToolArgumentError,
    UnknownToolError,
)
from brain_agent.tools import ToolRegistry


def assistant(content: str = "", *calls: ToolCallRequest) -> Message:
    return Message(role="assistant", content=content, tool_calls=list(calls))


@pytest.fixture
def registry(make_tool):
    registry = ToolRegistry()
    registry.add(make_tool("t1", output="one"), make_tool("t2", output="two"))
    return registry


@pytest.fixture
def agent(mock_backend, registry):
    agent = Agent(client=mock_backend, registry=registry, model="qwen3")
    agent.start("You are helpful.", "Hi")
    return agent


class TestState:
    """Tests for deriving the agent state from the latest message."""

    def test_tool_calls_await_execution(self):
        message = assistant("", ToolCallRequest(name="t1"))
        assert state_of(message) is AgentState.AWAITING_TOOL_EXECUTION

    def test_assistant_awaits_user(self):
        assert state_of(assistant("done")) is AgentState.AWAITING_USER_INPUT

    def test_role_comparison_ignores_case(self):
        message = Message(role="Assistant", content="done")
        assert state_of(message) is AgentState.AWAITING_USER_INPUT

    @pytest.mark.parametrize(
        "message",
        [
            Message.system("sys"),
            Message.user("hi"),
            Message.tool_result("t1", "one"),
        ],
    )
    def test_other_messages_await_model(self, message):
        assert state_of(message) is AgentState.AWAITING_MODEL_RESPONSE

    def test_state_before_start(self, mock_backend, registry):
        """Test that an unstarted agent has no state."""
        agent = Agent(client=mock_backend, registry=registry, model="qwen3")

        assert agent.started is False
        with pytest.raises(AgentStateError):
            agent.state


class TestConstruction:
    def test_registry_is_frozen(self, agent, registry):
        assert registry.frozen is True

    def test_negative_limit_rejected(self, mock_backend, registry):
        with pytest.raises(ValueError, match="limit"):
            Agent(client=mock_backend, registry=registry, model="qwen3", limit=-1)

    def test_start_rejects_empty_prompt(self, mock_backend, registry):
        agent = Agent(client=mock_backend, registry=registry, model="qwen3")

        with pytest.raises(EmptyPromptError):
            agent.start("system", "")

        assert len(agent.history) == 0

    def test_start_seeds_history(self, agent):
        assert [m.role for m in agent.history] == ["system", "user"]


class TestModelStep:
    """Tests for the AwaitingModelResponse branch."""

    @pytest.mark.asyncio
    async def test_plain_reply_appends_one_assistant_message(self, agent, mock_backend):
        """Test that [system, user] plus one model step has length 3."""
        await agent.step()

        assert len(agent.history) == 3
        assert agent.history.latest.role == "assistant"
        assert agent.history.latest.content == "Hello!"
        assert agent.state is AgentState.AWAITING_USER_INPUT

    @pytest.mark.asyncio
    async def test_request_contract(self, agent, mock_backend, registry):
        """Test that the full history and tool list are sent with think on."""
        await agent.step()

        kwargs = mock_backend.chat.await_args.kwargs
        assert kwargs["model"] == "qwen3"
        assert [m.role for m in kwargs["messages"]] == ["system", "user"]
        assert [t.name for t in kwargs["tools"]] == ["t1", "t2"]
        assert kwargs["think"] is True
        assert set(kwargs) == {"model", "messages", "tools", "think"}

    @pytest.mark.asyncio
    async def test_assistant_without_tool_calls_calls_model_again(self, agent, mock_backend):
        """Test that step never prompts: a final assistant turn goes back to the model."""
        await agent.step()
        await agent.step()

        assert mock_backend.chat.await_count == 2
        assert len(agent.history) == 4

    @pytest.mark.asyncio
    async def test_backend_error_leaves_history_unchanged(self, agent, mock_backend):
        mock_backend.chat.side_effect = ConnectionError("backend down")

        with pytest.raises(ConnectionError, match="backend down"):
            await agent.step()

        assert len(agent.history) == 2


class TestToolStep:
    """Tests for the AwaitingToolExecution branch."""

    @pytest.mark.asyncio
    async def test_results_appended_in_request_order(self, agent):
        agent.history.append(
            assistant("", ToolCallRequest(name="t2"), ToolCallRequest(name="t1"))
        )

        await agent.step()

        results = agent.history.messages[-2:]
        assert [m.role for m in results] == ["t2", "t1"]
        assert [m.content for m in results] == ["two", "one"]
        assert agent.state is AgentState.AWAITING_MODEL_RESPONSE

    @pytest.mark.asyncio
    async def test_failing_call_appends_nothing(self, mock_backend, make_tool):
        """Test the atomic batch policy: T1 succeeds, T2 fails, zero results."""
        first = make_tool("t1", output="one")
        second = make_tool("t2", error=ToolArgumentError("t2", "query", "not provided"))
        registry = ToolRegistry()
        registry.add(first, second)
        agent = Agent(client=mock_backend, registry=registry, model="qwen3")
        agent.start("", "Hi")
        agent.history.append(
            assistant("", ToolCallRequest(name="t1"), ToolCallRequest(name="t2"))
        )

        with pytest.raises(ToolArgumentError):
            await agent.step()

        assert len(first.calls) == 1
        assert len(agent.history) == 3
        assert agent.state is AgentState.AWAITING_TOOL_EXECUTION

    @pytest.mark.asyncio
    async def test_failure_stops_remaining_calls(self, mock_backend, make_tool):
        """Test that calls after a failing one are not executed."""
        failing = make_tool("t1", error=RuntimeError("boom"))
        later = make_tool("t2")
        registry = ToolRegistry()
        registry.add(failing, later)
        agent = Agent(client=mock_backend, registry=registry, model="qwen3")
        agent.start("", "Hi")
        agent.history.append(
            assistant("", ToolCallRequest(name="t1"), ToolCallRequest(name="t2"))
        )

        with pytest.raises(RuntimeError, match="boom"):
            await agent.step()

        assert later.calls == []

    @pytest.mark.asyncio
    async def test_unknown_tool_leaves_history_unchanged(self, agent, mock_backend):
        agent.history.append(assistant("", ToolCallRequest(name="nope")))
        before = len(agent.history)

        with pytest.raises(UnknownToolError):
            await agent.step()

        assert len(agent.history) == before
        mock_backend.chat.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_parallel_results_keep_request_order(self, mock_backend, make_tool):
        """Test that concurrent execution still appends in request order."""

        class SlowTool(make_tool):
            def __init__(self, name, output, delay):
                super().__init__(name, output=output)
                self.delay = delay

            async def run(self, call):
                await asyncio.sleep(self.delay)
                return await super().run(call)

        registry = ToolRegistry()
        registry.add(SlowTool("slow", "first", 0.05), SlowTool("fast", "second", 0))
        agent = Agent(
            client=mock_backend, registry=registry, model="qwen3", parallel_tools=True
        )
        agent.start("", "Hi")
        agent.history.append(
            assistant("", ToolCallRequest(name="slow"), ToolCallRequest(name="fast"))
        )

        await agent.step()

        assert [m.content for m in agent.history.messages[-2:]] == ["first", "second"]

    @pytest.mark.asyncio
    async def test_parallel_failure_appends_nothing(self, mock_backend, make_tool):
        registry = ToolRegistry()
        registry.add(make_tool("t1", output="one"), make_tool("t2", error=RuntimeError("x")))
        agent = Agent(
            client=mock_backend, registry=registry, model="qwen3", parallel_tools=True
        )
        agent.start("", "Hi")
        agent.history.append(
            assistant("", ToolCallRequest(name="t1"), ToolCallRequest(name="t2"))
        )

        with pytest.raises(RuntimeError):
            await agent.step()

        assert len(agent.history) == 3


class TestCancellation:
    """Tests for cancelling and timing out a step."""

    @pytest.mark.asyncio
    async def test_cancel_mid_model_call(self, agent, mock_backend):
        started = asyncio.Event()

        async def slow_chat(**kwargs):
            started.set()
            await asyncio.sleep(10)

        mock_backend.chat.side_effect = slow_chat

        task = asyncio.create_task(agent.step())
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert len(agent.history) == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("parallel", [False, True])
    async def test_cancel_mid_tool_call(self, mock_backend, make_tool, parallel):
        """Test that cancelling during a tool batch appends no partial results."""
        started = asyncio.Event()
        slow_cancelled = asyncio.Event()
        fast = make_tool("fast", output="done")
        slow = make_tool("slow")

        async def slow_run(call):
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                slow_cancelled.set()
                raise

        slow.run = slow_run
        registry = ToolRegistry()
        registry.add(fast, slow)
        agent = Agent(
            client=mock_backend,
            registry=registry,
            model="qwen3",
            parallel_tools=parallel,
        )
        agent.start("", "Hi")
        agent.history.append(
            assistant(
                "",
                ToolCallRequest(name="fast", arguments={"query": "a"}),
                ToolCallRequest(name="slow", arguments={"query": "b"}),
            )
        )

        task = asyncio.create_task(agent.step())
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        assert slow_cancelled.is_set()
        assert len(fast.calls) == 1
        assert len(agent.history) == 3
        assert agent.state is AgentState.AWAITING_TOOL_EXECUTION

    @pytest.mark.asyncio
    async def test_step_timeout(self, mock_backend, registry):
        async def slow_chat(**kwargs):
            await asyncio.sleep(10)

        mock_backend.chat.side_effect = slow_chat
        agent = Agent(
            client=mock_backend, registry=registry, model="qwen3", step_timeout=0.01
        )
        agent.start("", "Hi")

        with pytest.raises(asyncio.TimeoutError):
            await agent.step()

        assert len(agent.history) == 2


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_after_reply(self, agent):
        await agent.step()
        agent.submit("Thanks")

        assert agent.history.latest.role == "user"
        assert agent.history.latest.content == "Thanks"

    def test_submit_while_awaiting_model(self, agent):
        with pytest.raises(AgentStateError, match="awaiting_model_response"):
            agent.submit("again")

    @pytest.mark.asyncio
    async def test_submit_rejects_empty(self, agent):
        await agent.step()

        with pytest.raises(EmptyPromptError):
            agent.submit("   ")

        assert len(agent.history) == 3


class TestAdvance:
    @pytest.mark.asyncio
    async def test_advance_through_tool_calls(self, agent, mock_backend):
        """Test a model -> tools -> model round until the user's turn."""
        mock_backend.chat.side_effect = [
            assistant("", ToolCallRequest(name="t1", arguments={"query": "x"})),
            assistant("The answer is one."),
        ]

        appended = await agent.advance()

        assert [m.role for m in appended] == ["assistant", "t1", "assistant"]
        assert agent.state is AgentState.AWAITING_USER_INPUT
        assert len(agent.history) == 5

    @pytest.mark.asyncio
    async def test_advance_stops_at_limit(self, mock_backend, registry):
        mock_backend.chat.return_value = assistant("", ToolCallRequest(name="t1"))
        agent = Agent(client=mock_backend, registry=registry, model="qwen3", limit=3)
        agent.start("", "Hi")

        await agent.advance()

        assert len(agent.history) == 4
        assert agent.within_limit is False


class TestRun:
    """Tests for the outer loop."""

    @pytest.mark.asyncio
    async def test_run_prompts_until_limit(self, mock_backend, registry):
        agent = Agent(client=mock_backend, registry=registry, model="qwen3", limit=4)
        agent.start("", "Hi")
        prompts = []

        async def prompt_user(history: ConversationHistory) -> str:
            prompts.append(len(history))
            return "more"

        await agent.run(prompt_user)

        # system, user, assistant, user, assistant
        assert len(agent.history) == 5
        assert prompts == [3]
        assert [m.role for m in agent.history] == [
            "system",
            "user",
            "assistant",
            "user",
            "assistant",
        ]

    @pytest.mark.asyncio
    async def test_run_wraps_steps_in_status(self, mock_backend, registry):
        agent = Agent(client=mock_backend, registry=registry, model="qwen3", limit=2)
        agent.start("", "Hi")
        entered = []

        class Status:
            def __enter__(self):
                entered.append(True)

            def __exit__(self, *exc):
                return False

        async def prompt_user(history):
            raise AssertionError("should not prompt")

        await agent.run(prompt_user, status=Status)

        assert entered == [True]
        assert len(agent.history) == 3

    @pytest.mark.asyncio
    async def test_run_propagates_empty_prompt(self, mock_backend, registry):
        agent = Agent(client=mock_backend, registry=registry, model="qwen3")
        agent.start("", "Hi")

        async def prompt_user(history):
            return ""

        with pytest.raises(EmptyPromptError):
            await agent.run(prompt_user)

        assert len(agent.history) == 3

    @pytest.mark.asyncio
    async def test_run_with_unlimited_history_ends_on_interrupt(self, agent):
        """Test that limit 0 only ends when a collaborator raises."""

        async def prompt_user(history):
            if len(history) > 6:
                raise EOFError
            return "go on"

        with pytest.raises(EOFError):
            await agent.run(prompt_user)

        assert len(agent.history) == 7
