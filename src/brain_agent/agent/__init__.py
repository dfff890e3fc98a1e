"""Agent control loop.

This package provides the Agent state machine that alternates between
model calls and tool execution.
"""

from brain_agent.agent.loop import Agent, AgentState, PromptUser, state_of

__all__ = ["Agent", "AgentState", "PromptUser", "state_of"]
