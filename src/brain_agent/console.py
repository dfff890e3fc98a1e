"""Interactive terminal driver for the agent.

Collects the session settings and user prompts with rich prompts, shows a
status indicator while the agent works and renders the final transcript as
markdown. This is the layer that turns errors into human-facing output.
"""

import asyncio
import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.prompt import Prompt

from brain_agent.agent import Agent
from brain_agent.conversation import USER, ConversationHistory, Message
from brain_agent.transcript import format_message, render_transcript

logger = logging.getLogger(__name__)


def ask_prompt(console: Console, title: str = "prompt") -> str:
    """Ask until the user enters a non-empty prompt."""
    while True:
        text = Prompt.ask(f"[bold cyan]{title}[/bold cyan]", console=console)
        if text.strip():
            return text
        console.print("[red]`prompt` cannot be empty.[/red]")


def ask_limit(console: Console, default: int) -> int:
    """Ask for the history limit, re-asking on invalid input."""
    while True:
        raw = Prompt.ask("history limit", default=str(default), console=console)
        try:
            limit = int(raw)
        except ValueError:
            console.print(f"[red]{raw!r} is not an integer.[/red]")
            continue
        if limit < 0:
            console.print("[red]history limit cannot be negative.[/red]")
            continue
        return limit


def since_last_user_turn(history: ConversationHistory) -> list[Message]:
    """Messages appended after the operator last spoke, tool results included."""
    messages = history.messages
    for index in range(len(messages) - 1, -1, -1):
        if messages[index].role == USER:
            return list(messages[index + 1 :])
    return list(messages)


def show_transcript(console: Console, history: ConversationHistory) -> None:
    text = render_transcript(history)
    try:
        console.print(Markdown(text))
    except Exception as e:
        logger.debug(f"Markdown rendering failed, printing plain text: {e}")
        console.print(text, markup=False)


class ConsoleSession:
    """Runs one agent conversation in the terminal."""

    def __init__(self, agent: Agent, console: Console | None = None) -> None:
        self.agent = agent
        self.console = console or Console()

    def setup(self) -> None:
        """Collect model, history limit, system prompt and the first prompt."""
        self.agent.model = Prompt.ask(
            "model", default=self.agent.model, console=self.console
        )
        self.agent.limit = ask_limit(self.console, self.agent.limit)
        system = Prompt.ask("system", default="", console=self.console)
        self.agent.start(system, ask_prompt(self.console))

    async def prompt_user(self, history: ConversationHistory) -> str:
        for message in since_last_user_turn(history):
            self.console.rule(f"[bold]{message.role}[/bold]")
            self.console.print(Markdown(format_message(message)))
        # Asked on the loop thread: nothing else runs while the operator
        # types, and Ctrl-C raises KeyboardInterrupt inside the prompt
        return ask_prompt(self.console)

    async def run(self) -> None:
        """Run the conversation, then show the transcript.

        The transcript is shown even when the session ends with an operator
        interrupt, which arrives as KeyboardInterrupt at the prompt and as
        cancellation during a step. Any other error is re-raised after
        showing it.
        """
        try:
            await self.agent.run(
                self.prompt_user,
                status=lambda: self.console.status("thinking..."),
            )
        except (KeyboardInterrupt, EOFError, asyncio.CancelledError):
            self.console.print("\n[yellow]Session interrupted.[/yellow]")
        finally:
            show_transcript(self.console, self.agent.history)
