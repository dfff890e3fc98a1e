"""Append-only conversation history owned by one agent."""

import logging
from typing import Iterable, Iterator

from brain_agent.conversation.types import Message

logger = logging.getLogger(__name__)


class ConversationHistory:
    """Ordered transcript of the messages exchanged in one session.

    Messages are only ever appended; there is no edit or removal operation.
    """

    def __init__(self, messages: Iterable[Message] | None = None) -> None:
        self._messages: list[Message] = list(messages or [])

    @classmethod
    def seed(cls, system: str, prompt: str) -> "ConversationHistory":
        """Create the initial history: one system and one user message."""
        return cls([Message.system(system), Message.user(prompt)])

    def append(self, message: Message) -> None:
        if message.is_anomalous:
            logger.warning("Assistant message has neither content nor tool calls")
        self._messages.append(message)

    def extend(self, messages: Iterable[Message]) -> None:
        """Append several messages in order as a single mutation."""
        batch = list(messages)
        for message in batch:
            if message.is_anomalous:
                logger.warning("Assistant message has neither content nor tool calls")
        self._messages.extend(batch)

    @property
    def latest(self) -> Message:
        """The most recent message.

        Raises:
            IndexError: If the history is empty
        """
        if not self._messages:
            raise IndexError("conversation history is empty")
        return self._messages[-1]

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))
