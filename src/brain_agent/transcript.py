"""Flattened, markdown text representation of the conversation."""

import json
from typing import Iterable

from brain_agent.conversation import Message


def format_message(message: Message) -> str:
    """Flatten a message into displayable markdown.

    Tool call requests are serialized as fenced JSON blocks in place of the
    plain content. A reasoning trace, if any, is quoted ahead of the rest.
    """
    if message.tool_calls:
        body = "\n\n".join(
            "```json\n"
            + json.dumps(call.to_dict()["function"], indent=2, ensure_ascii=False)
            + "\n```"
            for call in message.tool_calls
        )
    else:
        body = message.content

    if message.thinking.strip():
        quoted = "\n".join(f"> {line}" for line in message.thinking.strip().splitlines())
        return f"{quoted}\n\n{body}" if body else quoted
    return body


def render_transcript(messages: Iterable[Message]) -> str:
    """Render every message under a heading naming its role.

    Tool results carry their tool's name as role, so they are labeled by
    the tool that produced them.
    """
    parts = [f"# {m.role}\n{format_message(m)}\n\n" for m in messages]
    return "".join(parts)
