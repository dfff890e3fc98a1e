"""CLI entry point for brain-agent.

This module provides the command-line interface. It can be invoked as
`brain-agent` (via the script entry point) or `python -m brain_agent`.

    brain-agent chat     interactive conversation in the terminal (default)
    brain-agent serve    HTTP API driving a single conversation
"""

import argparse
import asyncio
import logging
import sys
from contextlib import AsyncExitStack, suppress
from typing import Any, Coroutine

from brain_agent import __version__
from brain_agent.config import BrainSettings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brain-agent",
        description="Tool-calling conversational agent for Ollama models",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"brain-agent {__version__}",
    )

    parser.add_argument(
        "command",
        nargs="?",
        default="chat",
        choices=["chat", "serve"],
        help="Run an interactive terminal session or the HTTP server (default: chat)",
    )

    parser.add_argument(
        "--model",
        type=str,
        default=None,
        help="Model to chat with (default: qwen3, can be set via BRAIN_MODEL)",
    )

    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="History length limit, 0 for unlimited (default: 0, can be set via BRAIN_HISTORY_LIMIT)",
    )

    parser.add_argument(
        "--ollama-host",
        type=str,
        default=None,
        help="Ollama server URL (default: http://localhost:11434, can be set via BRAIN_OLLAMA_HOST)",
    )

    parser.add_argument(
        "--no-think",
        action="store_true",
        help="Do not request reasoning traces from the model",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the server to (default: 127.0.0.1, can be set via BRAIN_HOST)",
    )

    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind the server to (default: 8000, can be set via BRAIN_PORT)",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: INFO, can be set via BRAIN_LOG_LEVEL)",
    )

    return parser


def settings_from_args(args: argparse.Namespace) -> BrainSettings:
    """Build settings; CLI args override environment variables."""
    settings_kwargs = {}
    if args.model is not None:
        settings_kwargs["model"] = args.model
    if args.limit is not None:
        settings_kwargs["history_limit"] = args.limit
    if args.ollama_host is not None:
        settings_kwargs["ollama_host"] = args.ollama_host
    if args.no_think:
        settings_kwargs["think"] = False
    if args.host is not None:
        settings_kwargs["host"] = args.host
    if args.port is not None:
        settings_kwargs["port"] = args.port
    if args.log_level is not None:
        settings_kwargs["log_level"] = args.log_level

    return BrainSettings(**settings_kwargs)


async def run_console(settings: BrainSettings) -> None:
    """Run one interactive terminal conversation."""
    from brain_agent.console import ConsoleSession
    from brain_agent.factory import create_agent, validate_model
    from brain_agent.ollama import OllamaClient

    client = OllamaClient(host=settings.ollama_host)
    async with AsyncExitStack() as stack:
        agent = await create_agent(settings, client, stack)
        session = ConsoleSession(agent)
        session.setup()
        agent.think = await validate_model(client, agent.model, settings.think)
        await session.run()
    await client.close()


def run_until_interrupted(coro: Coroutine[Any, Any, None]) -> int:
    """Run an interactive session to completion, ending it on Ctrl-C.

    ``asyncio.run`` turns SIGINT into cancellation of the main task, which
    cannot interrupt a blocking prompt. Here the default handler stays in
    place: Ctrl-C raises KeyboardInterrupt at the prompt, and during a step
    the session is cancelled and allowed to finish its cleanup.

    Returns:
        int: 0 when the session finished, including one the operator ended
            at the prompt, 130 when the interrupt escaped the session
    """
    loop = asyncio.new_event_loop()
    task = loop.create_task(coro)
    try:
        loop.run_until_complete(task)
    except KeyboardInterrupt:
        if not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                loop.run_until_complete(task)
        return 130
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
    return 0


def serve(settings: BrainSettings) -> None:
    import uvicorn

    from brain_agent import create_app

    app = create_app(settings=settings)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main() -> int:
    """Main entry point for the brain-agent CLI."""
    args = build_parser().parse_args()
    settings = settings_from_args(args)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        serve(settings)
        return 0

    try:
        return run_until_interrupted(run_console(settings))
    except Exception as e:
        logger.error(f"Session failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
