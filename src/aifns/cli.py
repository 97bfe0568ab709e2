"""Interactive command-line chat.

Reads user queries from the terminal, runs each through the conversation
loop and prints the assistant's answer. The transcript, including function
calls and results, is kept in memory for the length of the session.
"""

import asyncio
import logging
import threading
from typing import Awaitable, Callable

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt

from aifns.config import AifnsSettings
from aifns.conversation import ConversationError, ConversationOrchestrator, Message
from aifns.functions.builtin import create_default_registry
from aifns.ollama import OllamaClient

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"

InputReader = Callable[[], Awaitable[str]]


def configure_logging(level: str, console: Console | None = None) -> None:
    """Send log records through rich, quieting HTTP client noise."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(console=console, show_path=False, rich_tracebacks=True)
        ],
        force=True,
    )
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _resolve(future: asyncio.Future, answer: str | None, error: Exception | None) -> None:
    if future.done():
        return
    if error is not None:
        future.set_exception(error)
    else:
        future.set_result(answer)


def prompt_reader(console: Console) -> InputReader:
    """Read a line with a rich prompt without blocking the event loop.

    The prompt runs in a daemon thread: when Ctrl-C cancels the chat, the
    process can exit while that thread is still waiting for input.
    """

    async def read() -> str:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        def ask() -> None:
            try:
                answer = Prompt.ask("[cyan]User[/cyan]", console=console)
            except Exception as e:
                loop.call_soon_threadsafe(_resolve, future, None, e)
            else:
                loop.call_soon_threadsafe(_resolve, future, answer, None)

        threading.Thread(target=ask, name="aifns-prompt", daemon=True).start()
        return await future

    return read


async def chat_loop(
    orchestrator: ConversationOrchestrator,
    console: Console,
    read_input: InputReader,
) -> list[Message]:
    """Run the read/print loop until the user types ``exit``.

    A failed conversation turn is reported and its user message dropped, so
    the next query continues from the last good transcript.

    Args:
        orchestrator: Orchestrator used for every query
        console: Where output is printed
        read_input: Coroutine function returning the next user line

    Returns:
        list[Message]: The transcript at the end of the session.
    """
    console.print("[green]Welcome to the aifns chat![/green]")
    console.print("[green]Start by typing a query, or type 'exit' to exit.[/green]")

    messages: list[Message] = []

    while True:
        try:
            answer = await read_input()
        except (EOFError, KeyboardInterrupt):
            answer = EXIT_COMMAND
        except asyncio.CancelledError:
            console.print("[magenta]Goodbye![/magenta]")
            raise

        if answer.strip().lower() == EXIT_COMMAND:
            console.print("[magenta]Goodbye![/magenta]")
            return messages

        if not answer.strip():
            console.print("[red]You did not provide a query![/red]")
            continue

        pending = messages + [Message(role="user", content=answer)]

        try:
            result = await orchestrator.run(pending)
        except ConversationError as e:
            logger.debug(f"Conversation error details: {e.details}")
            console.print(f"[red]Error ({e.code}): {e.message}[/red]")
            continue
        except Exception as e:
            logger.error(f"Model request failed: {e}")
            console.print(f"[red]Could not reach the model: {e}[/red]")
            continue

        messages = result.transcript
        if result.functions_called:
            console.print(
                f"[dim]Functions used: {', '.join(result.functions_called)}[/dim]"
            )
        console.print(f"[magenta]Assistant:[/magenta] {result.content or ''}")


async def run_chat(settings: AifnsSettings, console: Console | None = None) -> None:
    """Build the client and registry from settings and start the chat loop."""
    console = console or Console()
    registry = create_default_registry(settings)
    client = OllamaClient(host=settings.ollama_host)

    if not await client.check_connection():
        console.print(
            f"[yellow]Could not connect to Ollama at {settings.ollama_host}[/yellow]"
        )

    orchestrator = ConversationOrchestrator(
        client=client,
        registry=registry,
        model=settings.model,
        max_turns=settings.max_turns,
        model_timeout=settings.model_timeout,
        function_timeout=settings.function_timeout,
    )

    try:
        await chat_loop(orchestrator, console, prompt_reader(console))
    finally:
        await client.close()
