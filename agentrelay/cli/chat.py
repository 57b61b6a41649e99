"""Interactive chat session handler."""

from __future__ import annotations

import asyncio
import uuid

from rich.console import Console

from agentrelay.cli.output import OutputFormatter
from agentrelay.orchestrator.core import MessageProcessor
from agentrelay.types import ChatRequest


class ChatHandler:
    """
    Manages the interactive chat loop.

    Every line typed becomes a ``ChatRequest`` for the same thread and is
    handed to the ``MessageProcessor``; the processor's sink prints the
    streamed reply.
    """

    def __init__(
        self,
        processor: MessageProcessor,
        thread_id: str,
        model: str = "",
        system_message: str | None = None,
        variables: list[dict] | None = None,
        console: Console | None = None,
    ) -> None:
        self.processor = processor
        self.thread_id = thread_id
        self.model = model
        self.system_message = system_message
        self.variables = variables or []
        self.console = console or Console()
        self.formatter = OutputFormatter(self.console)
        self._running = True

    def build_request(self, text: str) -> ChatRequest:
        return ChatRequest(
            thread_id=self.thread_id,
            message=text,
            response_uuid=str(uuid.uuid4()),
            model=self.model,
            system_message=self.system_message,
            variables=self.variables,
        )

    async def handle_command(self, command: str) -> bool:
        """
        Handle inline commands. Returns True if the command was handled.
        """
        parts = command.strip().split(None, 1)
        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else ""
        store = self.processor.store

        if cmd == "/quit":
            self._running = False
            self.console.print("[dim]Goodbye.[/dim]")
            return True

        if cmd == "/history":
            self.formatter.format_history(store.history(arg or self.thread_id))
            return True

        if cmd == "/clear":
            store.clear(arg or self.thread_id)
            self.console.print(f"  Cleared thread [bold]{arg or self.thread_id}[/bold]")
            return True

        if cmd == "/threads":
            self.formatter.format_threads(
                {key: len(store.history(key)) for key in store.keys()}
            )
            return True

        if cmd == "/thread":
            if arg:
                self.thread_id = arg
            self.console.print(f"  Active thread: [bold]{self.thread_id}[/bold]")
            return True

        if cmd == "/tools":
            self.formatter.format_tool_list(self.processor.registry.list())
            return True

        if cmd == "/help":
            self.console.print(
                "  [bold]Commands:[/bold]\n"
                "  /quit           - Exit the chat\n"
                "  /history [ID]   - Show thread history\n"
                "  /clear [ID]     - Forget thread history\n"
                "  /threads        - List threads in memory\n"
                "  /thread [ID]    - Show or switch the active thread\n"
                "  /tools          - List available tools\n"
                "  /help           - Show this help\n"
            )
            return True

        return False

    async def handle_input(self, user_input: str) -> None:
        await self.processor.process(self.build_request(user_input))

    async def run_loop(self) -> None:
        """Main interactive loop."""
        self.console.print(
            "[bold]agentrelay[/bold] - LLM chat relay\n"
            "[dim]Type /help for commands, /quit to exit.[/dim]\n"
        )

        while self._running:
            try:
                user_input = await asyncio.get_event_loop().run_in_executor(
                    None, lambda: input("you> ").strip()
                )
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[dim]Goodbye.[/dim]")
                break

            if not user_input:
                continue

            if user_input.startswith("/"):
                handled = await self.handle_command(user_input)
                if handled:
                    continue

            self.console.print("[dim]assistant>[/dim] ", end="")
            await self.handle_input(user_input)
