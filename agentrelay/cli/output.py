"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from agentrelay.llm.types import Message, Role
from agentrelay.sink import ResponseSink
from agentrelay.tools.base import Tool
from agentrelay.types import ChatRequest

ROLE_COLORS = {
    Role.USER: "blue",
    Role.ASSISTANT: "green",
    Role.SYSTEM: "dim",
}


class ConsoleSink(ResponseSink):
    """Streams fragments straight to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.last_completion: tuple[str, dict | None, str | None] | None = None

    async def stream_chunk(self, request: ChatRequest, text: str) -> None:
        self.console.print(text, end="", markup=False, highlight=False)

    async def complete(
        self,
        request: ChatRequest,
        text: str,
        usage: dict[str, Any] | None = None,
        file_url: str | None = None,
    ) -> None:
        self.last_completion = (text, usage, file_url)
        self.console.print()
        if file_url:
            self.console.print(f"[dim]attachment:[/dim] {file_url}")
        if usage:
            self.console.print(
                f"[dim]tokens: prompt={usage.get('prompt_tokens', '?')} "
                f"completion={usage.get('completion_tokens', '?')}[/dim]"
            )

    async def send_error(self, request: ChatRequest, message: str) -> None:
        self.console.print(f"\n[red]Error:[/red] {message}")


class OutputFormatter:
    """Rich-based output formatting for the relay CLI."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def format_tool_list(self, tools: list[Tool]) -> None:
        table = Table(title="Registered Tools", show_lines=True)
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Required", no_wrap=True)
        table.add_column("Description")

        for t in tools:
            required = ", ".join(t.parameters.get("required", []))
            table.add_row(t.name, required, t.description)

        self.console.print(table)

    def format_tool_info(self, tool: Tool) -> None:
        self.console.print(Panel(
            f"[bold]{tool.name}[/bold]\n\n{tool.description}",
            title=f"Tool: {tool.name}",
        ))
        schema_json = json.dumps(tool.parameters, indent=2)
        self.console.print(Syntax(schema_json, "json", theme="monokai"))

    def format_history(self, messages: list[Message]) -> None:
        if not messages:
            self.console.print("[dim]No history.[/dim]")
            return

        for msg in messages:
            ts = msg.created_at.strftime("%H:%M:%S")
            color = ROLE_COLORS.get(msg.role, "white")
            self.console.print(
                f"  [{color}]{ts} {msg.role.value:>9s}[/{color}]  {msg.content[:100]}",
                highlight=False,
            )

    def format_threads(self, threads: dict[str, int]) -> None:
        if not threads:
            self.console.print("[dim]No threads.[/dim]")
            return

        table = Table(title="Threads")
        table.add_column("Thread", style="cyan", no_wrap=True)
        table.add_column("Messages", justify="right")
        for thread_id, count in sorted(threads.items()):
            table.add_row(thread_id, str(count))
        self.console.print(table)

    def format_config(self, config: dict) -> None:
        config_json = json.dumps(config, indent=2, default=str)
        self.console.print(Syntax(config_json, "json", theme="monokai"))
