"""
Main CLI application for agentrelay.

Usage:
    relay chat [--thread ID] [--model NAME] [--system TEXT] [--verbose]
    relay tools list|info
    relay config show|validate
    relay version
"""

from __future__ import annotations

import asyncio
import logging
import os
import uuid
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from agentrelay import __version__
from agentrelay.config import RelayConfig, find_config_path, load_config

app = typer.Typer(name="relay", help="agentrelay - LLM chat relay with memory and tools")
tools_app = typer.Typer(help="Tool management")
config_app = typer.Typer(help="Configuration management")

app.add_typer(tools_app, name="tools")
app.add_typer(config_app, name="config")

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _setup_logging(cfg: RelayConfig, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _check_config(cfg: RelayConfig) -> None:
    """Raise ValueError for settings the runtime cannot start with."""
    if cfg.memory.max_history < 1:
        raise ValueError(f"memory.max_history must be >= 1, got {cfg.memory.max_history}")


def _setup_stack(
    cfg: RelayConfig,
    thread_id: str,
    model: str | None,
    system_message: str | None,
):
    """Wire up the full stack for chat."""
    from agentrelay.attachments import AttachmentProcessor
    from agentrelay.cli.chat import ChatHandler
    from agentrelay.cli.output import ConsoleSink
    from agentrelay.llm.providers import openai_provider_factory
    from agentrelay.memory.store import ConversationStore
    from agentrelay.orchestrator.core import MessageProcessor
    from agentrelay.tools import build_default_registry

    store = ConversationStore(max_history=cfg.memory.max_history)
    processor = MessageProcessor(
        store=store,
        provider_factory=openai_provider_factory(cfg.llm),
        registry=build_default_registry(cfg),
        sink=ConsoleSink(console),
        attachments=AttachmentProcessor(cfg.documents),
        llm_config=cfg.llm,
    )

    # Locally the key comes from the environment instead of platform variables.
    key_name = cfg.llm.api_key_variable
    variables = [{"name": key_name, "value": os.environ.get(key_name, "")}]

    return ChatHandler(
        processor,
        thread_id=thread_id,
        model=model or cfg.llm.model,
        system_message=system_message,
        variables=variables,
        console=console,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command()
def chat(
    thread: Optional[str] = typer.Option(None, "--thread", help="Conversation thread ID"),
    model: Optional[str] = typer.Option(None, help="Model name"),
    system: Optional[str] = typer.Option(None, "--system", help="System message"),
    max_history: Optional[int] = typer.Option(None, help="Messages kept per thread"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Start an interactive chat session."""
    cfg = load_config(
        find_config_path(),
        cli_overrides={"llm.model": model, "memory.max_history": max_history},
    )
    try:
        _check_config(cfg)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--max-history") from e
    _setup_logging(cfg, verbose)
    handler = _setup_stack(cfg, thread or str(uuid.uuid4()), model, system)
    asyncio.run(handler.run_loop())


@tools_app.command("list")
def tools_list():
    """List registered tools."""
    from agentrelay.cli.output import OutputFormatter
    from agentrelay.tools import build_default_registry

    registry = build_default_registry(load_config(find_config_path()))
    OutputFormatter(console).format_tool_list(registry.list())


@tools_app.command("info")
def tools_info(tool_name: str = typer.Argument(..., help="Tool name")):
    """Show tool details and schema."""
    from agentrelay.cli.output import OutputFormatter
    from agentrelay.tools import build_default_registry

    registry = build_default_registry(load_config(find_config_path()))
    tool = registry.get(tool_name)
    if not tool:
        console.print(f"[red]Tool not found:[/red] {tool_name}")
        raise typer.Exit(1)

    OutputFormatter(console).format_tool_info(tool)


@config_app.command("show")
def config_show():
    """Show effective config."""
    from agentrelay.cli.output import OutputFormatter

    cfg = load_config(find_config_path())
    OutputFormatter(console).format_config(cfg.to_dict())


@config_app.command("validate")
def config_validate():
    """Validate config and show any type issues."""
    config_path = find_config_path()
    try:
        cfg = load_config(config_path)
        _check_config(cfg)
        console.print("[green]Config is valid.[/green]")
        if config_path:
            console.print(f"  Loaded from: {config_path}")
        else:
            console.print("  [dim]No config file found, using defaults.[/dim]")
        console.print(f"  LLM model: {cfg.llm.model}")
        console.print(f"  Max history: {cfg.memory.max_history}")
        console.print(f"  Image model: {cfg.images.model}")
    except Exception as e:
        console.print(f"[red]Config validation failed:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """Show version."""
    console.print(f"agentrelay v{__version__}")


def main():
    app()


if __name__ == "__main__":
    main()
