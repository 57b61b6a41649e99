"""Tests for the relay CLI commands and chat session commands."""

from __future__ import annotations

import pytest
from rich.console import Console
from typer.testing import CliRunner

from agentrelay import __version__
from agentrelay.cli.app import app
from agentrelay.cli.chat import ChatHandler
from agentrelay.llm.types import Role
from agentrelay.memory.store import ConversationStore
from agentrelay.orchestrator.core import MessageProcessor
from agentrelay.sink import BufferedSink
from agentrelay.tools.registry import ToolRegistry
from tests.mock_providers import ProviderRecorder, make_text_provider
from tests.mock_tools import EchoTool

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("AGENTRELAY_MEMORY_MAX_HISTORY", raising=False)


class TestCommands:
    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert f"agentrelay v{__version__}" in result.output

    def test_tools_list(self):
        result = runner.invoke(app, ["tools", "list"])
        assert result.exit_code == 0
        assert "generate_image" in result.output

    def test_tools_info(self):
        result = runner.invoke(app, ["tools", "info", "generate_image"])
        assert result.exit_code == 0
        assert "prompt" in result.output

    def test_tools_info_unknown(self):
        result = runner.invoke(app, ["tools", "info", "nope"])
        assert result.exit_code == 1
        assert "Tool not found" in result.output

    def test_config_show(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "gpt-4o-mini" in result.output

    def test_config_validate_defaults(self):
        result = runner.invoke(app, ["config", "validate"])
        assert result.exit_code == 0
        assert "Config is valid" in result.output

    def test_config_validate_rejects_bad_history(self, tmp_path):
        (tmp_path / "agentrelay.yaml").write_text("memory:\n  max_history: 0\n")
        result = runner.invoke(app, ["config", "validate"])
        assert result.exit_code == 1
        assert "max_history" in result.output

    def test_chat_rejects_zero_history_flag(self):
        result = runner.invoke(app, ["chat", "--max-history", "0"])
        assert result.exit_code == 2
        assert "max_history" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_chat_rejects_zero_history_from_config_file(self, tmp_path):
        (tmp_path / "agentrelay.yaml").write_text("memory:\n  max_history: 0\n")
        result = runner.invoke(app, ["chat"])
        assert result.exit_code == 2
        assert "max_history" in result.output


@pytest.fixture
def handler():
    registry = ToolRegistry()
    registry.register(EchoTool())
    processor = MessageProcessor(
        store=ConversationStore(max_history=10),
        provider_factory=ProviderRecorder(make_text_provider("hello back")),
        registry=registry,
        sink=BufferedSink(),
    )
    console = Console(record=True, width=120)
    return ChatHandler(
        processor,
        thread_id="cli-thread",
        model="gpt-test",
        variables=[{"name": "OPENAI_API_KEY", "value": "sk-test"}],
        console=console,
    )


class TestChatHandler:
    async def test_input_goes_through_processor(self, handler):
        await handler.handle_input("hello")
        history = handler.processor.store.history("cli-thread")
        assert [(m.role, m.content) for m in history] == [
            (Role.USER, "hello"),
            (Role.ASSISTANT, "hello back"),
        ]

    async def test_build_request(self, handler):
        request = handler.build_request("hi")
        assert request.thread_id == "cli-thread"
        assert request.model == "gpt-test"
        assert request.response_uuid

    async def test_quit(self, handler):
        assert await handler.handle_command("/quit") is True
        assert handler._running is False

    async def test_clear(self, handler):
        await handler.handle_input("hello")
        assert await handler.handle_command("/clear") is True
        assert handler.processor.store.history("cli-thread") == []

    async def test_switch_thread(self, handler):
        assert await handler.handle_command("/thread other") is True
        assert handler.thread_id == "other"
        assert handler.build_request("x").thread_id == "other"

    async def test_threads_and_tools_listed(self, handler):
        await handler.handle_input("hello")
        await handler.handle_command("/threads")
        await handler.handle_command("/tools")
        output = handler.console.export_text()
        assert "cli-thread" in output
        assert "echo" in output

    async def test_unknown_command_not_handled(self, handler):
        assert await handler.handle_command("/dance") is False
