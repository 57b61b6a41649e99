from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ChatRequest:
    """One incoming chat message from the agent platform."""

    thread_id: str
    message: str
    response_uuid: str = ""
    model: str = ""
    system_message: str | None = None
    project_system_message: str | None = None
    variables: list[dict[str, Any]] = field(default_factory=list)
    file_type: str | None = None
    file_url: str | None = None
    stream_url: str | None = None
    stream_token: str | None = None


@dataclass
class ToolResult:
    success: bool
    content: str
    attachment_url: str | None = None
    error: str | None = None
    error_code: str | None = None
    metadata: dict = field(default_factory=dict)


@dataclass
class ExecutionSummary:
    """Combined output of every tool invocation in one response."""

    text: str = ""
    attachment_url: str | None = None
    results: list[ToolResult] = field(default_factory=list)
