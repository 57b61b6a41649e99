"""LLM subsystem -- providers, stream events, and response assembly."""

from agentrelay.llm.types import (
    Message,
    PendingToolCall,
    Role,
    StreamEvent,
    StreamOutcome,
    TextDelta,
    ToolCallDelta,
    ToolInvocation,
    UsageReport,
)
from agentrelay.llm.stream_assembler import StreamAssembler
from agentrelay.llm.token_counter import TokenCounter

__all__ = [
    "Message",
    "PendingToolCall",
    "Role",
    "StreamAssembler",
    "StreamEvent",
    "StreamOutcome",
    "TextDelta",
    "TokenCounter",
    "ToolCallDelta",
    "ToolInvocation",
    "UsageReport",
]
