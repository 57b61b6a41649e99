"""Core types for the LLM subsystem."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Union


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Message:
    """A single stored message in a conversation."""

    role: Role
    content: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_wire(self) -> dict:
        """Chat-completions message dict (timestamp stripped)."""
        return {"role": self.role.value, "content": self.content}


# ---------------------------------------------------------------------------
# Stream events
# ---------------------------------------------------------------------------


@dataclass
class TextDelta:
    """A fragment of assistant text."""

    fragment: str


@dataclass
class ToolCallDelta:
    """
    An incremental fragment of a streaming tool call.

    The first delta for an ``index`` carries ``call_id`` and ``tool_name``;
    later deltas usually carry only ``argument_fragment``.
    """

    index: int
    call_id: str | None = None
    tool_name: str | None = None
    argument_fragment: str | None = None


@dataclass
class UsageReport:
    """Token metering snapshot, normally sent once near the end."""

    data: dict[str, Any]


StreamEvent = Union[TextDelta, ToolCallDelta, UsageReport]


# ---------------------------------------------------------------------------
# Assembly results
# ---------------------------------------------------------------------------


@dataclass
class PendingToolCall:
    """Accumulator for one tool call while the stream is running."""

    call_id: str
    tool_name: str
    argument_text: str = ""


@dataclass
class ToolInvocation:
    """A finalized tool call with parsed arguments."""

    call_id: str
    tool_name: str
    arguments: Any


@dataclass
class StreamOutcome:
    """
    The complete assistant turn after consuming the full stream.

    Produced by ``StreamAssembler.finish``.
    """

    full_text: str = ""
    tool_invocations: list[ToolInvocation] = field(default_factory=list)
    usage: dict[str, Any] | None = None
