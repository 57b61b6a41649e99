"""Abstract base class for LLM providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator

from agentrelay.llm.types import StreamEvent, TextDelta


class Provider(ABC):
    """
    A provider encapsulates access to a single LLM endpoint.

    Implementations must translate the vendor's streaming wire format into
    ``TextDelta`` / ``ToolCallDelta`` / ``UsageReport`` events.
    """

    @abstractmethod
    async def stream(
        self,
        messages: list[dict],
        tools: list[dict] | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Start a streaming chat completion.

        *messages* are chat-completions wire dicts; content may be a string
        or a list of content parts.
        """
        ...
        # Make the method an async generator so sub-classes can ``yield``.
        if False:  # pragma: no cover
            yield TextDelta("")  # type: ignore[misc]

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name (e.g. ``"openai"``)."""
        ...

    @property
    def max_output_tokens(self) -> int:
        return 1000
