"""
Response sinks -- where streamed fragments and final responses are delivered.

The core treats a sink as fire-and-forget: nothing it returns is inspected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from agentrelay.types import ChatRequest


class ResponseSink(ABC):
    @abstractmethod
    async def stream_chunk(self, request: ChatRequest, text: str) -> None:
        """Deliver one streamed fragment for *request*."""
        ...

    @abstractmethod
    async def complete(
        self,
        request: ChatRequest,
        text: str,
        usage: dict[str, Any] | None = None,
        file_url: str | None = None,
    ) -> None:
        """Signal that the response for *request* is finished."""
        ...

    @abstractmethod
    async def send_error(self, request: ChatRequest, message: str) -> None:
        """Report a request-level failure."""
        ...


@dataclass
class Completion:
    text: str
    usage: dict[str, Any] | None = None
    file_url: str | None = None


class BufferedSink(ResponseSink):
    """Keeps everything in memory, keyed by ``response_uuid``."""

    def __init__(self) -> None:
        self.chunks: dict[str, list[str]] = {}
        self.completions: dict[str, Completion] = {}
        self.errors: dict[str, list[str]] = {}

    async def stream_chunk(self, request: ChatRequest, text: str) -> None:
        self.chunks.setdefault(request.response_uuid, []).append(text)

    async def complete(
        self,
        request: ChatRequest,
        text: str,
        usage: dict[str, Any] | None = None,
        file_url: str | None = None,
    ) -> None:
        self.completions[request.response_uuid] = Completion(text, usage, file_url)

    async def send_error(self, request: ChatRequest, message: str) -> None:
        self.errors.setdefault(request.response_uuid, []).append(message)

    def streamed_text(self, response_uuid: str) -> str:
        return "".join(self.chunks.get(response_uuid, []))
