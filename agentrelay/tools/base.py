from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from agentrelay.sink import ResponseSink
from agentrelay.types import ChatRequest, ToolResult


def normalize_schema(schema: dict) -> dict:
    s = dict(schema or {})
    s.setdefault("type", "object")
    s.setdefault("additionalProperties", False)
    return s


@dataclass
class ToolContext:
    """What a tool sees of the request it is running for."""

    request: ChatRequest
    sink: ResponseSink

    async def emit(self, text: str) -> None:
        await self.sink.stream_chunk(self.request, text)


class Tool(ABC):
    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    @abstractmethod
    def parameters(self) -> dict: ...

    @abstractmethod
    async def execute(self, context: ToolContext, **kwargs) -> ToolResult: ...

    def to_openai_schema(self) -> dict:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": normalize_schema(self.parameters),
            },
        }
