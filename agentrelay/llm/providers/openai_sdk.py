"""
OpenAI SDK provider.

Wraps ``openai.AsyncOpenAI`` chat completions and exposes the streamed
response as agentrelay stream events.  Usage is requested via
``stream_options={"include_usage": True}`` so the last chunk carries a
metering record.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator

import openai

from agentrelay.llm.providers.base import Provider
from agentrelay.llm.types import StreamEvent, TextDelta, ToolCallDelta, UsageReport

logger = logging.getLogger(__name__)


class OpenAIProvider(Provider):
    """
    Stream-capable provider backed by the official ``openai`` package.

    Parameters
    ----------
    api_key:
        OpenAI API key.
    model:
        Model identifier.
    base_url:
        Override the base URL (proxies, compatible servers).
    max_output:
        ``max_tokens`` sent with every request.
    temperature:
        Sampling temperature.
    timeout:
        Request timeout in seconds.
    client:
        Pre-built ``AsyncOpenAI`` (or compatible) client.  Mostly for tests.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        max_output: int = 1000,
        temperature: float = 0.7,
        timeout: float = 120.0,
        client: Any = None,
    ) -> None:
        self._model = model
        self._max_output = max_output
        self._temperature = temperature
        if client is None:
            kwargs: dict = {"api_key": api_key, "timeout": timeout}
            if base_url:
                kwargs["base_url"] = base_url
            client = openai.AsyncOpenAI(**kwargs)
        self._client = client

    # ------------------------------------------------------------------
    # Provider interface
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return "openai"

    @property
    def model(self) -> str:
        return self._model

    @property
    def max_output_tokens(self) -> int:
        return self._max_output

    async def stream(
        self,
        messages: list[dict],
        tools: list[dict] | None = None,
    ) -> AsyncIterator[StreamEvent]:
        kwargs: dict = {
            "model": self._model,
            "messages": messages,
            "max_tokens": self._max_output,
            "temperature": self._temperature,
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        logger.info(
            "REQUEST: model=%s tools=%d messages=%d",
            self._model,
            len(tools) if tools else 0,
            len(messages),
        )

        response_stream = await self._client.chat.completions.create(**kwargs)
        async for chunk in response_stream:
            for event in chunk_to_events(chunk):
                yield event


def chunk_to_events(chunk: Any) -> list[StreamEvent]:
    """Translate one SDK ``ChatCompletionChunk`` into stream events."""
    events: list[StreamEvent] = []

    choices = getattr(chunk, "choices", None) or []
    if choices:
        delta = getattr(choices[0], "delta", None)
        content = getattr(delta, "content", None) if delta else None
        if content:
            events.append(TextDelta(content))

        raw_tcs = getattr(delta, "tool_calls", None) if delta else None
        for raw_tc in raw_tcs or []:
            func = getattr(raw_tc, "function", None)
            events.append(
                ToolCallDelta(
                    index=getattr(raw_tc, "index", 0),
                    call_id=getattr(raw_tc, "id", None),
                    tool_name=getattr(func, "name", None) if func else None,
                    argument_fragment=getattr(func, "arguments", None) if func else None,
                )
            )

    usage = getattr(chunk, "usage", None)
    if usage is not None:
        if hasattr(usage, "model_dump"):
            usage = usage.model_dump()
        events.append(UsageReport(dict(usage)))

    return events
