"""
Assembles a streaming completion into a single ``StreamOutcome``.

Design goals:
  - Forward every text fragment to the sink the moment it arrives.
  - Accumulate ``ToolCallDelta`` fragments in slots keyed by the stream index,
    created strictly in first-seen order.
  - After each argument fragment, try to JSON-parse the accumulated text.  A
    successful parse produces a best-effort "parameters so far" notice; a
    failed parse is expected and silent.  Only the parse at stream end is
    authoritative.
  - Stream end finalizes every slot with argument text in ascending index
    order.  Unparseable arguments at that point fail the whole request
    rather than being dropped.
"""

from __future__ import annotations

import json
import logging
from typing import AsyncIterable, Awaitable, Callable

from agentrelay.errors import StreamProtocolError, UpstreamStreamError
from agentrelay.llm.types import (
    PendingToolCall,
    StreamEvent,
    StreamOutcome,
    TextDelta,
    ToolCallDelta,
    ToolInvocation,
    UsageReport,
)

logger = logging.getLogger(__name__)

Sink = Callable[[str], Awaitable[None]]


def announce_tool_call(tool_name: str) -> str:
    return f"\n🔧 **Calling function:** {tool_name}"


def format_parameters(arguments: object) -> str:
    return f"\n⚙️ **Function parameters:** {json.dumps(arguments, indent=2)}"


class StreamAssembler:
    """
    Consumes stream events for one response and forwards text to *sink*.

    An assembler is single-use: create a new one for every completion
    stream.
    """

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._text_parts: list[str] = []
        self._slots: list[PendingToolCall] = []
        self._usage: dict | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def pending(self) -> list[PendingToolCall]:
        """Tool-call slots accumulated so far, in index order."""
        return list(self._slots)

    async def feed(self, event: StreamEvent) -> None:
        """Apply one stream event."""
        if isinstance(event, TextDelta):
            await self._on_text(event)
        elif isinstance(event, ToolCallDelta):
            await self._on_tool_delta(event)
        elif isinstance(event, UsageReport):
            self._usage = event.data
            logger.debug("Usage info captured: %s", event.data)
        else:
            raise StreamProtocolError(f"Unknown stream event: {event!r}")

    def finish(self) -> StreamOutcome:
        """
        Finalize all tool-call slots and return the outcome.

        Raises ``StreamProtocolError`` if any slot's arguments do not parse.
        """
        invocations: list[ToolInvocation] = []
        for idx, slot in enumerate(self._slots):
            if not slot.argument_text:
                logger.debug("Dropping tool call %d (%s) with no arguments", idx, slot.tool_name)
                continue
            try:
                arguments = json.loads(slot.argument_text)
            except json.JSONDecodeError as exc:
                raise StreamProtocolError(
                    f"tool_call_json_parse_failed idx={idx} "
                    f"name={slot.tool_name} err={exc}"
                ) from exc
            invocations.append(
                ToolInvocation(
                    call_id=slot.call_id,
                    tool_name=slot.tool_name,
                    arguments=arguments,
                )
            )

        return StreamOutcome(
            full_text="".join(self._text_parts),
            tool_invocations=invocations,
            usage=self._usage,
        )

    async def consume(self, events: AsyncIterable[StreamEvent]) -> StreamOutcome:
        """
        Drive *events* to exhaustion and return the outcome.

        If the event source raises, an error notice is forwarded to the sink
        and ``UpstreamStreamError`` is raised; no partial outcome is returned.
        Errors raised while handling an event (protocol violations, sink
        failures) propagate unchanged.
        """
        iterator = aiter(events)
        while True:
            try:
                event = await anext(iterator)
            except StopAsyncIteration:
                break
            except Exception as exc:
                logger.error("Completion stream failed: %s", exc)
                await self._sink(f"\n❌ **Stream error:** {exc}")
                raise UpstreamStreamError(str(exc)) from exc
            await self.feed(event)

        outcome = self.finish()
        logger.info(
            "Stream complete: %d chars, %d tool call(s)",
            len(outcome.full_text),
            len(outcome.tool_invocations),
        )
        return outcome

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _on_text(self, event: TextDelta) -> None:
        if not event.fragment:
            return
        self._text_parts.append(event.fragment)
        await self._sink(event.fragment)

    async def _on_tool_delta(self, event: ToolCallDelta) -> None:
        if event.index < 0 or event.index > len(self._slots):
            raise StreamProtocolError(
                f"tool call index {event.index} skips ahead of "
                f"{len(self._slots)} known slot(s)"
            )

        if event.index == len(self._slots):
            if not event.call_id or not event.tool_name:
                raise StreamProtocolError(
                    f"tool call index {event.index} introduced without id and name"
                )
            self._slots.append(
                PendingToolCall(call_id=event.call_id, tool_name=event.tool_name)
            )
            logger.info("New function call initialized: %s", event.tool_name)
            await self._sink(announce_tool_call(event.tool_name))

        if not event.argument_fragment:
            return

        slot = self._slots[event.index]
        slot.argument_text += event.argument_fragment

        try:
            parsed = json.loads(slot.argument_text)
        except json.JSONDecodeError:
            # Not complete yet.
            return
        await self._sink(format_parameters(parsed))
