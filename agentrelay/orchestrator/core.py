"""
Orchestrator core -- handles one incoming chat message end to end.

The processor:
1. Resolves the OpenAI key from the request variables
2. Records the user turn and reads back the bounded history
3. Builds the message list and applies attachment preprocessing
4. Streams the completion through a StreamAssembler, forwarding text
5. Executes any assembled tool invocations
6. Records the assistant turn once and completes the response
"""

from __future__ import annotations

import logging

from agentrelay.attachments import AttachmentProcessor
from agentrelay.config import LLMConfig
from agentrelay.errors import AgentRelayError, MissingCredentialError
from agentrelay.llm.providers import ProviderFactory
from agentrelay.llm.stream_assembler import StreamAssembler
from agentrelay.llm.types import Role
from agentrelay.memory.store import ConversationStore
from agentrelay.prompts.system import build_messages, format_system_prompt
from agentrelay.sink import ResponseSink
from agentrelay.tools.base import ToolContext
from agentrelay.tools.executor import ToolExecutor
from agentrelay.tools.registry import ToolRegistry
from agentrelay.types import ChatRequest
from agentrelay.variables import Variables

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Sorry, the OpenAI API key is missing or empty. From menu right go to admin "
    "mode, then agents and edit the agent in last section you can set the openai key."
)


class MessageProcessor:
    """
    Parameters
    ----------
    store : ConversationStore
        Bounded per-thread history.
    provider_factory : ProviderFactory
        Builds an LLM provider from ``(api_key, model)``.
    registry : ToolRegistry
        Tools offered to the model.
    sink : ResponseSink
        Receives streamed fragments, the final response and errors.
    attachments : AttachmentProcessor
        PDF / image preprocessing.
    llm_config : LLMConfig
        Default model and the name of the API-key variable.
    """

    def __init__(
        self,
        store: ConversationStore,
        provider_factory: ProviderFactory,
        registry: ToolRegistry,
        sink: ResponseSink,
        attachments: AttachmentProcessor | None = None,
        llm_config: LLMConfig | None = None,
    ) -> None:
        self.store = store
        self.provider_factory = provider_factory
        self.registry = registry
        self.sink = sink
        self.attachments = attachments or AttachmentProcessor()
        self.llm_config = llm_config or LLMConfig()
        self.executor = ToolExecutor(registry)

    async def process(self, request: ChatRequest) -> None:
        """
        Process *request*; every outcome is reported through the sink.

        Nothing is raised to the caller.
        """
        logger.info(
            "Processing message for thread %s (response %s, model %s): %.100s",
            request.thread_id,
            request.response_uuid,
            request.model or self.llm_config.model,
            request.message,
        )

        try:
            api_key = self._require_api_key(request)
        except MissingCredentialError:
            logger.error("OpenAI API key not found or empty in variables")
            await self.sink.stream_chunk(request, MISSING_KEY_MESSAGE)
            await self.sink.complete(request, MISSING_KEY_MESSAGE)
            return

        try:
            await self._run(request, api_key)
        except AgentRelayError as e:
            logger.error("Request %s failed: %s", request.response_uuid, e)
            await self.sink.send_error(request, f"Error processing message: {e}")
        except Exception as e:
            logger.exception("Unexpected failure processing %s", request.response_uuid)
            await self.sink.send_error(request, f"Error processing message: {e}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_api_key(self, request: ChatRequest) -> str:
        key = Variables(request.variables).get(self.llm_config.api_key_variable)
        if not key:
            raise MissingCredentialError(self.llm_config.api_key_variable)
        return key

    async def _run(self, request: ChatRequest, api_key: str) -> None:
        thread_id = request.thread_id

        self.store.append(thread_id, Role.USER, request.message)
        # The current turn is last; it is re-added by build_messages.
        prior = self.store.history(thread_id)[:-1]

        system_prompt = format_system_prompt(
            request.system_message, request.project_system_message
        )
        messages = build_messages(system_prompt, prior, request.message)
        messages = await self.attachments.apply(request, messages)

        model = request.model or self.llm_config.model
        provider = self.provider_factory(api_key, model)
        tools = self.registry.to_openai_schema() or None
        logger.debug("Sending %d message(s) to %s", len(messages), model)

        async def forward(text: str) -> None:
            await self.sink.stream_chunk(request, text)

        assembler = StreamAssembler(forward)
        outcome = await assembler.consume(provider.stream(messages, tools=tools))

        context = ToolContext(request=request, sink=self.sink)
        summary = await self.executor.run(outcome.tool_invocations, context)
        full_text = outcome.full_text + summary.text

        self.store.append(thread_id, Role.ASSISTANT, full_text)

        if summary.attachment_url:
            logger.info("Including generated file in response: %s", summary.attachment_url)
        await self.sink.complete(
            request, full_text, usage=outcome.usage, file_url=summary.attachment_url
        )
        logger.info("Message processing completed for thread %s", thread_id)
