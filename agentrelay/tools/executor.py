"""
Runs finalized tool invocations one after another.

Failures are contained per invocation: an unknown tool, invalid arguments or
an exception inside the tool become inline error text in the combined
result, and the remaining invocations still run.
"""

from __future__ import annotations

import json
import logging

from agentrelay.errors import ErrorCode
from agentrelay.llm.types import ToolInvocation
from agentrelay.tools.base import ToolContext
from agentrelay.tools.registry import ToolRegistry
from agentrelay.tools.validation import ToolValidator
from agentrelay.types import ExecutionSummary, ToolResult

logger = logging.getLogger(__name__)


class ToolExecutor:
    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def run(
        self,
        invocations: list[ToolInvocation],
        context: ToolContext,
    ) -> ExecutionSummary:
        """
        Execute *invocations* in order and fold their output together.

        The first attachment URL produced wins.
        """
        summary = ExecutionSummary()
        if not invocations:
            logger.debug("No function calls to process")
            return summary

        logger.info("Processing %d function call(s)", len(invocations))
        for invocation in invocations:
            result = await self._execute(invocation, context)
            summary.results.append(result)
            summary.text += result.content
            if result.attachment_url and summary.attachment_url is None:
                summary.attachment_url = result.attachment_url

        return summary

    async def _execute(
        self, invocation: ToolInvocation, context: ToolContext
    ) -> ToolResult:
        name = invocation.tool_name
        logger.info("Processing function: %s", name)
        await context.emit(f"\n⚙️ **Processing function:** {name}")

        tool = self.registry.get(name)
        if tool is None:
            message = f"Unknown function: {name}"
            logger.error(message)
            return ToolResult(
                success=False,
                content=f"\n\n❌ **Function Error:** {message}",
                error=message,
                error_code=ErrorCode.UNKNOWN_TOOL,
            )

        valid, error_msg = ToolValidator.validate(tool, invocation.arguments)
        if not valid:
            message = f"Invalid arguments for {name}: {error_msg}"
            logger.error("%s (args=%s)", message, json.dumps(invocation.arguments, default=str))
            return ToolResult(
                success=False,
                content=f"\n\n❌ **Function Error:** {message}",
                error=message,
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        try:
            return await tool.execute(context, **invocation.arguments)
        except Exception as e:
            message = f"Error executing function {name}: {e}"
            logger.exception(message)
            return ToolResult(
                success=False,
                content=f"\n\n❌ **Function Execution Error:** {message}",
                error=str(e),
                error_code=getattr(e, "error_code", ErrorCode.TOOL_EXCEPTION),
            )
