"""Prompt and message-list construction."""

from agentrelay.prompts.system import (
    DEFAULT_SYSTEM_PROMPT,
    build_messages,
    format_system_prompt,
)

__all__ = ["DEFAULT_SYSTEM_PROMPT", "build_messages", "format_system_prompt"]
