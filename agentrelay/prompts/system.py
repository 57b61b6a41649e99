"""System prompt builder."""

from __future__ import annotations

from agentrelay.llm.types import Message

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant."


def format_system_prompt(
    system_message: str | None = None,
    project_system_message: str | None = None,
) -> str:
    """
    Build the system prompt for one request.

    The agent's own system message replaces the default; the project's
    system message, when present, is appended as extra context.
    """
    prompt = system_message or DEFAULT_SYSTEM_PROMPT
    if project_system_message:
        prompt += f"\n\nProject Context: {project_system_message}"
    return prompt


def build_messages(
    system_prompt: str,
    history: list[Message],
    current_message: str,
) -> list[dict]:
    """System prompt, then *history* oldest first, then the current user turn."""
    messages: list[dict] = [{"role": "system", "content": system_prompt}]
    messages.extend(msg.to_wire() for msg in history)
    messages.append({"role": "user", "content": current_message})
    return messages
