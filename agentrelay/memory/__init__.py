"""Conversation memory."""

from agentrelay.memory.store import ConversationStore

__all__ = ["ConversationStore"]
