"""
In-memory, per-thread conversation history with a fixed retention bound.

History lives only for the lifetime of the process.  Each thread keeps at
most ``max_history`` messages; appending beyond that evicts the oldest.
"""

from __future__ import annotations

import logging

from agentrelay.llm.types import Message, Role

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Bounded FIFO message history keyed by conversation (thread) id.

    Usage::

        store = ConversationStore(max_history=10)
        store.append("thread-1", Role.USER, "hello")
        for msg in store.history("thread-1"):
            ...
    """

    def __init__(self, max_history: int = 10) -> None:
        if max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {max_history}")
        self.max_history = max_history
        self._conversations: dict[str, list[Message]] = {}

    def append(self, key: str, role: Role | str, content: str) -> None:
        """Append a message to *key*, evicting the oldest past the bound."""
        thread = self._conversations.setdefault(key, [])
        thread.append(Message(role=Role(role), content=content))
        while len(thread) > self.max_history:
            thread.pop(0)

    def history(self, key: str) -> list[Message]:
        """Return a copy of the history for *key* (oldest first)."""
        return list(self._conversations.get(key, ()))

    def clear(self, key: str) -> None:
        self._conversations.pop(key, None)
        logger.debug("Cleared history for thread %s", key)

    def keys(self) -> set[str]:
        return {k for k, msgs in self._conversations.items() if msgs}

    def count(self) -> int:
        return len(self._conversations)
