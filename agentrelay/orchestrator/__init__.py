"""Request orchestration."""

from agentrelay.orchestrator.core import MISSING_KEY_MESSAGE, MessageProcessor

__all__ = ["MISSING_KEY_MESSAGE", "MessageProcessor"]
