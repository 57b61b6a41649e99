"""agentrelay -- relay chat messages to an LLM with bounded memory and tools."""

__version__ = "0.1.0"
