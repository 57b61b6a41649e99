from __future__ import annotations

import logging

from jsonschema import SchemaError

from agentrelay.tools.base import Tool
from agentrelay.tools.validation import ToolValidator

logger = logging.getLogger(__name__)


class ToolRegistry:
    """
    Closed name -> tool mapping.

    The executor only ever looks tools up here; offering a new capability to
    the model means registering another ``Tool``.
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool, *, overwrite: bool = False) -> None:
        if tool.name in self._tools and not overwrite:
            raise ValueError(f"Tool already registered: {tool.name}")
        try:
            ToolValidator.check_schema(tool)
        except SchemaError as e:
            raise ValueError(f"Invalid parameter schema for {tool.name}: {e.message}") from e
        self._tools[tool.name] = tool
        logger.debug("Registered tool %s", tool.name)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def require(self, name: str) -> Tool:
        t = self.get(name)
        if not t:
            raise KeyError(name)
        return t

    def list(self) -> list[Tool]:
        return sorted(self._tools.values(), key=lambda t: t.name)

    def to_openai_schema(self) -> list[dict]:
        """Function-calling ``tools`` payload, empty when nothing is registered."""
        return [t.to_openai_schema() for t in self.list()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
