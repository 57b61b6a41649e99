"""Tool registry, validation, execution and the built-in tools."""

from __future__ import annotations

from typing import Any, Callable

from agentrelay.config import RelayConfig
from agentrelay.tools.base import Tool, ToolContext
from agentrelay.tools.executor import ToolExecutor
from agentrelay.tools.image_generation import GenerateImageTool
from agentrelay.tools.registry import ToolRegistry


def build_default_registry(
    cfg: RelayConfig,
    image_client_factory: Callable[[str], Any] | None = None,
) -> ToolRegistry:
    """Registry holding the built-in tools configured from *cfg*."""
    registry = ToolRegistry()
    registry.register(
        GenerateImageTool(
            config=cfg.images,
            api_key_variable=cfg.llm.api_key_variable,
            client_factory=image_client_factory,
        )
    )
    return registry


__all__ = [
    "GenerateImageTool",
    "Tool",
    "ToolContext",
    "ToolExecutor",
    "ToolRegistry",
    "build_default_registry",
]
