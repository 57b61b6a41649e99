"""LLM providers and the factory used to build one per request."""

from __future__ import annotations

from typing import Callable

from agentrelay.config import LLMConfig
from agentrelay.llm.providers.base import Provider
from agentrelay.llm.providers.openai_sdk import OpenAIProvider

# (api_key, model) -> Provider
ProviderFactory = Callable[[str, str], Provider]


def openai_provider_factory(cfg: LLMConfig) -> ProviderFactory:
    """Return a factory that builds ``OpenAIProvider`` instances from *cfg*."""

    def _build(api_key: str, model: str) -> Provider:
        return OpenAIProvider(
            api_key=api_key,
            model=model or cfg.model,
            base_url=cfg.api_base or None,
            max_output=cfg.max_output_tokens,
            temperature=cfg.temperature,
            timeout=float(cfg.timeout_seconds),
        )

    return _build


__all__ = ["OpenAIProvider", "Provider", "ProviderFactory", "openai_provider_factory"]
