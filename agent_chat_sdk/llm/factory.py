"""LLM provider factory from config with optional fallback."""

from __future__ import annotations

from typing import Any

from agent_chat_sdk.llm.base import LLMProvider, LLMResponse
from agent_chat_sdk.utils.config import load_config
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)


def create_provider(provider: str, **kwargs: Any) -> LLMProvider:
    """Create a single LLM provider by name; kwargs are passed to its constructor."""
    provider = (provider or "anthropic").lower()
    if provider == "anthropic":
        from agent_chat_sdk.llm.anthropic import AnthropicProvider
        return AnthropicProvider(**kwargs)
    if provider == "openai":
        from agent_chat_sdk.llm.openai import OpenAIProvider
        return OpenAIProvider(**kwargs)
    raise ValueError(f"Unknown LLM provider: {provider}")


class FallbackLLMProvider(LLMProvider):
    """Wraps primary and fallback; on primary failure, tries fallback once."""

    name = "fallback"

    def __init__(self, primary: LLMProvider, fallback: LLMProvider) -> None:
        self.primary = primary
        self.fallback = fallback

    async def generate(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        *,
        system: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        try:
            return await self.primary.generate(messages, tools, system=system, **kwargs)
        except Exception as e:
            logger.warning("llm_primary_failed", provider=self.primary.name, error=str(e))
            return await self.fallback.generate(messages, tools, system=system, **kwargs)


def get_llm_from_config(config: dict[str, Any] | None = None) -> LLMProvider:
    """
    Build the provider from ``llm.primary`` and optional ``llm.fallback``.

    API keys fall back to ANTHROPIC_API_KEY / OPENAI_API_KEY from the environment.
    """
    config = config if config is not None else load_config()
    llm_cfg = config.get("llm", {})
    temperature = config.get("agent", {}).get("temperature")
    primary_cfg = dict(llm_cfg.get("primary") or {"provider": "anthropic"})
    if temperature is not None:
        primary_cfg.setdefault("temperature", temperature)
    primary = create_provider(primary_cfg.pop("provider", "anthropic"), **primary_cfg)
    fallback_cfg = llm_cfg.get("fallback")
    if not fallback_cfg:
        return primary
    fallback_cfg = dict(fallback_cfg)
    fallback = create_provider(fallback_cfg.pop("provider", "openai"), **fallback_cfg)
    return FallbackLLMProvider(primary, fallback)
