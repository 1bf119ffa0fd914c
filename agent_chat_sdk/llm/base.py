"""LLM provider abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolCall:
    """Single tool call from an LLM response."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class LLMResponse:
    """One model step: text plus any tool calls the model requested."""

    content: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    finish_reason: str | None = None


class LLMProvider(ABC):
    """
    Abstract base for model providers.

    Messages use the OpenAI chat shape (``role``/``content``, assistant
    ``tool_calls`` and ``tool`` result messages); tools use the OpenAI
    function-calling schema. Providers convert both to their own API.
    """

    name: str = "llm"

    @abstractmethod
    async def generate(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        *,
        system: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Generate one step; ``tools`` enables function calling."""
