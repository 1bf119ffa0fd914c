"""OpenAI provider with function calling."""

from __future__ import annotations

import json
import os
from typing import Any

from openai import AsyncOpenAI

from agent_chat_sdk.llm.base import LLMProvider, LLMResponse, ToolCall
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)


def _normalize_messages_for_openai(messages: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Serialize tool-call arguments and tool results to the strings the API expects."""
    out = []
    for m in messages:
        m = {k: v for k, v in m.items() if k != "is_error"}
        if m.get("role") == "assistant" and m.get("tool_calls"):
            normalized_calls = []
            for tc in m["tool_calls"]:
                fn = dict(tc.get("function") or {})
                args = fn.get("arguments")
                if not isinstance(args, str):
                    fn["arguments"] = json.dumps(args if args is not None else {})
                normalized_calls.append({**tc, "function": fn})
            m["tool_calls"] = normalized_calls
        if m.get("role") == "tool" and not isinstance(m.get("content"), str):
            m["content"] = json.dumps(m.get("content"), default=str)
        out.append(m)
    return out


class OpenAIProvider(LLMProvider):
    """OpenAI chat completions with tool support."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.3,
        max_tokens: int = 2000,
        timeout: float = 60.0,
    ) -> None:
        self.client = AsyncOpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"))
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    async def generate(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        *,
        system: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        messages = _normalize_messages_for_openai(messages)
        if system:
            messages = [{"role": "system", "content": system}, *messages]
        request: dict[str, Any] = {
            "model": kwargs.get("model") or self.model,
            "messages": messages,
            "temperature": kwargs.get("temperature", self.temperature),
            "max_tokens": kwargs.get("max_tokens", self.max_tokens),
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = "auto"
        try:
            response = await self.client.chat.completions.create(**request, timeout=kwargs.get("timeout", self.timeout))
        except Exception as e:
            logger.exception("openai_generate_failed", error=str(e))
            raise
        if not response.choices:
            return LLMResponse(content="", finish_reason="error")
        choice = response.choices[0]
        msg = choice.message
        tool_calls: list[ToolCall] = []
        for tc in msg.tool_calls or []:
            try:
                args = json.loads(tc.function.arguments or "{}")
            except json.JSONDecodeError:
                args = {}
            if not isinstance(args, dict):
                logger.warning("tool_arguments_not_object", tool_name=tc.function.name)
                args = {}
            tool_calls.append(ToolCall(id=tc.id, name=tc.function.name, arguments=args))
        return LLMResponse(
            content=(msg.content or "").strip(),
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason,
        )
